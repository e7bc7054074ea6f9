"""
Authentication Routes
Login, registration, logout and current user
"""

from fastapi import APIRouter, HTTPException, status
import logging

from shared.schemas.user import (
    UserLoginSchema, UserSignupSchema, AuthenticatedUserSchema,
    SubmissionResponseSchema, SignupResponseSchema
)

from account_service.controllers.forms import (
    FormController, LoginFormController, SignupFormController
)
from account_service.utils.dependencies import SessionDep, CurrentUser
from account_service.utils.errors import NETWORK_ERROR_MESSAGE

logger = logging.getLogger(__name__)

router = APIRouter()


def raise_for_failure(controller: FormController, failure_status: int) -> None:
    """Turn a controller's validation error or failed state into an HTTP error"""
    if controller.validation_error:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=controller.validation_error
        )
    if controller.state.is_failure:
        if controller.state.message == NETWORK_ERROR_MESSAGE:
            failure_status = status.HTTP_503_SERVICE_UNAVAILABLE
        raise HTTPException(status_code=failure_status, detail=controller.state.message)


@router.post("/login", response_model=SubmissionResponseSchema)
async def login(login_data: UserLoginSchema, session: SessionDep):
    """
    Sign in with email and password

    Session cookies are set on the response by the session middleware
    """
    controller = LoginFormController(session, login_data.email, login_data.password)
    state = await controller.submit()
    raise_for_failure(controller, status.HTTP_401_UNAUTHORIZED)

    return {
        "success": True,
        "status": state.status.value,
        "message": state.message
    }


@router.post("/signup", response_model=SignupResponseSchema, status_code=status.HTTP_201_CREATED)
async def signup(signup_data: UserSignupSchema, session: SessionDep):
    """
    Register a new account

    When the project requires email confirmation no session is issued and
    the response asks the user to check their email.
    """
    controller = SignupFormController(
        session,
        signup_data.email,
        signup_data.password,
        signup_data.confirm_password
    )
    state = await controller.submit()
    raise_for_failure(controller, status.HTTP_400_BAD_REQUEST)

    return {
        "success": True,
        "status": state.status.value,
        "message": state.message,
        "authenticated": controller.authenticated
    }


@router.post("/logout", response_model=SubmissionResponseSchema)
async def logout(session: SessionDep):
    """End the current session and clear the session cookies"""
    try:
        await session.sign_out()
    except Exception as e:
        logger.error(f"Logout error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Logout failed"
        )

    return {
        "success": True,
        "status": "succeeded",
        "message": "Signed out"
    }


@router.get("/me", response_model=AuthenticatedUserSchema)
async def current_user(user: CurrentUser):
    """Get the signed in user"""
    return AuthenticatedUserSchema(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        created_at=user.created_at
    )
