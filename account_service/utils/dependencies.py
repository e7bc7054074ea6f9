"""
FastAPI Dependencies
Per-request Supabase client, session and profile services, and
authentication guards
"""

from fastapi import Depends, HTTPException, Request, status
from typing import Annotated, Optional
import logging

from supabase import Client

from account_service.models.state import AuthenticatedUser
from account_service.services.profile_service import ProfileService
from account_service.services.session_service import SessionProvider
from account_service.utils.errors import AuthenticationError
from account_service.utils import supabase_client as clients

logger = logging.getLogger(__name__)


def get_request_client(request: Request) -> Client:
    """
    Get the cookie-backed client of this request

    The session middleware normally creates it; requests that bypass the
    middleware get one created here.
    """
    client = getattr(request.state, "supabase", None)
    if client is None:
        storage = clients.CookieSessionStorage(request.cookies)
        client = clients.create_server_client(storage)
        request.state.supabase_storage = storage
        request.state.supabase = client
    return client


def get_session_provider(request: Request, client: Client = Depends(get_request_client)) -> SessionProvider:
    """Session adapter for the request client"""
    provider = SessionProvider(client)
    if hasattr(request.state, "auth_user_response"):
        provider.remember_user_response(request.state.auth_user_response)
    return provider


def get_profile_service(
    client: Client = Depends(get_request_client),
    session: SessionProvider = Depends(get_session_provider)
) -> ProfileService:
    """Profile service for the request client"""
    return ProfileService(client, session=session)


async def get_current_user(
    session: SessionProvider = Depends(get_session_provider)
) -> AuthenticatedUser:
    """
    Get the signed in user of this request

    Raises:
        AuthenticationError: If nobody is signed in
        HTTPException: If the provider rejected the session
    """
    try:
        return await session.require_user()
    except AuthenticationError:
        raise
    except Exception as e:
        logger.error(f"Session verification error: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed"
        )


async def get_optional_user(
    session: SessionProvider = Depends(get_session_provider)
) -> Optional[AuthenticatedUser]:
    """
    Get the signed in user, or None (for pages that work either way)
    """
    try:
        return await session.get_current_user()
    except Exception as e:
        logger.warning(f"Optional authentication failed: {e}")
        return None


# Type aliases for cleaner dependency injection
SessionDep = Annotated[SessionProvider, Depends(get_session_provider)]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
OptionalUser = Annotated[Optional[AuthenticatedUser], Depends(get_optional_user)]
