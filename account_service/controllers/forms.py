"""
Form Controllers
Per-form submission state machines for login, signup and profile editing
"""

import inspect
import re
from typing import Any, Awaitable, Callable, Optional, Union
import logging

from account_service.models.state import (
    AvatarFile, Credentials, ProfileFields, SignupCredentials, SubmissionState
)
from account_service.services.profile_service import ProfileService
from account_service.services.session_service import SessionProvider
from account_service.utils.errors import (
    NETWORK_ERROR_MESSAGE, is_network_error, provider_error_message
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

REQUIRED_FIELDS_ERROR = "Email and password are required"
INVALID_EMAIL_ERROR = "Please enter a valid email address"
PASSWORD_MISMATCH_ERROR = "Passwords do not match."
UNEXPECTED_ERROR = "Something went wrong. Please try again."

SIGN_IN_SUCCEEDED = "Signed in successfully"
SIGN_IN_FAILED = "Invalid email or password"
SIGN_UP_SUCCEEDED = "Account created successfully"
SIGN_UP_CONFIRM_EMAIL = "Check your email to confirm your account."
SIGN_UP_FAILED = "Failed to create account"

RefreshCallback = Callable[[], Union[None, Awaitable[None]]]


def is_valid_email(email: str) -> bool:
    """Basic email shape check"""
    return bool(EMAIL_PATTERN.match(email or ""))


def auth_failure(error: Exception, fallback: str) -> SubmissionState:
    """Map an auth provider exception onto a failed state"""
    if is_network_error(error):
        return SubmissionState.failed(NETWORK_ERROR_MESSAGE)
    return SubmissionState.failed(provider_error_message(error) or fallback)


class FormController:
    """
    Base submission state machine

    idle -> validating -> (loading -> succeeded | failed) | idle with a
    validation error. Validation is synchronous and never enters loading.
    While loading, submit() does nothing and returns the current state.
    """

    def __init__(self):
        self.state: SubmissionState = SubmissionState.idle()
        self.validation_error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.state.is_loading

    @property
    def error(self) -> Optional[str]:
        """Message to show under the form"""
        return self.validation_error or self.state.error

    @property
    def success(self) -> Optional[str]:
        return self.state.success

    @property
    def fields_complete(self) -> bool:
        return True

    @property
    def can_submit(self) -> bool:
        return self.fields_complete and not self.loading

    def validate(self) -> Optional[str]:
        """Return a validation message, or None when the input is valid"""
        return None

    async def perform(self) -> SubmissionState:
        raise NotImplementedError

    async def submit(self) -> SubmissionState:
        if self.loading:
            logger.debug(f"{type(self).__name__}: submit ignored while loading")
            return self.state

        self.validation_error = self.validate()
        if self.validation_error:
            self.state = SubmissionState.idle()
            return self.state

        self.state = SubmissionState.loading()
        try:
            result = await self.perform()
        except Exception as e:
            logger.error(f"{type(self).__name__}: submission failed: {e}", exc_info=True)
            result = SubmissionState.failed(UNEXPECTED_ERROR)

        if not result.is_terminal:
            logger.error(f"{type(self).__name__}: non-terminal result {result.status}")
            result = SubmissionState.failed(UNEXPECTED_ERROR)

        self.state = result
        return self.state


class LoginFormController(FormController):
    """Email/password sign-in form"""

    def __init__(self, session: SessionProvider, email: str = "", password: str = ""):
        super().__init__()
        self.session = session
        self.email = email
        self.password = password

    @property
    def fields_complete(self) -> bool:
        return bool(self.email.strip() and self.password.strip())

    def validate(self) -> Optional[str]:
        if not self.fields_complete:
            return REQUIRED_FIELDS_ERROR
        if not is_valid_email(self.email):
            return INVALID_EMAIL_ERROR
        return None

    async def perform(self) -> SubmissionState:
        try:
            await self.session.sign_in(Credentials(email=self.email, password=self.password))
        except Exception as e:
            logger.warning(f"Sign in failed for {self.email}: {e}")
            return auth_failure(e, SIGN_IN_FAILED)
        return SubmissionState.succeeded(SIGN_IN_SUCCEEDED)


class SignupFormController(FormController):
    """Email/password registration form"""

    def __init__(
        self,
        session: SessionProvider,
        email: str = "",
        password: str = "",
        confirm_password: str = ""
    ):
        super().__init__()
        self.session = session
        self.email = email
        self.password = password
        self.confirm_password = confirm_password
        # Set when the provider returned a session immediately
        self.authenticated = False

    @property
    def fields_complete(self) -> bool:
        return bool(self.email.strip() and self.password.strip() and self.confirm_password.strip())

    def validate(self) -> Optional[str]:
        if not self.fields_complete:
            return REQUIRED_FIELDS_ERROR
        if not is_valid_email(self.email):
            return INVALID_EMAIL_ERROR
        if self.password != self.confirm_password:
            return PASSWORD_MISMATCH_ERROR
        return None

    async def perform(self) -> SubmissionState:
        self.authenticated = False
        credentials = SignupCredentials(
            email=self.email,
            password=self.password,
            confirm_password=self.confirm_password
        )
        try:
            response = await self.session.sign_up(credentials)
        except Exception as e:
            logger.warning(f"Sign up failed for {self.email}: {e}")
            return auth_failure(e, SIGN_UP_FAILED)

        if getattr(response, "session", None):
            self.authenticated = True
            return SubmissionState.succeeded(SIGN_UP_SUCCEEDED)
        return SubmissionState.succeeded(SIGN_UP_CONFIRM_EMAIL)


class ProfileFormController(FormController):
    """
    Profile editing form

    Length checks live in ProfileService.update_profile so that every caller
    gets them; the controller only adds the refresh hook, called once per
    successful submission.
    """

    def __init__(
        self,
        profiles: ProfileService,
        full_name: str = "",
        bio: str = "",
        avatar_file: Optional[AvatarFile] = None,
        on_success: Optional[RefreshCallback] = None
    ):
        super().__init__()
        self.profiles = profiles
        self.full_name = full_name
        self.bio = bio
        self.avatar_file = avatar_file
        self.on_success = on_success

    def fields(self) -> ProfileFields:
        return ProfileFields(full_name=self.full_name, bio=self.bio, avatar_file=self.avatar_file)

    async def perform(self) -> SubmissionState:
        result = await self.profiles.update_profile(self.fields())
        if result.is_success and self.on_success is not None:
            await self._refresh()
        return result

    async def _refresh(self) -> None:
        try:
            outcome: Any = self.on_success()
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            # The update itself went through; a failed refresh only leaves stale data on screen
            logger.error(f"Profile refresh failed: {e}")
