"""
Session Service
Adapter over the Supabase auth client for reading and changing the session
"""

from typing import Any, Dict, Optional
import logging

from supabase import AuthSessionMissingError, Client

from account_service.models.state import AuthenticatedUser, Credentials
from account_service.utils.errors import AuthenticationError

logger = logging.getLogger(__name__)

_UNSET = object()


def ensure_user(user: Optional[AuthenticatedUser]) -> AuthenticatedUser:
    """
    Return the user, or raise if there is none

    Raises:
        AuthenticationError: If user is None
    """
    if not user:
        raise AuthenticationError()
    return user


class SessionProvider:
    """
    Session operations for one Supabase client

    The client decides the execution context: a per-request cookie-backed
    client on the server, or the shared interactive client. Provider errors
    raised by the SDK propagate to the caller; state bookkeeping around
    sign-in/sign-up/sign-out belongs to the form controllers.
    """

    def __init__(self, client: Client):
        self.client = client
        self._user_response: Any = _UNSET

    def remember_user_response(self, response: Any) -> None:
        """
        Reuse a get_user() response already fetched for this request

        Dropped again by sign_in, sign_up and sign_out.
        """
        self._user_response = response

    async def get_current_user(self) -> Optional[AuthenticatedUser]:
        """
        Get the signed in user

        Returns:
            AuthenticatedUser or None when there is no session

        Raises:
            AuthError: If the provider rejects the session or cannot be reached
        """
        response = self._user_response
        if response is _UNSET:
            try:
                response = self.client.auth.get_user()
            except AuthSessionMissingError:
                return None

        if not response or not response.user:
            return None
        return AuthenticatedUser.from_provider(response.user)

    async def require_user(self) -> AuthenticatedUser:
        """
        Get the signed in user, failing if there is none

        Raises:
            AuthenticationError: If nobody is signed in
        """
        return ensure_user(await self.get_current_user())

    async def sign_in(self, credentials: Credentials) -> Any:
        """Sign in with email and password"""
        self._user_response = _UNSET
        response = self.client.auth.sign_in_with_password({
            "email": credentials.email,
            "password": credentials.password
        })
        logger.info(f"User signed in: {credentials.email}")
        return response

    async def sign_up(self, credentials: Credentials, metadata: Optional[Dict[str, Any]] = None) -> Any:
        """
        Register a new user

        The response carries a session only when the project does not require
        email confirmation.
        """
        self._user_response = _UNSET
        response = self.client.auth.sign_up({
            "email": credentials.email,
            "password": credentials.password,
            "options": {
                "data": metadata or {}
            }
        })
        logger.info(f"User signed up: {credentials.email}")
        return response

    async def sign_out(self) -> None:
        """End the current session"""
        self._user_response = _UNSET
        self.client.auth.sign_out()
        logger.info("User signed out")
