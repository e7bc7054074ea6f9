"""
Auth State Observer
Observable view of the interactive client's session with an explicit
mount/unmount lifecycle
"""

from typing import Any, Callable, List, Optional
import logging

from supabase import AuthSessionMissingError, Client

from account_service.models.state import AuthenticatedUser

logger = logging.getLogger(__name__)

Listener = Callable[[Optional[AuthenticatedUser]], None]


class AuthStateObserver:
    """
    Tracks the signed in user of one Supabase client

    mount() loads the current user and subscribes to provider auth events;
    unmount() drops the subscription. Events delivered after unmount are
    ignored. Consumers register listeners with subscribe(), which returns a
    callable that removes the listener again.
    """

    def __init__(self, client: Client):
        self.client = client
        self.user: Optional[AuthenticatedUser] = None
        self.loading: bool = True
        self.error: Optional[Exception] = None
        self._mounted = False
        self._subscription: Any = None
        self._listeners: List[Listener] = []

    @property
    def mounted(self) -> bool:
        return self._mounted

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with the user on every change"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_user(self, user: Optional[AuthenticatedUser]) -> None:
        self.user = user
        for listener in list(self._listeners):
            try:
                listener(user)
            except Exception as e:
                logger.error(f"Auth state listener failed: {e}", exc_info=True)

    async def mount(self) -> "AuthStateObserver":
        """Load the current user and start listening for auth events"""
        if self._mounted:
            return self
        self._mounted = True

        try:
            response = self.client.auth.get_user()
            user = response.user if response else None
            self.error = None
            self._set_user(AuthenticatedUser.from_provider(user) if user else None)
        except AuthSessionMissingError:
            self.error = None
            self._set_user(None)
        except Exception as e:
            logger.warning(f"Failed to load current user: {e}")
            self.error = e
            self._set_user(None)
        finally:
            self.loading = False

        self._subscription = self.client.auth.on_auth_state_change(self._on_auth_event)
        return self

    def unmount(self) -> None:
        """Stop listening for auth events"""
        self._mounted = False
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _on_auth_event(self, event: Any, session: Any) -> None:
        if not self._mounted:
            return
        user = getattr(session, "user", None) if session else None
        logger.debug(f"Auth event: {event}")
        self._set_user(AuthenticatedUser.from_provider(user) if user else None)

    async def sign_out(self) -> None:
        """Sign out; failures are recorded in error rather than raised"""
        try:
            self.client.auth.sign_out()
        except Exception as e:
            logger.error(f"Sign out failed: {e}")
            self.error = e
            return
        self._set_user(None)

    async def __aenter__(self) -> "AuthStateObserver":
        return await self.mount()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.unmount()
