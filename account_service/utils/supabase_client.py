"""
Supabase Client Configuration
Clients for the two execution contexts: per-request (cookie backed) and
long-lived interactive (in-memory session with auto refresh)
"""

from typing import Dict, Mapping, Optional
import logging

from fastapi import Response
from supabase import Client, ClientOptions, create_client

from account_service.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Storage key used by the auth client for the serialized session
DEFAULT_STORAGE_KEY = "supabase.auth.token"


class CookieSessionStorage:
    """
    Session storage for the auth client backed by HTTP cookies

    Reads come from the incoming request cookies (overlaid with anything
    written during this request); writes are queued and flushed onto the
    outgoing response by apply().
    """

    def __init__(self, request_cookies: Mapping[str, str], settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._request_cookies = dict(request_cookies)
        # cookie name -> value, None marks a deletion
        self.pending: Dict[str, Optional[str]] = {}

    def cookie_name(self, key: str) -> str:
        """Map an auth storage key onto a cookie name"""
        if key.startswith(DEFAULT_STORAGE_KEY):
            return self.settings.auth_cookie_name + key[len(DEFAULT_STORAGE_KEY):]
        return f"{self.settings.auth_cookie_name}-{key}"

    def get_item(self, key: str) -> Optional[str]:
        name = self.cookie_name(key)
        if name in self.pending:
            return self.pending[name]
        return self._request_cookies.get(name)

    def set_item(self, key: str, value: str) -> None:
        self.pending[self.cookie_name(key)] = value

    def remove_item(self, key: str) -> None:
        self.pending[self.cookie_name(key)] = None

    @property
    def has_changes(self) -> bool:
        return bool(self.pending)

    def apply(self, response: Response) -> None:
        """Write queued cookie changes onto the response"""
        for name, value in self.pending.items():
            if value is None:
                response.delete_cookie(
                    name,
                    path="/",
                    secure=self.settings.cookie_secure,
                    httponly=True,
                    samesite=self.settings.cookie_samesite
                )
            else:
                response.set_cookie(
                    name,
                    value,
                    max_age=self.settings.cookie_max_age,
                    path="/",
                    secure=self.settings.cookie_secure,
                    httponly=True,
                    samesite=self.settings.cookie_samesite
                )
        self.pending.clear()


class SupabaseClientFactory:
    """Builds Supabase clients from the service settings"""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings
        self._browser_client: Optional[Client] = None

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    def create_server_client(self, storage: CookieSessionStorage) -> Client:
        """
        Create a client for one request

        Token refresh happens on demand when the session is read, so the
        background refresh timer is disabled.
        """
        options = ClientOptions(
            storage=storage,
            persist_session=True,
            auto_refresh_token=False
        )
        return create_client(self.settings.supabase_url, self.settings.supabase_anon_key, options=options)

    def get_browser_client(self) -> Client:
        """Get the shared interactive client, creating it on first use"""
        if self._browser_client is None:
            self._browser_client = create_client(
                self.settings.supabase_url,
                self.settings.supabase_anon_key,
                options=ClientOptions(persist_session=True, auto_refresh_token=True)
            )
            logger.info("Supabase interactive client initialized")
        return self._browser_client

    def reset(self) -> None:
        """Forget the shared client"""
        self._browser_client = None


# Global client factory instance
supabase_clients = SupabaseClientFactory()


def create_server_client(storage: CookieSessionStorage) -> Client:
    """Create a per-request client bound to cookie storage"""
    return supabase_clients.create_server_client(storage)


def create_browser_client() -> Client:
    """Get the long-lived interactive client"""
    return supabase_clients.get_browser_client()
