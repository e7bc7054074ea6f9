"""
Supabase Client Tests
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import Response

from account_service.utils.supabase_client import (
    DEFAULT_STORAGE_KEY, CookieSessionStorage, SupabaseClientFactory
)


class TestCookieSessionStorage:
    def test_cookie_names(self, settings):
        storage = CookieSessionStorage({}, settings)

        assert storage.cookie_name(DEFAULT_STORAGE_KEY) == "sb-auth-token"
        assert storage.cookie_name(f"{DEFAULT_STORAGE_KEY}-code-verifier") == "sb-auth-token-code-verifier"
        assert storage.cookie_name("other") == "sb-auth-token-other"

    def test_reads_request_cookies(self, settings):
        storage = CookieSessionStorage({"sb-auth-token": '{"access_token": "abc"}'}, settings)
        assert storage.get_item(DEFAULT_STORAGE_KEY) == '{"access_token": "abc"}'

    def test_writes_overlay_request_cookies(self, settings):
        storage = CookieSessionStorage({"sb-auth-token": "old"}, settings)

        storage.set_item(DEFAULT_STORAGE_KEY, "new")
        assert storage.get_item(DEFAULT_STORAGE_KEY) == "new"

        storage.remove_item(DEFAULT_STORAGE_KEY)
        assert storage.get_item(DEFAULT_STORAGE_KEY) is None
        assert storage.has_changes

    def test_apply_sets_cookies(self, settings):
        storage = CookieSessionStorage({}, settings)
        storage.set_item(DEFAULT_STORAGE_KEY, "session-json")
        response = Response()

        storage.apply(response)

        header = response.headers["set-cookie"]
        assert header.startswith("sb-auth-token=session-json")
        assert "HttpOnly" in header
        assert "Path=/" in header
        assert not storage.has_changes

    def test_apply_deletes_cookies(self, settings):
        storage = CookieSessionStorage({"sb-auth-token": "old"}, settings)
        storage.remove_item(DEFAULT_STORAGE_KEY)
        response = Response()

        storage.apply(response)

        header = response.headers["set-cookie"]
        assert header.startswith("sb-auth-token=")
        assert "Max-Age=0" in header

    def test_untouched_storage_writes_nothing(self, settings):
        storage = CookieSessionStorage({"sb-auth-token": "old"}, settings)
        response = Response()

        storage.apply(response)

        assert "set-cookie" not in response.headers


class TestSupabaseClientFactory:
    def test_server_client_uses_cookie_storage(self, settings):
        factory = SupabaseClientFactory(settings)
        storage = CookieSessionStorage({}, settings)

        with patch("account_service.utils.supabase_client.create_client") as create:
            factory.create_server_client(storage)

        url, key = create.call_args.args
        options = create.call_args.kwargs["options"]
        assert url == "http://127.0.0.1:54321"
        assert key == "test-anon-key"
        assert options.storage is storage
        assert options.auto_refresh_token is False

    def test_browser_client_is_shared(self, settings):
        factory = SupabaseClientFactory(settings)

        with patch("account_service.utils.supabase_client.create_client", return_value=MagicMock()) as create:
            first = factory.get_browser_client()
            second = factory.get_browser_client()

        assert first is second
        create.assert_called_once()
        assert create.call_args.kwargs["options"].auto_refresh_token is True

    def test_reset(self, settings):
        factory = SupabaseClientFactory(settings)

        with patch("account_service.utils.supabase_client.create_client", side_effect=[MagicMock(), MagicMock()]):
            first = factory.get_browser_client()
            factory.reset()
            second = factory.get_browser_client()

        assert first is not second
