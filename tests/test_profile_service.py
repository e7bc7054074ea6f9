"""
Profile Service Tests
"""

from unittest.mock import AsyncMock

import httpx
import pytest

from account_service.models.state import AvatarFile, ProfileFields, SubmissionStatus, UploadResult
from account_service.services.profile_service import (
    BIO_TOO_LONG, FULL_NAME_TOO_LONG, NOT_AUTHENTICATED, UPDATE_FAILED, UPDATE_SUCCEEDED,
    ProfileService
)
from account_service.utils.errors import NETWORK_ERROR_MESSAGE


@pytest.fixture
def profile_service(mock_supabase, settings):
    return ProfileService(mock_supabase, settings=settings)


@pytest.fixture
def png():
    return AvatarFile(filename="me.png", content_type="image/png", content=b"\x89PNG")


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_success_without_avatar(self, profile_service, mock_supabase, mock_query):
        state = await profile_service.update_profile(ProfileFields(full_name="Grace Hopper", bio="Admiral"))

        assert state.status == SubmissionStatus.SUCCEEDED
        assert state.message == UPDATE_SUCCEEDED
        mock_supabase.table.assert_called_with("profiles")
        payload = mock_query.update.call_args.args[0]
        assert payload["full_name"] == "Grace Hopper"
        assert payload["bio"] == "Admiral"
        assert "avatar_url" not in payload
        mock_query.eq.assert_called_with("id", "user-123")
        mock_supabase.storage.from_.assert_not_called()

    @pytest.mark.asyncio
    async def test_success_with_avatar(self, profile_service, mock_query, mock_bucket, png):
        state = await profile_service.update_profile(ProfileFields(full_name="Grace Hopper", avatar_file=png))

        assert state.is_success
        mock_bucket.upload.assert_called_once()
        payload = mock_query.update.call_args.args[0]
        assert payload["avatar_url"].startswith("http://127.0.0.1:54321/storage/v1/object/public/avatars/user-123/")
        assert payload["avatar_url"].endswith("-me.png")

    @pytest.mark.asyncio
    async def test_full_name_too_long(self, profile_service, mock_supabase):
        state = await profile_service.update_profile(ProfileFields(full_name="x" * 101))

        assert state.status == SubmissionStatus.FAILED
        assert state.message == FULL_NAME_TOO_LONG
        mock_supabase.auth.get_user.assert_not_called()
        mock_supabase.table.assert_not_called()

    @pytest.mark.asyncio
    async def test_bio_too_long(self, profile_service, mock_supabase):
        state = await profile_service.update_profile(ProfileFields(full_name="Grace", bio="b" * 161))

        assert state.message == BIO_TOO_LONG
        mock_supabase.table.assert_not_called()

    @pytest.mark.asyncio
    async def test_limits_are_inclusive(self, profile_service):
        state = await profile_service.update_profile(ProfileFields(full_name="x" * 100, bio="b" * 160))
        assert state.is_success

    @pytest.mark.asyncio
    async def test_not_authenticated(self, anonymous_supabase, settings, png):
        service = ProfileService(anonymous_supabase, settings=settings)

        state = await service.update_profile(ProfileFields(full_name="Grace", avatar_file=png))

        assert state.message == NOT_AUTHENTICATED
        anonymous_supabase.storage.from_.assert_not_called()
        anonymous_supabase.table.assert_not_called()

    @pytest.mark.asyncio
    async def test_upload_error_is_propagated(self, mock_supabase, settings, png):
        avatars = AsyncMock()
        avatars.upload_avatar.return_value = UploadResult(error="Failed to upload avatar")
        service = ProfileService(mock_supabase, avatars=avatars, settings=settings)

        state = await service.update_profile(ProfileFields(full_name="Grace", avatar_file=png))

        assert state.is_failure
        assert state.message == "Failed to upload avatar"
        mock_supabase.table.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", [
        "Network request failed",
        "NETWORK unreachable",
        "TypeError: Failed to fetch",
        "client is offline",
    ])
    async def test_network_errors_are_normalised(self, profile_service, mock_query, message):
        mock_query.execute.side_effect = Exception(message)

        state = await profile_service.update_profile(ProfileFields(full_name="Grace"))

        assert state.message == NETWORK_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_transport_error_is_network_error(self, profile_service, mock_query):
        mock_query.execute.side_effect = httpx.ConnectError("connection refused")

        state = await profile_service.update_profile(ProfileFields(full_name="Grace"))

        assert state.message == NETWORK_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_provider_error_is_generic(self, profile_service, mock_query):
        mock_query.execute.side_effect = Exception("new row violates row-level security policy")

        state = await profile_service.update_profile(ProfileFields(full_name="Grace"))

        assert state.message == UPDATE_FAILED

    @pytest.mark.asyncio
    async def test_provider_error_can_be_exposed(self, mock_supabase, mock_query, settings):
        service = ProfileService(mock_supabase, settings=settings, expose_provider_errors=True)
        mock_query.execute.side_effect = Exception("new row violates row-level security policy")

        state = await service.update_profile(ProfileFields(full_name="Grace"))

        assert state.message == "new row violates row-level security policy"

    @pytest.mark.asyncio
    async def test_session_error_never_escapes(self, profile_service, mock_supabase):
        mock_supabase.auth.get_user.side_effect = RuntimeError("invalid JWT")

        state = await profile_service.update_profile(ProfileFields(full_name="Grace"))

        assert state.message == UPDATE_FAILED

    @pytest.mark.asyncio
    async def test_repeat_update_writes_again(self, profile_service, mock_query):
        fields = ProfileFields(full_name="Grace")

        await profile_service.update_profile(fields)
        await profile_service.update_profile(fields)

        assert mock_query.update.call_count == 2


class TestGetProfile:
    @pytest.mark.asyncio
    async def test_found(self, profile_service, mock_query):
        mock_query.execute.return_value.data = {
            "id": "user-123",
            "email": "grace@example.com",
            "full_name": "Grace Hopper",
            "bio": None,
            "avatar_url": None,
            "updated_at": "2024-01-05T10:00:00+00:00"
        }

        profile = await profile_service.get_profile("user-123")

        assert profile.full_name == "Grace Hopper"
        mock_query.eq.assert_called_with("id", "user-123")

    @pytest.mark.asyncio
    async def test_missing_row(self, profile_service, mock_query):
        mock_query.execute.return_value = None

        assert await profile_service.get_profile("user-123") is None
