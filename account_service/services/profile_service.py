"""
Profile Service
Reads and updates the signed in user's row of the profiles table
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging

from supabase import Client

from account_service.config import Settings, get_settings
from account_service.models.state import ProfileFields, SubmissionState
from account_service.services.avatar_service import AvatarService
from account_service.services.session_service import SessionProvider
from account_service.utils.errors import (
    NETWORK_ERROR_MESSAGE, is_network_error, provider_error_message
)
from shared.schemas.user import UserProfileSchema

logger = logging.getLogger(__name__)

MAX_FULL_NAME_LENGTH = 100
MAX_BIO_LENGTH = 160

FULL_NAME_TOO_LONG = "Full name must be 100 characters or less"
BIO_TOO_LONG = "Bio must be 160 characters or less"
NOT_AUTHENTICATED = "Not authenticated"
UPDATE_FAILED = "Failed to update profile"
UPDATE_SUCCEEDED = "Profile updated successfully!"

PROFILE_COLUMNS = "id, email, full_name, bio, avatar_url, updated_at"


def validate_profile_fields(fields: ProfileFields) -> Optional[str]:
    """Return the first length violation, or None"""
    if len(fields.full_name or "") > MAX_FULL_NAME_LENGTH:
        return FULL_NAME_TOO_LONG
    if len(fields.bio or "") > MAX_BIO_LENGTH:
        return BIO_TOO_LONG
    return None


class ProfileService:
    """Profile read and update orchestration"""

    def __init__(
        self,
        client: Client,
        session: Optional[SessionProvider] = None,
        avatars: Optional[AvatarService] = None,
        settings: Optional[Settings] = None,
        expose_provider_errors: Optional[bool] = None
    ):
        self.client = client
        self.settings = settings or get_settings()
        self.session = session or SessionProvider(client)
        self.avatars = avatars or AvatarService(client, self.settings)
        if expose_provider_errors is None:
            expose_provider_errors = self.settings.expose_provider_errors
        self.expose_provider_errors = expose_provider_errors

    def _profiles(self):
        return self.client.table(self.settings.profiles_table)

    async def get_profile(self, user_id: str) -> Optional[UserProfileSchema]:
        """
        Get the profile row of a user

        Args:
            user_id: User ID

        Returns:
            UserProfileSchema or None when the row does not exist
        """
        response = (
            self._profiles()
            .select(PROFILE_COLUMNS)
            .eq("id", user_id)
            .maybe_single()
            .execute()
        )
        if response is None or not response.data:
            return None
        return UserProfileSchema(**response.data)

    async def update_profile(self, fields: ProfileFields) -> SubmissionState:
        """
        Update the signed in user's profile

        Validates locally, uploads the avatar when one is attached, then
        writes full name, bio and avatar URL to the user's row. Never raises;
        the outcome is a terminal SubmissionState.

        Args:
            fields: Values from the profile form

        Returns:
            SubmissionState: succeeded or failed with a user facing message
        """
        validation_error = validate_profile_fields(fields)
        if validation_error:
            return SubmissionState.failed(validation_error)

        try:
            user = await self.session.get_current_user()
            if not user:
                return SubmissionState.failed(NOT_AUTHENTICATED)

            update_data: Dict[str, Any] = {
                "full_name": fields.full_name,
                "bio": fields.bio,
                "updated_at": datetime.now(timezone.utc).isoformat()
            }

            if fields.avatar_file is not None:
                upload = await self.avatars.upload_avatar(fields.avatar_file, user.id)
                if upload.error:
                    return SubmissionState.failed(upload.error)
                update_data["avatar_url"] = upload.url

            self._profiles().update(update_data).eq("id", user.id).execute()

            logger.info(f"Profile updated for user: {user.id}")
            return SubmissionState.succeeded(UPDATE_SUCCEEDED)

        except Exception as e:
            logger.error(f"Profile update failed: {e}")
            if is_network_error(e):
                return SubmissionState.failed(NETWORK_ERROR_MESSAGE)
            if self.expose_provider_errors:
                return SubmissionState.failed(provider_error_message(e) or UPDATE_FAILED)
            return SubmissionState.failed(UPDATE_FAILED)
