"""
Avatar Service
Validates avatars and stores them in the avatars bucket
"""

import time
from typing import Callable, Optional
import logging

from supabase import Client, StorageException

from account_service.config import Settings, get_settings
from account_service.models.state import AvatarFile, UploadResult
from account_service.utils.avatar import validate_avatar

logger = logging.getLogger(__name__)

UPLOAD_FAILED_ERROR = "Failed to upload avatar"
UPLOAD_UNEXPECTED_ERROR = "An error occurred while uploading your avatar"


def current_millis() -> int:
    return int(time.time() * 1000)


class AvatarService:
    """Avatar upload orchestration"""

    def __init__(
        self,
        client: Client,
        settings: Optional[Settings] = None,
        clock: Callable[[], int] = current_millis
    ):
        self.client = client
        self.settings = settings or get_settings()
        self.clock = clock

    def storage_key(self, file: AvatarFile, owner_id: str) -> str:
        """Build the object key: <owner>/<millis>-<filename>"""
        return f"{owner_id}/{self.clock()}-{file.filename}"

    async def upload_avatar(self, file: Optional[AvatarFile], owner_id: str) -> UploadResult:
        """
        Validate and upload an avatar

        Never raises; every failure is reported through the result.

        Args:
            file: Candidate avatar
            owner_id: Id of the user the avatar belongs to

        Returns:
            UploadResult: public URL on success, error message otherwise
        """
        validation = validate_avatar(file, self.settings.max_avatar_size)
        if not validation.ok:
            return UploadResult(error=validation.error)

        try:
            key = self.storage_key(file, owner_id)
            bucket = self.client.storage.from_(self.settings.avatar_bucket)

            try:
                bucket.upload(
                    key,
                    file.content,
                    {
                        "content-type": file.content_type,
                        "upsert": "true"
                    }
                )
            except Exception as e:
                # StorageException for error responses, httpx errors for transport
                logger.error(f"Avatar upload failed for {owner_id}: {e}", exc_info=not isinstance(e, StorageException))
                return UploadResult(error=UPLOAD_FAILED_ERROR)

            public_url = bucket.get_public_url(key)
            logger.info(f"Avatar uploaded for {owner_id}: {key}")
            return UploadResult(url=public_url)

        except Exception as e:
            logger.error(f"Avatar upload error for {owner_id}: {e}", exc_info=True)
            return UploadResult(error=UPLOAD_UNEXPECTED_ERROR)
