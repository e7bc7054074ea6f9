"""
Avatar Validation
Pure checks applied to an avatar before it is handed to storage
"""

from typing import Optional

from fastapi import UploadFile

from account_service.config import MAX_AVATAR_SIZE
from account_service.models.state import AvatarFile, AvatarValidation

ALLOWED_AVATAR_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")

NO_FILE_ERROR = "No file provided"
FILE_TOO_LARGE_ERROR = "File size must be less than 5MB"
INVALID_TYPE_ERROR = "Must be an image file (JPEG, PNG, GIF, or WebP)"


def validate_avatar(file: Optional[AvatarFile], max_size: int = MAX_AVATAR_SIZE) -> AvatarValidation:
    """
    Validate an avatar candidate

    Checks run in order and the first failure wins: presence, size, type.

    Args:
        file: Candidate file, or None
        max_size: Largest accepted size in bytes

    Returns:
        AvatarValidation: ok, or the reason for rejection
    """
    if not file:
        return AvatarValidation(error=NO_FILE_ERROR)

    if file.size > max_size:
        return AvatarValidation(error=FILE_TOO_LARGE_ERROR)

    if file.content_type not in ALLOWED_AVATAR_TYPES:
        return AvatarValidation(error=INVALID_TYPE_ERROR)

    return AvatarValidation()


async def read_upload(upload: Optional[UploadFile], max_size: int = MAX_AVATAR_SIZE) -> Optional[AvatarFile]:
    """
    Read a multipart upload into an AvatarFile

    Browsers send an empty, unnamed part when no file was chosen; that is
    treated as no file. At most max_size + 1 bytes are read, enough for
    validate_avatar to reject an oversized file.
    """
    if upload is None or not upload.filename:
        return None
    content = await upload.read(max_size + 1)
    return AvatarFile(
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
        content=content,
    )
