"""
Profile Routes
Read and update the signed in user's profile
"""

from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status
import logging

from shared.schemas.user import UserProfileSchema

from account_service.controllers.forms import ProfileFormController
from account_service.services.profile_service import NOT_AUTHENTICATED
from account_service.utils.avatar import read_upload
from account_service.utils.dependencies import CurrentUser, ProfileServiceDep
from account_service.utils.errors import NETWORK_ERROR_MESSAGE

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=UserProfileSchema)
async def get_profile(user: CurrentUser, profiles: ProfileServiceDep):
    """Get the signed in user's profile"""
    try:
        profile = await profiles.get_profile(user.id)
    except Exception as e:
        logger.error(f"Get profile error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve profile"
        )

    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found"
        )
    return profile


@router.put("")
async def update_profile(
    user: CurrentUser,
    profiles: ProfileServiceDep,
    full_name: str = Form(""),
    bio: str = Form(""),
    avatar: Optional[UploadFile] = File(None)
):
    """
    Update full name, bio and optionally the avatar

    Multipart form; the avatar part may be omitted. The refreshed profile is
    returned on success.
    """
    refreshed = {}

    async def reload_profile():
        refreshed["profile"] = await profiles.get_profile(user.id)

    controller = ProfileFormController(
        profiles,
        full_name=full_name,
        bio=bio,
        avatar_file=await read_upload(avatar, profiles.settings.max_avatar_size),
        on_success=reload_profile
    )
    state = await controller.submit()

    if state.is_failure:
        if state.message == NOT_AUTHENTICATED:
            failure_status = status.HTTP_401_UNAUTHORIZED
        elif state.message == NETWORK_ERROR_MESSAGE:
            failure_status = status.HTTP_503_SERVICE_UNAVAILABLE
        else:
            failure_status = status.HTTP_400_BAD_REQUEST
        raise HTTPException(status_code=failure_status, detail=state.message)

    logger.info(f"Profile updated: {user.email}")

    profile = refreshed.get("profile")
    return {
        "success": True,
        "status": state.status.value,
        "message": state.message,
        "profile": profile.model_dump(mode="json") if profile else None
    }
