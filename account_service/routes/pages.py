"""
Page Routes
Data for the home page and the dashboard
"""

from fastapi import APIRouter
import logging

from shared.schemas.user import DashboardSchema
from shared.utils.formatting import format_date

from account_service.utils.dependencies import CurrentUser, OptionalUser

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def home(user: OptionalUser):
    """Landing page: who, if anyone, is signed in"""
    return {
        "authenticated": user is not None,
        "email": user.email if user else None
    }


@router.get("/dashboard", response_model=DashboardSchema)
async def dashboard(user: CurrentUser):
    """Dashboard summary for the signed in user"""
    member_since = None
    if user.created_at:
        member_since = format_date(user.created_at)

    return DashboardSchema(
        email=user.email,
        full_name=user.full_name,
        member_since=member_since
    )
