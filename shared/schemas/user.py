"""
User data schemas for the account service

Pydantic models for request and response serialization. Field-level rules
that must produce the form's own error messages (email format, password
confirmation, profile lengths) are enforced by the form controllers, so the
request schemas below only describe shape.
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_serializer


class UserLoginSchema(BaseModel):
    """Schema for user login"""
    email: str = ""
    password: str = ""


class UserSignupSchema(BaseModel):
    """Schema for user registration"""
    email: str = ""
    password: str = ""
    confirm_password: str = ""


class AuthenticatedUserSchema(BaseModel):
    """Schema for the currently signed in user"""
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer('created_at')
    def serialize_created_at(self, v: Optional[datetime]):
        return v.isoformat() if v else None


class UserProfileSchema(BaseModel):
    """Schema for a row of the profiles table"""
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=160)
    avatar_url: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer('updated_at')
    def serialize_updated_at(self, v: Optional[datetime]):
        return v.isoformat() if v else None


class SubmissionResponseSchema(BaseModel):
    """Schema for the outcome of a form submission"""
    success: bool
    status: str
    message: Optional[str] = None


class SignupResponseSchema(SubmissionResponseSchema):
    """Sign-up outcome, including whether a session was issued immediately"""
    authenticated: bool = False


class DashboardSchema(BaseModel):
    """Schema for the dashboard summary"""
    email: Optional[str] = None
    full_name: Optional[str] = None
    member_since: Optional[str] = None
