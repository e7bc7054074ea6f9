"""
Shared data schemas for the account service
"""

from .user import (
    UserLoginSchema,
    UserSignupSchema,
    AuthenticatedUserSchema,
    UserProfileSchema,
    SubmissionResponseSchema,
    SignupResponseSchema,
    DashboardSchema,
)

__all__ = [
    "UserLoginSchema",
    "UserSignupSchema",
    "AuthenticatedUserSchema",
    "UserProfileSchema",
    "SubmissionResponseSchema",
    "SignupResponseSchema",
    "DashboardSchema",
]
