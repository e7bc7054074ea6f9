from .state import (
    SubmissionStatus,
    SubmissionState,
    Credentials,
    SignupCredentials,
    AvatarFile,
    AvatarValidation,
    UploadResult,
    ProfileFields,
    AuthenticatedUser,
)

__all__ = [
    "SubmissionStatus",
    "SubmissionState",
    "Credentials",
    "SignupCredentials",
    "AvatarFile",
    "AvatarValidation",
    "UploadResult",
    "ProfileFields",
    "AuthenticatedUser",
]
