"""
State Models
Value types shared by the controllers and orchestrators
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class SubmissionStatus(str, Enum):
    """Lifecycle of a form submission"""
    IDLE = "idle"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class SubmissionState:
    """
    Tagged submission state owned by a single form controller.

    Only succeeded and failed carry a message. Instances are immutable;
    controllers move between states by replacing the value.
    """
    status: SubmissionStatus = SubmissionStatus.IDLE
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "SubmissionState":
        return cls(SubmissionStatus.IDLE)

    @classmethod
    def loading(cls) -> "SubmissionState":
        return cls(SubmissionStatus.LOADING)

    @classmethod
    def succeeded(cls, message: str) -> "SubmissionState":
        return cls(SubmissionStatus.SUCCEEDED, message)

    @classmethod
    def failed(cls, message: str) -> "SubmissionState":
        return cls(SubmissionStatus.FAILED, message)

    @property
    def is_loading(self) -> bool:
        return self.status is SubmissionStatus.LOADING

    @property
    def is_terminal(self) -> bool:
        return self.status in (SubmissionStatus.SUCCEEDED, SubmissionStatus.FAILED)

    @property
    def is_success(self) -> bool:
        return self.status is SubmissionStatus.SUCCEEDED

    @property
    def is_failure(self) -> bool:
        return self.status is SubmissionStatus.FAILED

    @property
    def error(self) -> Optional[str]:
        return self.message if self.status is SubmissionStatus.FAILED else None

    @property
    def success(self) -> Optional[str]:
        return self.message if self.status is SubmissionStatus.SUCCEEDED else None


@dataclass(frozen=True)
class Credentials:
    """Email/password pair; never persisted"""
    email: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(email={self.email!r}, password='***')"


@dataclass(frozen=True)
class SignupCredentials(Credentials):
    confirm_password: str = ""

    def __repr__(self) -> str:
        return f"SignupCredentials(email={self.email!r}, password='***', confirm_password='***')"


@dataclass(frozen=True)
class AvatarFile:
    """Candidate avatar upload held in memory"""
    filename: str
    content_type: str
    content: bytes = field(repr=False, default=b"")

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class AvatarValidation:
    """Result of validating an avatar file: ok, or an error reason"""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class UploadResult:
    """Outcome of one avatar upload attempt; exactly one of url/error is set"""
    url: Optional[str] = None
    error: Optional[str] = None

    def __post_init__(self):
        if (self.url is None) == (self.error is None):
            raise ValueError("UploadResult requires exactly one of url or error")

    @property
    def ok(self) -> bool:
        return self.url is not None


@dataclass
class ProfileFields:
    """Editable profile values owned by the profile form"""
    full_name: str = ""
    bio: str = ""
    avatar_file: Optional[AvatarFile] = None


@dataclass(frozen=True)
class AuthenticatedUser:
    """User as reported by the auth provider for the current request"""
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_provider(cls, user: Any) -> "AuthenticatedUser":
        """Build from a supabase User object"""
        metadata = getattr(user, "user_metadata", None) or {}
        full_name = metadata.get("full_name")
        created_at = getattr(user, "created_at", None)
        if isinstance(created_at, str):
            try:
                created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
            except ValueError:
                created_at = None
        elif not isinstance(created_at, datetime):
            created_at = None
        return cls(
            id=str(user.id),
            email=getattr(user, "email", None),
            full_name=full_name if isinstance(full_name, str) else None,
            created_at=created_at,
        )
