from .forms import (
    FormController,
    LoginFormController,
    SignupFormController,
    ProfileFormController,
    is_valid_email,
)

__all__ = [
    "FormController",
    "LoginFormController",
    "SignupFormController",
    "ProfileFormController",
    "is_valid_email",
]
