"""
Error Types and Classification
Authentication errors and provider failure classification
"""

from typing import Optional

import httpx

NOT_AUTHENTICATED_MESSAGE = "User not authenticated"
NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again."
NETWORK_ERROR_KEYWORDS = ("network", "failed", "offline")


class AuthenticationError(Exception):
    """Raised when an operation requires a signed in user and there is none"""

    def __init__(self, message: str = NOT_AUTHENTICATED_MESSAGE):
        super().__init__(message)
        self.message = message


def provider_error_message(error: BaseException) -> str:
    """
    Extract the human readable message from an SDK exception

    supabase-py errors carry a ``message`` attribute; postgrest errors may
    also carry it in their first argument as a dict.
    """
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    if error.args and isinstance(error.args[0], dict):
        payload_message = error.args[0].get("message")
        if payload_message:
            return str(payload_message)
    return str(error)


def is_network_error(error: Optional[BaseException] = None, message: Optional[str] = None) -> bool:
    """
    Decide whether a failure should be reported as a connectivity problem

    Transport exceptions are recognised by type; anything else falls back to
    a case-insensitive keyword match on the message.
    """
    if isinstance(error, (httpx.TransportError, ConnectionError, TimeoutError)):
        return True
    if message is None and error is not None:
        message = provider_error_message(error)
    if not message:
        return False
    lowered = message.lower()
    return any(keyword in lowered for keyword in NETWORK_ERROR_KEYWORDS)
