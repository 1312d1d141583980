"""Error taxonomy for the session subsystem."""

from enum import Enum
from typing import Optional


class AuthIssue(str, Enum):
    PROVIDER_ERROR = "PROVIDER_ERROR"
    STALE_EVENT_DISCARDED = "STALE_EVENT_DISCARDED"
    RESOLUTION_TIMEOUT = "RESOLUTION_TIMEOUT"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    INVALID_TRANSITION = "INVALID_TRANSITION"


class ProviderError(Exception):
    """Raised by identity-provider adapters when sign-in cannot complete."""

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(message or code)
        self.code = code
        self.message = message or code


# User-visible copy for recoverable issues
NOTICES = {
    AuthIssue.PROVIDER_ERROR: "Sign-in failed. Please try again.",
    AuthIssue.SESSION_EXPIRED: "Your session has expired. Please sign in again.",
}
