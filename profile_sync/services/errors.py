"""Exceptions raised by the profile sync client."""

from typing import Any, Dict, Optional


class ProfileAPIError(RuntimeError):
    """A Profile API call failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Any] = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details

    @staticmethod
    def code_for_status(status_code: int) -> str:
        """Map an HTTP status onto an error code."""
        if status_code in (400, 422):
            return "VALIDATION_ERROR"
        if status_code == 401:
            return "AUTHENTICATION_ERROR"
        if status_code == 403:
            return "PERMISSION_ERROR"
        if status_code == 404:
            return "NOT_FOUND_ERROR"
        if status_code >= 500:
            return "SERVER_ERROR"
        return "UNKNOWN_ERROR"


class AuthenticationExpiredError(ProfileAPIError):
    """The API rejected the bearer token; stored tokens have been cleared."""

    def __init__(self, message: str = "Authentication expired. Please log in again."):
        super().__init__(message, status_code=401, code="AUTHENTICATION_ERROR")


class ProfileAPITransportError(ProfileAPIError):
    """The request never produced an HTTP response."""

    def __init__(self, message: str):
        super().__init__(message, code="NETWORK_ERROR")


class ProfileLoadError(ProfileAPIError):
    """The comprehensive profile read returned success = false."""


class SectionSaveError(RuntimeError):
    """
    Saving a repeating section stopped part way through.

    Attributes:
        section: Section label being saved
        updates: State slices to commit (entries created before the failure
            already carry their server ids)
        cause: The exception that stopped the loop
    """

    def __init__(self, section: str, updates: Dict[str, Any], cause: Exception):
        message = getattr(cause, "message", None) or str(cause)
        super().__init__(f"Failed to save {section}: {message}")
        self.section = section
        self.updates = updates
        self.cause = cause
