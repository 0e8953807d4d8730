"""Holder for the credentials the Profile API client sends."""

from typing import Any, Dict, Optional


class AuthContext:
    """
    Tokens for the signed-in user.

    Passed by reference into the API client so that clearing it after a 401
    is visible to every other holder.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        refresh_token: Optional[str] = None,
        user: Optional[Dict[str, Any]] = None
    ):
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.user = user

    @classmethod
    def from_settings(cls, settings) -> "AuthContext":
        """Build a context from the configured access token, if any."""
        return cls(access_token=settings.profile_api_token or None)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    def headers(self) -> Dict[str, str]:
        """Authorization header for the current token ({} when signed out)."""
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    def clear(self) -> None:
        """Forget every stored credential."""
        self.access_token = None
        self.refresh_token = None
        self.user = None
