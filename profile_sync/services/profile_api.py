"""Async client for the Remote Profile API."""

import os
from typing import Any, Dict, Optional
import httpx
from pydantic_settings import BaseSettings

from profile_sync.models.request_models import (
    CareerProfilePayload,
    EducationPayload,
    ExperiencePayload,
    OpportunitiesInterestPayload,
    PersonalInfoPayload,
    ProjectPayload,
    RecommendationPriorityPayload,
)
from profile_sync.models.response_models import (
    CompletionStatus,
    CreatedResponse,
    SuccessResponse,
)
from profile_sync.services.auth_context import AuthContext
from profile_sync.services.errors import (
    AuthenticationExpiredError,
    ProfileAPIError,
    ProfileAPITransportError,
)
from profile_sync.utils.logger import get_logger


logger = get_logger(component="profile_api")


class ProfileAPISettings(BaseSettings):
    """Profile API configuration settings."""

    profile_api_base_url: str = os.getenv("PROFILE_API_BASE_URL", "http://localhost:8000")
    profile_api_timeout: float = float(os.getenv("PROFILE_API_TIMEOUT", "30"))
    profile_api_token: Optional[str] = os.getenv("PROFILE_API_TOKEN", None)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


class ProfileAPIClient:
    """Client for the comprehensive profile endpoints."""

    def __init__(
        self,
        settings: Optional[ProfileAPISettings] = None,
        auth: Optional[AuthContext] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the client.

        Args:
            settings: API settings (uses defaults if None)
            auth: Credentials holder; built from settings if None
            transport: Optional httpx transport (ASGI app, mock handler)
        """
        self.settings = settings or ProfileAPISettings()
        self.base_url = self.settings.profile_api_base_url.rstrip("/")
        self.timeout = self.settings.profile_api_timeout
        self.auth = auth if auth is not None else AuthContext.from_settings(self.settings)
        self.transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Send one authenticated JSON request.

        Args:
            method: HTTP method
            path: Path below the base URL
            payload: JSON body (optional)

        Returns:
            Dict[str, Any]: Decoded JSON body ({} for an empty body)

        Raises:
            AuthenticationExpiredError: On 401, after clearing the auth context
            ProfileAPIError: On any other non-2xx response
            ProfileAPITransportError: If no response was received
        """
        headers = {"Content-Type": "application/json", **self.auth.headers()}

        logger.debug("Profile API request", method=method, path=path)
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport
        ) as client:
            try:
                response = await client.request(method, path, json=payload, headers=headers)
            except httpx.TimeoutException as e:
                raise ProfileAPITransportError(
                    f"Profile API request timed out after {self.timeout}s"
                ) from e
            except httpx.HTTPError as e:
                raise ProfileAPITransportError(
                    f"Network error. Please check your connection and try again ({e})"
                ) from e

        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> Dict[str, Any]:
        """Convert a response into its JSON body or a ProfileAPIError."""
        if response.is_success:
            if not response.content:
                return {}
            try:
                return response.json()
            except ValueError as e:
                logger.warning(
                    "Profile API returned a non-JSON body",
                    status_code=response.status_code,
                    path=response.request.url.path,
                )
                raise ProfileAPIError(
                    f"Unexpected response format from {response.request.url.path}",
                    status_code=response.status_code,
                    code="UNKNOWN_ERROR",
                    details=response.text,
                ) from e

        if response.status_code == 401:
            self.auth.clear()
            logger.warning("Profile API rejected credentials; tokens cleared")
            raise AuthenticationExpiredError()

        body: Any = None
        try:
            body = response.json()
        except ValueError:
            body = None

        message = None
        if isinstance(body, dict):
            for key in ("message", "error", "detail"):
                if body.get(key):
                    message = body[key]
                    break
        if message is not None and not isinstance(message, str):
            message = str(message)

        logger.warning(
            "Profile API error",
            status_code=response.status_code,
            path=response.request.url.path,
        )
        raise ProfileAPIError(
            message or f"API error: {response.status_code}",
            status_code=response.status_code,
            code=ProfileAPIError.code_for_status(response.status_code),
            details=body,
        )

    @staticmethod
    def _body(payload) -> Dict[str, Any]:
        # A None end_date means "currently active": the key is left out entirely.
        return payload.model_dump(exclude_none=True)

    async def get_comprehensive_profile(self) -> Dict[str, Any]:
        """Read every profile section in one call."""
        return await self._request("GET", "/api/profile/comprehensive/")

    async def get_completion_status(self) -> CompletionStatus:
        """Read the profile completion summary."""
        body = await self._request("GET", "/api/profile/completion-status/")
        return CompletionStatus.model_validate(body)

    async def update_personal_info(self, payload: PersonalInfoPayload) -> SuccessResponse:
        body = await self._request("POST", "/api/profile/personal/", self._body(payload))
        return SuccessResponse.model_validate(body)

    async def update_career_profile(self, payload: CareerProfilePayload) -> SuccessResponse:
        body = await self._request("POST", "/api/profile/career/", self._body(payload))
        return SuccessResponse.model_validate(body)

    async def create_education(self, payload: EducationPayload) -> CreatedResponse:
        body = await self._request("POST", "/api/profile/education/", self._body(payload))
        return CreatedResponse.model_validate(body)

    async def update_education(self, education_id: int, payload: EducationPayload) -> SuccessResponse:
        body = await self._request(
            "PUT", f"/api/profile/education/{education_id}/", self._body(payload)
        )
        return SuccessResponse.model_validate(body)

    async def delete_education(self, education_id: int) -> SuccessResponse:
        body = await self._request("DELETE", f"/api/profile/education/{education_id}/")
        return SuccessResponse.model_validate(body)

    async def create_experience(self, payload: ExperiencePayload) -> CreatedResponse:
        body = await self._request("POST", "/api/profile/experience/", self._body(payload))
        return CreatedResponse.model_validate(body)

    async def update_experience(self, experience_id: int, payload: ExperiencePayload) -> SuccessResponse:
        body = await self._request(
            "PUT", f"/api/profile/experience/{experience_id}/", self._body(payload)
        )
        return SuccessResponse.model_validate(body)

    async def delete_experience(self, experience_id: int) -> SuccessResponse:
        body = await self._request("DELETE", f"/api/profile/experience/{experience_id}/")
        return SuccessResponse.model_validate(body)

    async def create_project(self, payload: ProjectPayload) -> CreatedResponse:
        body = await self._request("POST", "/api/profile/project/", self._body(payload))
        return CreatedResponse.model_validate(body)

    async def update_project(self, project_id: int, payload: ProjectPayload) -> SuccessResponse:
        body = await self._request(
            "PUT", f"/api/profile/project/{project_id}/", self._body(payload)
        )
        return SuccessResponse.model_validate(body)

    async def delete_project(self, project_id: int) -> SuccessResponse:
        body = await self._request("DELETE", f"/api/profile/project/{project_id}/")
        return SuccessResponse.model_validate(body)

    async def update_opportunities_interest(
        self,
        payload: OpportunitiesInterestPayload
    ) -> SuccessResponse:
        body = await self._request(
            "POST", "/api/profile/opportunities-interest/", self._body(payload)
        )
        return SuccessResponse.model_validate(body)

    async def update_recommendation_priority(
        self,
        payload: RecommendationPriorityPayload
    ) -> SuccessResponse:
        body = await self._request(
            "POST", "/api/profile/recommendation-priority/", self._body(payload)
        )
        return SuccessResponse.model_validate(body)
