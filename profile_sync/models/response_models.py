"""Response models for the Profile API.

Every field of the comprehensive profile is optional: a missing or null
section is treated as empty rather than as an error.
"""

from typing import Any, List, Optional
from pydantic import BaseModel, Field, model_validator


class LenientModel(BaseModel):
    """Base for server shapes: unknown keys are ignored, nulls fall back to defaults."""

    class Config:
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # Required fields keep their null so a missing id is still rejected.
        if not isinstance(data, dict):
            return data
        return {
            key: value for key, value in data.items()
            if value is not None or key not in cls.model_fields
            or cls.model_fields[key].is_required()
        }


class UserGoal(LenientModel):
    """One prioritised goal picked during onboarding."""

    priority: int = 0
    goal: Optional[str] = None
    goal_display: str = ""


class CareerProfileData(LenientModel):
    """Career profile as stored on the server."""

    industry: Optional[str] = None
    job_title: Optional[str] = None
    profile_summary: Optional[str] = None


class EducationProfile(LenientModel):
    """Persisted education row."""

    id: int
    degree: Optional[str] = None
    school: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_currently_studying: bool = False
    extra_curricular: Optional[str] = None


class ExperienceProfile(LenientModel):
    """Persisted experience row."""

    id: int
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_currently_working: bool = False
    description: Optional[str] = None


class ProjectProfile(LenientModel):
    """Persisted project row."""

    id: int
    project_title: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_currently_working: bool = False
    project_link: Optional[str] = None
    description: Optional[str] = None


class OpportunitiesInterestData(LenientModel):
    """Interest flags as stored on the server."""

    scholarships: bool = False
    jobs: bool = False
    grants: bool = False
    internships: bool = False


class RecommendationPriorityData(LenientModel):
    """Priority flags as stored on the server."""

    academic_background: bool = False
    work_experience: bool = False
    preferred_locations: bool = False
    others: bool = False
    additional_preferences: Optional[str] = None


class ParsedEducation(LenientModel):
    """Education row extracted from an uploaded CV."""

    institution: Optional[str] = None
    degree: Optional[str] = None
    field_of_study: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    description: Optional[str] = None


class ParsedExperience(LenientModel):
    """Experience row extracted from an uploaded CV."""

    company: Optional[str] = None
    position: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_current: bool = False
    description: Optional[str] = None


class ParsedProfileData(LenientModel):
    """CV parsing output attached to the profile."""

    education: List[ParsedEducation] = Field(default_factory=list)
    experience: List[ParsedExperience] = Field(default_factory=list)


class ComprehensiveProfile(LenientModel):
    """The `data` object of the comprehensive profile read."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    country: Optional[str] = None
    goal: Optional[str] = None
    user_goals: Optional[List[UserGoal]] = None
    career_profile: Optional[CareerProfileData] = None
    education_profiles: Optional[List[EducationProfile]] = None
    experience_profiles: Optional[List[ExperienceProfile]] = None
    project_profiles: Optional[List[ProjectProfile]] = None
    opportunities_interest: Optional[OpportunitiesInterestData] = None
    recommendation_priority: Optional[RecommendationPriorityData] = None
    parsed_profile_data: Optional[ParsedProfileData] = None
    cv_filename: Optional[str] = None
    cv_uploaded_at: Optional[str] = None
    has_cv_in_gcs: Optional[bool] = None
    cv_download_url: Optional[str] = None


class ComprehensiveProfileResponse(LenientModel):
    """Envelope of the comprehensive profile read."""

    success: bool = False
    message: Optional[str] = None
    data: Optional[ComprehensiveProfile] = None


class SuccessResponse(LenientModel):
    """Envelope of upserts, updates and deletes."""

    success: bool = Field(True, example=True)
    message: Optional[str] = None


class CreatedResponse(SuccessResponse):
    """Envelope of entry creation, carrying the server id."""

    id: int = Field(..., example=42)


class CompletionStatus(LenientModel):
    """Profile completion summary."""

    completion_percentage: int = 0
    missing_sections: List[str] = Field(default_factory=list)
    completed_sections: List[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error response model."""

    detail: str = Field(
        ...,
        description="Error message describing what went wrong",
        example="Education entry 7 not found"
    )


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(
        ...,
        description="Service status",
        example="ok"
    )


class RootResponse(BaseModel):
    """Root endpoint response model."""

    message: str = Field(
        ...,
        description="API name and version information",
        example="Profile API"
    )
    version: str = Field(
        ...,
        description="API version",
        example="1.0.0"
    )
