"""Request payload models for the Profile API."""

from typing import Optional
from pydantic import BaseModel, Field


class PersonalInfoPayload(BaseModel):
    """Body of the personal info upsert."""

    first_name: str = Field("", example="Ada")
    last_name: str = Field("", example="Lovelace")
    email: str = Field("", example="ada@example.com")
    phone_number: str = Field("", example="+447700900123")
    country: str = Field("", example="United Kingdom")
    goal: str = Field("", description="Prioritised goals, one per line")


class CareerProfilePayload(BaseModel):
    """Body of the career profile upsert."""

    industry: str = ""
    job_title: str = ""
    profile_summary: str = ""


class EducationPayload(BaseModel):
    """Body of an education create or update."""

    degree: str = ""
    school: str = ""
    start_date: str = ""
    end_date: Optional[str] = Field(
        None,
        description="Omitted while the entry is still being studied"
    )
    is_currently_studying: bool = False
    extra_curricular: str = ""


class ExperiencePayload(BaseModel):
    """Body of an experience create or update."""

    job_title: str = ""
    company_name: str = ""
    location: str = ""
    start_date: str = ""
    end_date: Optional[str] = Field(
        None,
        description="Omitted while the position is current"
    )
    is_currently_working: bool = False
    description: str = ""


class ProjectPayload(BaseModel):
    """Body of a project create or update."""

    project_title: str = ""
    start_date: str = ""
    end_date: Optional[str] = Field(
        None,
        description="Omitted while the project is ongoing"
    )
    is_currently_working: bool = False
    project_link: str = ""
    description: str = ""


class OpportunitiesInterestPayload(BaseModel):
    """Body of the opportunities interest upsert."""

    scholarships: bool = False
    jobs: bool = False
    grants: bool = False
    internships: bool = False


class RecommendationPriorityPayload(BaseModel):
    """Body of the recommendation priority upsert."""

    academic_background: bool = False
    work_experience: bool = False
    preferred_locations: bool = False
    others: bool = False
    additional_preferences: str = ""
