"""Pydantic models for the locally editable profile sections."""

from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field, field_validator
from profile_sync.models.response_models import ComprehensiveProfile


NEW_ENTRY_ID = "new"
TEMP_ID_PREFIX = "temp_"


class UnsavedId(BaseModel):
    """Placeholder row that has never been given an identity."""

    kind: Literal["unsaved"] = "unsaved"

    class Config:
        frozen = True

    def __str__(self) -> str:
        return NEW_ENTRY_ID


class PendingId(BaseModel):
    """Row added this session, not yet confirmed by the backend."""

    kind: Literal["pending"] = "pending"
    local_key: str

    class Config:
        frozen = True

    def __str__(self) -> str:
        return f"{TEMP_ID_PREFIX}{self.local_key}"


class PersistedId(BaseModel):
    """Row backed by a server-side primary key."""

    kind: Literal["persisted"] = "persisted"
    server_id: int

    class Config:
        frozen = True

    def __str__(self) -> str:
        return str(self.server_id)


class UnknownId(BaseModel):
    """Any other identifier (e.g. rows mapped from CV-parsed data)."""

    kind: Literal["unknown"] = "unknown"
    raw: str

    class Config:
        frozen = True

    def __str__(self) -> str:
        return self.raw


EntryId = Union[UnsavedId, PendingId, PersistedId, UnknownId]


def parse_entry_id(raw: Any) -> EntryId:
    """
    Parse the string form of an entry id.

    Rules are applied in order: 'new', the 'temp_' prefix, an all-digit
    string, anything else.

    Args:
        raw: Entry id as a string, an int or an already parsed EntryId

    Returns:
        EntryId: Parsed identifier
    """
    if isinstance(raw, (UnsavedId, PendingId, PersistedId, UnknownId)):
        return raw
    if isinstance(raw, bool):
        raise ValueError(f"Invalid entry id: {raw!r}")
    if isinstance(raw, int):
        return PersistedId(server_id=raw)
    if isinstance(raw, dict):
        kind = raw.get("kind")
        models = {
            "unsaved": UnsavedId,
            "pending": PendingId,
            "persisted": PersistedId,
            "unknown": UnknownId,
        }
        if kind not in models:
            raise ValueError(f"Invalid entry id: {raw!r}")
        return models[kind](**raw)
    if not isinstance(raw, str):
        raise ValueError(f"Invalid entry id: {raw!r}")

    if raw == NEW_ENTRY_ID:
        return UnsavedId()
    if raw.startswith(TEMP_ID_PREFIX):
        return PendingId(local_key=raw[len(TEMP_ID_PREFIX):])
    stripped = raw.strip()
    if stripped.isascii() and stripped.isdigit():
        return PersistedId(server_id=int(stripped))
    return UnknownId(raw=raw)


class ProfileEntry(BaseModel):
    """Base model for one row of a repeating section."""

    id: EntryId = Field(default_factory=UnsavedId)

    @field_validator("id", mode="before")
    @classmethod
    def _parse_id(cls, value: Any) -> EntryId:
        return parse_entry_id(value)

    def is_blank(self) -> bool:
        """True when every text field is empty and every flag is off."""
        for name, value in self:
            if name == "id":
                continue
            if value:
                return False
        return True

    def is_placeholder(self) -> bool:
        """True for an untouched row that was never saved ('new' or a fresh temp row)."""
        return isinstance(self.id, (UnsavedId, PendingId)) and self.is_blank()


class Education(ProfileEntry):
    """Education entry model."""

    degree: str = ""
    school: str = ""
    start_date: str = ""
    end_date: str = ""
    is_studying: bool = False
    description: str = ""


class Experience(ProfileEntry):
    """Experience entry model."""

    job_title: str = ""
    company_name: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    is_currently_working: bool = False
    description: str = ""


class Project(ProfileEntry):
    """Project entry model."""

    project_title: str = ""
    start_date: str = ""
    end_date: str = ""
    is_currently_working: bool = False
    project_link: str = ""
    description: str = ""


class PersonalInfo(BaseModel):
    """Personal tab model."""

    name: str = ""
    email: str = ""
    phone: str = ""
    country: str = ""
    goal: str = ""


class CareerProfile(BaseModel):
    """Career profile tab model."""

    industry: str = ""
    job_title: str = ""
    profile_summary: str = ""


class CvFile(BaseModel):
    """Uploaded CV metadata (read only)."""

    filename: Optional[str] = None
    uploaded_at: Optional[str] = None
    has_cv_in_gcs: bool = False
    download_url: Optional[str] = None


OPPORTUNITY_LABELS = {
    "scholarships": "Scholarships",
    "jobs": "Jobs",
    "grants": "Grants",
    "internships": "Internships",
}

PRIORITY_LABELS = {
    "academic_background": "My academic background",
    "work_experience": "My work experience",
    "preferred_locations": "My preferred locations",
    "others": "Other",
}


class OpportunityInterests(BaseModel):
    """Kinds of opportunity the user wants to hear about."""

    scholarships: bool = False
    jobs: bool = False
    grants: bool = False
    internships: bool = False


class RecommendationPriorities(BaseModel):
    """What recommendations should be ranked by."""

    academic_background: bool = False
    work_experience: bool = False
    preferred_locations: bool = False
    others: bool = False


class AIPreferences(BaseModel):
    """AI tab model."""

    interests: OpportunityInterests = Field(default_factory=OpportunityInterests)
    priorities: RecommendationPriorities = Field(default_factory=RecommendationPriorities)
    salary_expectation: str = ""

    @property
    def opportunities(self) -> List[str]:
        """Selected opportunity labels, in display order."""
        return [label for key, label in OPPORTUNITY_LABELS.items() if getattr(self.interests, key)]

    @property
    def prioritize_by(self) -> List[str]:
        """Selected priority labels, in display order."""
        return [label for key, label in PRIORITY_LABELS.items() if getattr(self.priorities, key)]

    @classmethod
    def from_labels(
        cls,
        opportunities: List[str],
        prioritize_by: List[str],
        salary_expectation: str = ""
    ) -> "AIPreferences":
        """
        Build preferences from the multi-select label lists shown in the UI.

        Labels outside the fixed vocabularies are ignored.
        """
        return cls(
            interests=OpportunityInterests(
                **{key: label in opportunities for key, label in OPPORTUNITY_LABELS.items()}
            ),
            priorities=RecommendationPriorities(
                **{key: label in prioritize_by for key, label in PRIORITY_LABELS.items()}
            ),
            salary_expectation=salary_expectation,
        )


class ProfileState(BaseModel):
    """Everything the profile wizard renders, plus load status."""

    loading: bool = True
    error: Optional[str] = None
    validation_errors: Dict[str, List[str]] = Field(default_factory=dict)
    profile_data: Optional[ComprehensiveProfile] = None
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    cv_file: CvFile = Field(default_factory=CvFile)
    career_profile: CareerProfile = Field(default_factory=CareerProfile)
    education: List[Education] = Field(default_factory=list)
    experience: List[Experience] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    ai_preferences: AIPreferences = Field(default_factory=AIPreferences)
