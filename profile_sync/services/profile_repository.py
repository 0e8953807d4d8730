"""In-memory storage behind the reference Profile API."""

from typing import Dict, List, Optional

from profile_sync.models.request_models import (
    CareerProfilePayload,
    OpportunitiesInterestPayload,
    PersonalInfoPayload,
    RecommendationPriorityPayload,
)
from profile_sync.models.response_models import (
    CareerProfileData,
    CompletionStatus,
    ComprehensiveProfile,
    EducationProfile,
    ExperienceProfile,
    OpportunitiesInterestData,
    ProjectProfile,
    RecommendationPriorityData,
)


ENTRY_SECTIONS = {
    "education": ("education_profiles", EducationProfile),
    "experience": ("experience_profiles", ExperienceProfile),
    "project": ("project_profiles", ProjectProfile),
}


class EntryNotFoundError(LookupError):
    """No entry with the requested id exists in the section."""


class InMemoryProfileRepository:
    """
    Holds a single user's comprehensive profile.

    Entry ids are allocated per section from a monotonically increasing
    counter and never reused.
    """

    def __init__(self, profile: Optional[ComprehensiveProfile] = None):
        self.profile = profile.model_copy(deep=True) if profile else ComprehensiveProfile()
        self._next_ids: Dict[str, int] = {}
        for section, (attribute, _) in ENTRY_SECTIONS.items():
            rows = getattr(self.profile, attribute) or []
            self._next_ids[section] = max((row.id for row in rows), default=0) + 1
            setattr(self.profile, attribute, list(rows))

    def get_profile(self) -> ComprehensiveProfile:
        return self.profile.model_copy(deep=True)

    def upsert_personal_info(self, payload: PersonalInfoPayload) -> None:
        for field, value in payload.model_dump().items():
            setattr(self.profile, field, value)
        # A free-text goal replaces the prioritised onboarding goals.
        self.profile.user_goals = None

    def upsert_career_profile(self, payload: CareerProfilePayload) -> None:
        self.profile.career_profile = CareerProfileData(**payload.model_dump())

    def upsert_opportunities_interest(self, payload: OpportunitiesInterestPayload) -> None:
        self.profile.opportunities_interest = OpportunitiesInterestData(**payload.model_dump())

    def upsert_recommendation_priority(self, payload: RecommendationPriorityPayload) -> None:
        self.profile.recommendation_priority = RecommendationPriorityData(**payload.model_dump())

    def _rows(self, section: str) -> List:
        attribute, _ = ENTRY_SECTIONS[section]
        return getattr(self.profile, attribute)

    def create_entry(self, section: str, payload) -> int:
        """
        Store a new entry.

        Args:
            section: 'education', 'experience' or 'project'
            payload: EducationPayload, ExperiencePayload or ProjectPayload

        Returns:
            int: Server-assigned id
        """
        _, row_model = ENTRY_SECTIONS[section]
        entry_id = self._next_ids[section]
        self._next_ids[section] += 1
        self._rows(section).append(row_model(id=entry_id, **payload.model_dump()))
        return entry_id

    def update_entry(self, section: str, entry_id: int, payload) -> None:
        _, row_model = ENTRY_SECTIONS[section]
        rows = self._rows(section)
        for position, row in enumerate(rows):
            if row.id == entry_id:
                rows[position] = row_model(id=entry_id, **payload.model_dump())
                return
        raise EntryNotFoundError(f"{section.capitalize()} entry {entry_id} not found")

    def delete_entry(self, section: str, entry_id: int) -> None:
        rows = self._rows(section)
        for position, row in enumerate(rows):
            if row.id == entry_id:
                del rows[position]
                return
        raise EntryNotFoundError(f"{section.capitalize()} entry {entry_id} not found")

    def completion_status(self) -> CompletionStatus:
        """Report which of the six sections hold data."""
        profile = self.profile
        interest = profile.opportunities_interest
        sections = {
            "personal": bool(profile.first_name and profile.email),
            "career": bool(
                profile.career_profile
                and (profile.career_profile.industry or profile.career_profile.job_title)
            ),
            "education": bool(profile.education_profiles),
            "experience": bool(profile.experience_profiles),
            "projects": bool(profile.project_profiles),
            "ai": bool(interest and any(interest.model_dump().values())),
        }
        completed = [name for name, done in sections.items() if done]
        missing = [name for name, done in sections.items() if not done]
        return CompletionStatus(
            completion_percentage=round(100 * len(completed) / len(sections)),
            completed_sections=completed,
            missing_sections=missing,
        )
