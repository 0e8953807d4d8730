"""Load and save orchestration for the profile sections.

The reconciler owns the mapping between the comprehensive profile read and
the local editable shapes, and saves exactly one section at a time:

* Personal / Career Profile: one upsert carrying the whole section.
* Education / Experience / Projects: every entry, one call at a time, as
  decided by the entry identity resolver.
* AI: the interest flags upsert, then the priority flags upsert.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from pydantic import BaseModel

from profile_sync.models.profile_models import (
    AIPreferences,
    CareerProfile,
    CvFile,
    Education,
    Experience,
    PersistedId,
    PersonalInfo,
    ProfileEntry,
    ProfileState,
    Project,
)
from profile_sync.models.response_models import (
    ComprehensiveProfile,
    ComprehensiveProfileResponse,
)
from profile_sync.services import profile_mapper
from profile_sync.services.entry_identity import SaveAction, resolve_save_action
from profile_sync.services.errors import ProfileLoadError, SectionSaveError
from profile_sync.services.profile_api import ProfileAPIClient
from profile_sync.utils.logger import get_logger


logger = get_logger(component="section_reconciler")

SECTION_LABELS = ("Personal", "Career Profile", "Education", "Experience", "Projects", "AI")

EntryT = TypeVar("EntryT", bound=ProfileEntry)


class LoadedProfile(BaseModel):
    """Local shapes built from one comprehensive profile read."""

    profile_data: ComprehensiveProfile
    personal_info: PersonalInfo
    cv_file: CvFile
    career_profile: CareerProfile
    education: List[Education]
    experience: List[Experience]
    projects: List[Project]
    ai_preferences: AIPreferences


class SectionReconciler:
    """Maps and saves profile sections through the Profile API client."""

    def __init__(self, client: ProfileAPIClient):
        """
        Initialize the reconciler.

        Args:
            client: Profile API client used for every remote call
        """
        self.client = client

    async def fetch(self) -> LoadedProfile:
        """
        Read the comprehensive profile and build the local shapes.

        Returns:
            LoadedProfile: Every section, ready to replace the store state

        Raises:
            ProfileLoadError: If the response does not report success
            ProfileAPIError: If the request fails
        """
        body = await self.client.get_comprehensive_profile()
        response = ComprehensiveProfileResponse.model_validate(body or {})
        if not response.success:
            raise ProfileLoadError(response.message or "Failed to load profile data")

        profile = response.data or ComprehensiveProfile()
        loaded = LoadedProfile(
            profile_data=profile,
            personal_info=profile_mapper.to_personal_info(profile),
            cv_file=profile_mapper.to_cv_file(profile),
            career_profile=profile_mapper.to_career_profile(profile),
            education=profile_mapper.to_education_list(profile),
            experience=profile_mapper.to_experience_list(profile),
            projects=profile_mapper.to_project_list(profile),
            ai_preferences=profile_mapper.to_ai_preferences(profile),
        )
        logger.info(
            "Profile loaded",
            education_entries=len(loaded.education),
            experience_entries=len(loaded.experience),
            project_entries=len(loaded.projects),
        )
        return loaded

    async def save_section(self, section: str, state: ProfileState) -> Optional[Dict[str, Any]]:
        """
        Save the section named by its tab label.

        Args:
            section: One of SECTION_LABELS
            state: Current local state (read only)

        Returns:
            Optional[Dict[str, Any]]: State slices to replace after the save
            ({} for singleton sections), or None for an unknown label

        Raises:
            SectionSaveError: A repeating section failed part way through
            ProfileAPIError: A singleton upsert failed
        """
        if section == "Personal":
            await self.save_personal_info(state.personal_info)
            return {}
        if section == "Career Profile":
            await self.save_career_profile(state.career_profile)
            return {}
        if section == "Education":
            return {"education": await self.save_education(state.education)}
        if section == "Experience":
            return {"experience": await self.save_experience(state.experience)}
        if section == "Projects":
            return {"projects": await self.save_projects(state.projects)}
        if section == "AI":
            await self.save_ai_preferences(state.ai_preferences)
            return {}

        logger.debug("Ignoring save for unknown section", section=section)
        return None

    async def save_personal_info(self, info: PersonalInfo) -> None:
        await self.client.update_personal_info(profile_mapper.personal_info_payload(info))
        logger.info("Personal info saved")

    async def save_career_profile(self, profile: CareerProfile) -> None:
        await self.client.update_career_profile(profile_mapper.career_profile_payload(profile))
        logger.info("Career profile saved")

    async def save_education(self, entries: List[Education]) -> List[Education]:
        return await self._save_entries(
            "Education",
            "education",
            entries,
            profile_mapper.education_payload,
            self.client.create_education,
            self.client.update_education,
        )

    async def save_experience(self, entries: List[Experience]) -> List[Experience]:
        return await self._save_entries(
            "Experience",
            "experience",
            entries,
            profile_mapper.experience_payload,
            self.client.create_experience,
            self.client.update_experience,
        )

    async def save_projects(self, entries: List[Project]) -> List[Project]:
        return await self._save_entries(
            "Projects",
            "projects",
            entries,
            profile_mapper.project_payload,
            self.client.create_project,
            self.client.update_project,
        )

    async def save_ai_preferences(self, preferences: AIPreferences) -> None:
        await self.client.update_opportunities_interest(
            profile_mapper.opportunities_interest_payload(preferences)
        )
        await self.client.update_recommendation_priority(
            profile_mapper.recommendation_priority_payload(preferences)
        )
        logger.info("AI preferences saved")

    async def _save_entries(
        self,
        section: str,
        slice_name: str,
        entries: List[EntryT],
        to_payload: Callable[[EntryT], Any],
        create: Callable[[Any], Awaitable[Any]],
        update: Callable[[int, Any], Awaitable[Any]]
    ) -> List[EntryT]:
        """
        Create, update or skip every entry of a repeating section, in order.

        The input list is not modified. Created entries come back with a
        PersistedId carrying the server id.

        Raises:
            SectionSaveError: On the first failing entry; its `updates` hold
                the list with every earlier entry already promoted
        """
        saved: List[EntryT] = []
        for index, entry in enumerate(entries):
            action = resolve_save_action(entry.id, is_blank=entry.is_blank())
            try:
                if action is SaveAction.CREATE:
                    created = await create(to_payload(entry))
                    saved.append(entry.model_copy(update={"id": PersistedId(server_id=created.id)}))
                    logger.debug("Entry created", section=section, server_id=created.id)
                elif action is SaveAction.UPDATE:
                    await update(entry.id.server_id, to_payload(entry))
                    saved.append(entry)
                    logger.debug("Entry updated", section=section, server_id=entry.id.server_id)
                elif entry.is_placeholder():
                    saved.append(entry)
                    logger.debug("Blank entry skipped", section=section)
                else:
                    saved.append(entry)
                    logger.warning("Entry with unrecognised id skipped", section=section, entry_id=str(entry.id))
            except Exception as e:
                logger.error(
                    "Section save aborted",
                    section=section,
                    failed_index=index,
                    error=str(e),
                )
                remaining = list(entries[index:])
                raise SectionSaveError(section, {slice_name: saved + remaining}, e) from e

        logger.info("Section saved", section=section, entries=len(saved))
        return saved
