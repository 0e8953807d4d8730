"""State store behind the profile wizard."""

import time
from typing import Any, Awaitable, Callable, List, Optional

from profile_sync.models.profile_models import (
    AIPreferences,
    CareerProfile,
    Education,
    Experience,
    PendingId,
    PersonalInfo,
    ProfileState,
    Project,
    parse_entry_id,
)
from profile_sync.services.entry_identity import DeleteAction, resolve_delete_action
from profile_sync.services.errors import SectionSaveError
from profile_sync.services.profile_api import ProfileAPIClient
from profile_sync.services.section_reconciler import SectionReconciler
from profile_sync.utils.logger import get_logger
from profile_sync.utils.validation import sanitize_input, validate_section


logger = get_logger(component="profile_store")

AlertCallback = Callable[[str], None]

VALIDATION_FAILED_MESSAGE = "Please fix the validation errors before saving."


def _log_alert(message: str) -> None:
    logger.warning("Alert", message=message)


class ProfileStore:
    """
    Single source of truth for the profile wizard.

    Build it with `await ProfileStore.open(client)`, which loads the profile
    once. UI handlers read `store.state` and mutate it only through the
    setters and helpers below.
    """

    def __init__(
        self,
        client: ProfileAPIClient,
        alert: Optional[AlertCallback] = None,
        reconciler: Optional[SectionReconciler] = None
    ):
        """
        Initialize an empty store.

        Args:
            client: Profile API client
            alert: Blocking user-facing alert (e.g. st.error); logs if None
            reconciler: Section reconciler (built from the client if None)
        """
        self.client = client
        self.alert = alert or _log_alert
        self.reconciler = reconciler or SectionReconciler(client)
        self.state = ProfileState()

    @classmethod
    async def open(
        cls,
        client: ProfileAPIClient,
        alert: Optional[AlertCallback] = None
    ) -> "ProfileStore":
        """Create a store and load the profile once."""
        store = cls(client, alert=alert)
        await store.fetch_profile_data()
        return store

    def _replace(self, **slices: Any) -> None:
        """Swap whole state slices in a single step."""
        self.state = self.state.model_copy(update=slices)

    # Setters

    def set_personal_info(self, info: PersonalInfo) -> None:
        self._replace(personal_info=PersonalInfo(
            name=sanitize_input(info.name),
            email=sanitize_input(info.email),
            phone=sanitize_input(info.phone),
            country=sanitize_input(info.country),
            goal=sanitize_input(info.goal),
        ))

    def set_career_profile(self, profile: CareerProfile) -> None:
        self._replace(career_profile=CareerProfile(
            industry=sanitize_input(profile.industry),
            job_title=sanitize_input(profile.job_title),
            profile_summary=sanitize_input(profile.profile_summary),
        ))

    def set_education(self, entries: List[Education]) -> None:
        self._replace(education=list(entries))

    def set_experience(self, entries: List[Experience]) -> None:
        self._replace(experience=list(entries))

    def set_projects(self, entries: List[Project]) -> None:
        self._replace(projects=list(entries))

    def set_ai_preferences(self, preferences: AIPreferences) -> None:
        self._replace(ai_preferences=preferences)

    # Load / save

    async def fetch_profile_data(self) -> None:
        """
        Reload every section from the server.

        On failure the error message is stored in `state.error` and the
        current sections are left untouched.
        """
        self._replace(loading=True, error=None, validation_errors={})
        try:
            loaded = await self.reconciler.fetch()
            self._replace(**dict(loaded))
        except Exception as e:
            message = getattr(e, "message", None) or str(e) or "Failed to load profile data"
            logger.error("Failed to fetch profile data", error=message)
            self._replace(error=message)
        finally:
            self._replace(loading=False)

    async def handle_save(self, active_section: str) -> bool:
        """
        Validate and save the active section, then reload the profile.

        Args:
            active_section: Tab label ('Personal', 'Career Profile',
                'Education', 'Experience', 'Projects' or 'AI')

        Returns:
            bool: True when the section was saved and the profile reloaded
        """
        self._replace(loading=True, validation_errors={})
        try:
            errors = validate_section(active_section, self.state)
            if errors:
                self._replace(validation_errors=errors, error=VALIDATION_FAILED_MESSAGE)
                return False

            updates = await self.reconciler.save_section(active_section, self.state)
            if updates is None:
                return False
            self._replace(**updates)

            await self.fetch_profile_data()
            return True
        except SectionSaveError as e:
            # Entries created before the failure keep their server ids.
            self._replace(**e.updates)
            logger.error("Failed to save profile", section=active_section, error=str(e))
            self.alert(str(e))
            return False
        except Exception as e:
            message = getattr(e, "message", None) or str(e) or "Failed to save profile. Please try again."
            logger.error("Failed to save profile", section=active_section, error=message)
            self.alert(message)
            return False
        finally:
            self._replace(loading=False)

    # Repeating entries

    @staticmethod
    def _new_local_key(entries: List[Any]) -> str:
        """Millisecond timestamp, bumped until unique within the list."""
        taken = {str(entry.id) for entry in entries}
        stamp = int(time.time() * 1000)
        while f"temp_{stamp}" in taken:
            stamp += 1
        return str(stamp)

    def add_education(self) -> Education:
        entry = Education(id=PendingId(local_key=self._new_local_key(self.state.education)))
        self._replace(education=self.state.education + [entry])
        return entry

    def add_experience(self) -> Experience:
        entry = Experience(id=PendingId(local_key=self._new_local_key(self.state.experience)))
        self._replace(experience=self.state.experience + [entry])
        return entry

    def add_project(self) -> Project:
        entry = Project(id=PendingId(local_key=self._new_local_key(self.state.projects)))
        self._replace(projects=self.state.projects + [entry])
        return entry

    async def delete_education_entry(self, entry_id: Any, index: int) -> bool:
        return await self._delete_entry(
            "education", Education, entry_id, index, self.client.delete_education
        )

    async def delete_experience_entry(self, entry_id: Any, index: int) -> bool:
        return await self._delete_entry(
            "experience", Experience, entry_id, index, self.client.delete_experience
        )

    async def delete_project_entry(self, entry_id: Any, index: int) -> bool:
        return await self._delete_entry(
            "projects", Project, entry_id, index, self.client.delete_project
        )

    async def _delete_entry(
        self,
        slice_name: str,
        entry_model: type,
        entry_id: Any,
        index: int,
        remote_delete: Callable[[int], Awaitable[Any]]
    ) -> bool:
        """
        Delete one entry, remotely first when it is persisted.

        A failed remote delete raises an alert and keeps the entry.

        Returns:
            bool: True when the entry was removed
        """
        parsed = parse_entry_id(entry_id)
        if resolve_delete_action(parsed) is DeleteAction.REMOTE:
            try:
                await remote_delete(parsed.server_id)
            except Exception as e:
                message = getattr(e, "message", None) or str(e)
                logger.error(
                    "Failed to delete entry",
                    section=slice_name,
                    entry_id=str(parsed),
                    error=message,
                )
                self.alert(f"Failed to delete entry: {message}")
                return False

        current = getattr(self.state, slice_name)
        updated = [entry for position, entry in enumerate(current) if position != index]
        if not updated:
            updated.append(entry_model())
        self._replace(**{slice_name: updated})
        logger.info("Entry deleted", section=slice_name, entry_id=str(parsed))
        return True
