"""Streamlit profile wizard backed by the Profile API."""

import asyncio
import os
from typing import Any, Callable, List

import httpx
import streamlit as st

from profile_sync.models.profile_models import (
    OPPORTUNITY_LABELS,
    PRIORITY_LABELS,
    AIPreferences,
    CareerProfile,
    Education,
    Experience,
    PersonalInfo,
    Project,
)
from profile_sync.services.profile_api import ProfileAPIClient, ProfileAPISettings
from profile_sync.services.profile_store import ProfileStore
from profile_sync.services.section_reconciler import SECTION_LABELS
from profile_sync.utils.logger import configure_logging

# Configuration
API_BASE_URL = os.getenv("PROFILE_API_BASE_URL", "http://localhost:8000")

# Page configuration
st.set_page_config(
    page_title="Profile",
    page_icon="🧭",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #1f77b4;
        margin-bottom: 1rem;
    }
    .entry-box {
        background-color: #f0f2f6;
        padding: 1rem;
        border-radius: 0.5rem;
        border-left: 4px solid #1f77b4;
        margin-bottom: 1rem;
    }
</style>
""", unsafe_allow_html=True)


def run(coro) -> Any:
    """Drive one store coroutine to completion on a fresh event loop."""
    return asyncio.run(coro)


def get_store(api_url: str, token: str) -> ProfileStore:
    """
    Get the session's store, creating and loading it on first use.

    Args:
        api_url: Profile API base URL
        token: Bearer token for the signed-in user

    Returns:
        ProfileStore: Loaded store
    """
    store = st.session_state.get("profile_store")
    if store is None or store.client.base_url != api_url.rstrip("/"):
        settings = ProfileAPISettings(profile_api_base_url=api_url, profile_api_token=token or None)
        configure_logging(settings.log_level)
        client = ProfileAPIClient(settings)
        store = run(ProfileStore.open(client, alert=st.error))
        st.session_state.profile_store = store
    elif token and store.client.auth.access_token != token:
        store.client.auth.access_token = token
    return store


def render_personal(store: ProfileStore) -> None:
    info = store.state.personal_info
    name = st.text_input("Full name *", value=info.name, key="personal-name")
    email = st.text_input("Email *", value=info.email, key="personal-email")
    phone = st.text_input("Phone", value=info.phone, key="personal-phone")
    country = st.text_input("Country", value=info.country, key="personal-country")
    goal = st.text_area(
        "Goals",
        value=info.goal,
        key="personal-goal",
        help="One goal per line, most important first"
    )
    store.set_personal_info(PersonalInfo(
        name=name, email=email, phone=phone, country=country, goal=goal
    ))

    cv_file = store.state.cv_file
    if cv_file.filename:
        st.caption(f"📄 CV on file: {cv_file.filename} (uploaded {cv_file.uploaded_at or 'unknown'})")


def render_career(store: ProfileStore) -> None:
    profile = store.state.career_profile
    industry = st.text_input("Industry", value=profile.industry, key="career-industry")
    job_title = st.text_input("Job title", value=profile.job_title, key="career-job-title")
    summary = st.text_area("Profile summary", value=profile.profile_summary, key="career-summary")
    store.set_career_profile(CareerProfile(
        industry=industry, job_title=job_title, profile_summary=summary
    ))


def render_entries(
    store: ProfileStore,
    section: str,
    entries: List[Any],
    render_entry: Callable[[Any, str], Any],
    set_entries: Callable[[List[Any]], None],
    add_entry: Callable[[], Any],
    delete_entry: Callable[[Any, int], Any]
) -> None:
    """
    Render one repeating section with add and delete controls.

    Args:
        store: Profile store
        section: Key prefix for the section's widgets
        entries: Current entries
        render_entry: Draws one entry's inputs, returns the edited entry
        set_entries: Store setter for the section
        add_entry: Store helper appending a blank entry
        delete_entry: Store coroutine removing an entry by id and index
    """
    edited = []
    for index, entry in enumerate(entries):
        key = f"{section}-{index}-{entry.id}"
        with st.container():
            st.markdown(f"**#{index + 1}**")
            edited.append(render_entry(entry, key))
            if st.button("🗑️ Delete", key=f"{key}-delete"):
                set_entries(edited + entries[index + 1:])
                if run(delete_entry(str(entry.id), index)):
                    st.rerun()
        st.divider()
    set_entries(edited)

    if st.button("➕ Add another", key=f"{section}-add"):
        add_entry()
        st.rerun()


def render_education_entry(entry: Education, key: str) -> Education:
    degree = st.text_input("Degree *", value=entry.degree, key=f"{key}-degree")
    school = st.text_input("School *", value=entry.school, key=f"{key}-school")
    start_date = st.text_input("Start date (YYYY-MM-DD)", value=entry.start_date, key=f"{key}-start")
    is_studying = st.checkbox("I'm currently studying here", value=entry.is_studying, key=f"{key}-current")
    end_date = entry.end_date
    if not is_studying:
        end_date = st.text_input("End date (YYYY-MM-DD)", value=entry.end_date, key=f"{key}-end")
    description = st.text_area("Extra-curricular activities", value=entry.description, key=f"{key}-description")
    return Education(
        id=entry.id,
        degree=degree,
        school=school,
        start_date=start_date,
        end_date=end_date,
        is_studying=is_studying,
        description=description,
    )


def render_experience_entry(entry: Experience, key: str) -> Experience:
    job_title = st.text_input("Job title *", value=entry.job_title, key=f"{key}-title")
    company_name = st.text_input("Company *", value=entry.company_name, key=f"{key}-company")
    location = st.text_input("Location", value=entry.location, key=f"{key}-location")
    start_date = st.text_input("Start date (YYYY-MM-DD)", value=entry.start_date, key=f"{key}-start")
    is_current = st.checkbox(
        "I currently work here", value=entry.is_currently_working, key=f"{key}-current"
    )
    end_date = entry.end_date
    if not is_current:
        end_date = st.text_input("End date (YYYY-MM-DD)", value=entry.end_date, key=f"{key}-end")
    description = st.text_area("Description", value=entry.description, key=f"{key}-description")
    return Experience(
        id=entry.id,
        job_title=job_title,
        company_name=company_name,
        location=location,
        start_date=start_date,
        end_date=end_date,
        is_currently_working=is_current,
        description=description,
    )


def render_project_entry(entry: Project, key: str) -> Project:
    title = st.text_input("Project title *", value=entry.project_title, key=f"{key}-title")
    start_date = st.text_input("Start date (YYYY-MM-DD)", value=entry.start_date, key=f"{key}-start")
    is_current = st.checkbox(
        "I'm currently working on this", value=entry.is_currently_working, key=f"{key}-current"
    )
    end_date = entry.end_date
    if not is_current:
        end_date = st.text_input("End date (YYYY-MM-DD)", value=entry.end_date, key=f"{key}-end")
    link = st.text_input("Project link", value=entry.project_link, key=f"{key}-link")
    description = st.text_area("Description", value=entry.description, key=f"{key}-description")
    return Project(
        id=entry.id,
        project_title=title,
        start_date=start_date,
        end_date=end_date,
        is_currently_working=is_current,
        project_link=link,
        description=description,
    )


def render_ai(store: ProfileStore) -> None:
    preferences = store.state.ai_preferences
    opportunities = st.multiselect(
        "What opportunities are you interested in?",
        options=list(OPPORTUNITY_LABELS.values()),
        default=preferences.opportunities,
        key="ai-opportunities"
    )
    prioritize_by = st.multiselect(
        "Prioritise recommendations by",
        options=list(PRIORITY_LABELS.values()),
        default=preferences.prioritize_by,
        key="ai-priorities"
    )
    salary = st.text_area(
        "Salary expectation and other preferences",
        value=preferences.salary_expectation,
        key="ai-salary"
    )
    store.set_ai_preferences(AIPreferences.from_labels(opportunities, prioritize_by, salary))


def main():
    """Main Streamlit app."""

    st.markdown('<div class="main-header">🧭 Your Profile</div>', unsafe_allow_html=True)

    with st.sidebar:
        st.header("🔧 Configuration")
        api_url = st.text_input(
            "Profile API URL",
            value=API_BASE_URL,
            help="Base URL of the Profile API"
        )
        token = st.text_input(
            "Access token",
            value=os.getenv("PROFILE_API_TOKEN", ""),
            type="password"
        )

        st.divider()

        st.header("🔍 Server status")
        try:
            with httpx.Client(timeout=2.0) as client:
                response = client.get(f"{api_url.rstrip('/')}/health")
                if response.status_code == 200:
                    st.success("✅ Profile API is running")
                else:
                    st.warning(f"⚠️  Server responded with status: {response.status_code}")
        except httpx.ConnectError:
            st.error("❌ Profile API is not running")
            st.code("uvicorn profile_sync.main:app --reload", language="bash")
        except httpx.HTTPError as e:
            st.warning(f"⚠️  Could not check server status: {str(e)}")

    store = get_store(api_url, token)

    with st.sidebar:
        st.divider()
        st.header("📊 Completion")
        try:
            completion = run(store.client.get_completion_status())
            st.progress(completion.completion_percentage / 100)
            if completion.missing_sections:
                st.caption("Missing: " + ", ".join(completion.missing_sections))
        except Exception as e:
            st.caption(f"Completion unavailable: {str(e)}")

    if store.state.error and not store.state.validation_errors:
        st.error(f"❌ {store.state.error}")
        if st.button("🔄 Retry"):
            run(store.fetch_profile_data())
            st.rerun()

    # Applied before the radio exists: a widget's state cannot change after it renders.
    if "next_section" in st.session_state:
        st.session_state.active_section = st.session_state.pop("next_section")

    active_section = st.radio(
        "Section",
        list(SECTION_LABELS),
        horizontal=True,
        key="active_section",
        label_visibility="collapsed"
    )

    if active_section == "Personal":
        render_personal(store)
    elif active_section == "Career Profile":
        render_career(store)
    elif active_section == "Education":
        render_entries(
            store, "education", store.state.education, render_education_entry,
            store.set_education, store.add_education, store.delete_education_entry
        )
    elif active_section == "Experience":
        render_entries(
            store, "experience", store.state.experience, render_experience_entry,
            store.set_experience, store.add_experience, store.delete_experience_entry
        )
    elif active_section == "Projects":
        render_entries(
            store, "projects", store.state.projects, render_project_entry,
            store.set_projects, store.add_project, store.delete_project_entry
        )
    elif active_section == "AI":
        render_ai(store)

    for messages in store.state.validation_errors.values():
        for message in messages:
            st.warning(f"⚠️ {message}")

    label = "Save" if active_section == "AI" else "Next"
    if st.button(label, type="primary", use_container_width=True, disabled=store.state.loading):
        with st.spinner("⏳ Saving..."):
            saved = run(store.handle_save(active_section))
        if saved:
            position = SECTION_LABELS.index(active_section)
            if position + 1 < len(SECTION_LABELS):
                st.session_state.next_section = SECTION_LABELS[position + 1]
            st.rerun()
        elif store.state.validation_errors:
            st.rerun()


if __name__ == "__main__":
    main()
