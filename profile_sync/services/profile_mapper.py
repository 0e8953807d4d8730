"""Mapping between the Profile API wire shapes and the local editable shapes."""

import re
from typing import List, Optional, Tuple

from profile_sync.models.profile_models import (
    AIPreferences,
    CareerProfile,
    CvFile,
    Education,
    Experience,
    OpportunityInterests,
    PersonalInfo,
    Project,
    RecommendationPriorities,
    UnknownId,
)
from profile_sync.models.request_models import (
    CareerProfilePayload,
    EducationPayload,
    ExperiencePayload,
    OpportunitiesInterestPayload,
    PersonalInfoPayload,
    ProjectPayload,
    RecommendationPriorityPayload,
)
from profile_sync.models.response_models import ComprehensiveProfile, UserGoal


MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# CV parsers emit ranges with either a hyphen or an en dash.
DATE_RANGE_SEPARATORS = (" - ", " – ")


def parse_date(value: Optional[str]) -> str:
    """
    Normalise a date string to YYYY-MM-DD.

    Example: "October 2015" -> "2015-10-01"

    Args:
        value: ISO date or "<Month> <Year>"

    Returns:
        str: ISO date, or '' when the value cannot be parsed
    """
    if not value:
        return ""
    if ISO_DATE_PATTERN.match(value):
        return value

    parts = value.strip().split(" ")
    if len(parts) == 2 and parts[0] in MONTH_NAMES and re.match(r"^\d{4}$", parts[1]):
        month = MONTH_NAMES.index(parts[0]) + 1
        return f"{parts[1]}-{month:02d}-01"

    return ""


def split_date_range(start_date: Optional[str], end_date: Optional[str]) -> Tuple[str, str]:
    """Split an end date that actually holds a "start - end" range."""
    start = start_date or ""
    end = end_date or ""
    for separator in DATE_RANGE_SEPARATORS:
        if separator in end:
            head, _, tail = end.partition(separator)
            return head.strip(), tail.strip()
    return start, end


def format_goals(user_goals: Optional[List[UserGoal]], fallback: Optional[str]) -> str:
    """
    Render prioritised goals as "<priority>. <goal_display>" lines.

    Args:
        user_goals: Goals picked during onboarding
        fallback: Free-text goal used when no prioritised goals exist

    Returns:
        str: Newline separated goals
    """
    if not user_goals:
        return fallback or ""
    ordered = sorted(user_goals, key=lambda goal: goal.priority)
    return "\n".join(f"{goal.priority}. {goal.goal_display}" for goal in ordered)


def split_name(name: str) -> Tuple[str, str]:
    """
    Split a full name on the first space.

    Example: "Ada King Lovelace" -> ("Ada", "King Lovelace")
    """
    parts = name.split(" ")
    return parts[0], " ".join(parts[1:])


def to_personal_info(profile: ComprehensiveProfile) -> PersonalInfo:
    return PersonalInfo(
        name=f"{profile.first_name or ''} {profile.last_name or ''}".strip(),
        email=profile.email or "",
        phone=profile.phone_number or "",
        country=profile.country or "",
        goal=format_goals(profile.user_goals, profile.goal),
    )


def to_cv_file(profile: ComprehensiveProfile) -> CvFile:
    return CvFile(
        filename=profile.cv_filename,
        uploaded_at=profile.cv_uploaded_at,
        has_cv_in_gcs=bool(profile.has_cv_in_gcs),
        download_url=profile.cv_download_url,
    )


def to_career_profile(profile: ComprehensiveProfile) -> CareerProfile:
    career = profile.career_profile
    if career is None:
        return CareerProfile()
    return CareerProfile(
        industry=career.industry or "",
        job_title=career.job_title or "",
        profile_summary=career.profile_summary or "",
    )


def to_education_list(profile: ComprehensiveProfile) -> List[Education]:
    """Map education rows; an empty section yields one blank 'new' row."""
    if profile.education_profiles:
        entries = [
            Education(
                id=row.id,
                degree=row.degree or "",
                school=row.school or "",
                start_date=row.start_date or "",
                end_date=row.end_date or "",
                is_studying=row.is_currently_studying,
                description=row.extra_curricular or "",
            )
            for row in profile.education_profiles
        ]
    elif profile.education_profiles is None and profile.parsed_profile_data:
        entries = []
        for index, row in enumerate(profile.parsed_profile_data.education):
            start, end = split_date_range(row.start_date, row.end_date)
            entries.append(Education(
                id=UnknownId(raw=f"existing_{index}"),
                degree=row.degree or "",
                school=row.institution or "",
                start_date=parse_date(start),
                end_date=parse_date(end),
                description=row.description or "",
            ))
    else:
        entries = []
    return entries or [Education()]


def to_experience_list(profile: ComprehensiveProfile) -> List[Experience]:
    """Map experience rows; an empty section yields one blank 'new' row."""
    if profile.experience_profiles:
        entries = [
            Experience(
                id=row.id,
                job_title=row.job_title or "",
                company_name=row.company_name or "",
                location=row.location or "",
                start_date=row.start_date or "",
                end_date=row.end_date or "",
                is_currently_working=row.is_currently_working,
                description=row.description or "",
            )
            for row in profile.experience_profiles
        ]
    elif profile.experience_profiles is None and profile.parsed_profile_data:
        entries = []
        for index, row in enumerate(profile.parsed_profile_data.experience):
            start, end = split_date_range(row.start_date, row.end_date)
            entries.append(Experience(
                id=UnknownId(raw=f"existing_{index}"),
                job_title=row.position or "",
                company_name=row.company or "",
                start_date=parse_date(start),
                end_date=parse_date(end),
                is_currently_working=row.is_current,
                description=row.description or "",
            ))
    else:
        entries = []
    return entries or [Experience()]


def to_project_list(profile: ComprehensiveProfile) -> List[Project]:
    """Map project rows; an empty section yields one blank 'new' row."""
    entries = [
        Project(
            id=row.id,
            project_title=row.project_title or "",
            start_date=row.start_date or "",
            end_date=row.end_date or "",
            is_currently_working=row.is_currently_working,
            project_link=row.project_link or "",
            description=row.description or "",
        )
        for row in profile.project_profiles or []
    ]
    return entries or [Project()]


def to_ai_preferences(profile: ComprehensiveProfile) -> AIPreferences:
    interest = profile.opportunities_interest
    priority = profile.recommendation_priority
    return AIPreferences(
        interests=OpportunityInterests(
            scholarships=bool(interest and interest.scholarships),
            jobs=bool(interest and interest.jobs),
            grants=bool(interest and interest.grants),
            internships=bool(interest and interest.internships),
        ),
        priorities=RecommendationPriorities(
            academic_background=bool(priority and priority.academic_background),
            work_experience=bool(priority and priority.work_experience),
            preferred_locations=bool(priority and priority.preferred_locations),
            others=bool(priority and priority.others),
        ),
        salary_expectation=(priority.additional_preferences or "") if priority else "",
    )


def personal_info_payload(info: PersonalInfo) -> PersonalInfoPayload:
    first_name, last_name = split_name(info.name)
    return PersonalInfoPayload(
        first_name=first_name,
        last_name=last_name,
        email=info.email,
        phone_number=info.phone,
        country=info.country,
        goal=info.goal,
    )


def career_profile_payload(profile: CareerProfile) -> CareerProfilePayload:
    return CareerProfilePayload(
        industry=profile.industry,
        job_title=profile.job_title,
        profile_summary=profile.profile_summary,
    )


def education_payload(entry: Education) -> EducationPayload:
    return EducationPayload(
        degree=entry.degree,
        school=entry.school,
        start_date=entry.start_date,
        end_date=None if entry.is_studying else entry.end_date,
        is_currently_studying=entry.is_studying,
        extra_curricular=entry.description,
    )


def experience_payload(entry: Experience) -> ExperiencePayload:
    return ExperiencePayload(
        job_title=entry.job_title,
        company_name=entry.company_name,
        location=entry.location,
        start_date=entry.start_date,
        end_date=None if entry.is_currently_working else entry.end_date,
        is_currently_working=entry.is_currently_working,
        description=entry.description,
    )


def project_payload(entry: Project) -> ProjectPayload:
    return ProjectPayload(
        project_title=entry.project_title,
        start_date=entry.start_date,
        end_date=None if entry.is_currently_working else entry.end_date,
        is_currently_working=entry.is_currently_working,
        project_link=entry.project_link,
        description=entry.description,
    )


def opportunities_interest_payload(preferences: AIPreferences) -> OpportunitiesInterestPayload:
    return OpportunitiesInterestPayload(**preferences.interests.model_dump())


def recommendation_priority_payload(preferences: AIPreferences) -> RecommendationPriorityPayload:
    return RecommendationPriorityPayload(
        **preferences.priorities.model_dump(),
        additional_preferences=preferences.salary_expectation,
    )
