"""Input sanitisation and per-section validation for profile edits."""

import re
from datetime import date
from typing import Dict, List, Optional

from pydantic import EmailStr, HttpUrl, TypeAdapter, ValidationError


PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{0,15}$")
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MAX_NAME_LENGTH = 100
MAX_TEXT_LENGTH = 2000

EMAIL_ADAPTER = TypeAdapter(EmailStr)
URL_ADAPTER = TypeAdapter(HttpUrl)
DATE_ADAPTER = TypeAdapter(date)


def sanitize_input(value: Optional[str]) -> str:
    """
    Strip markup and script fragments from free-text input.

    Args:
        value: Raw user input

    Returns:
        str: Cleaned, trimmed text ('' for non-string input)
    """
    if not isinstance(value, str):
        return ""
    value = re.sub(r"[<>]", "", value)
    value = re.sub(r"javascript:", "", value, flags=re.IGNORECASE)
    value = re.sub(r"on\w+=", "", value, flags=re.IGNORECASE)
    return value.strip()


def _error_reason(error: ValidationError) -> str:
    """Reason part of the first pydantic error message."""
    message = error.errors()[0]["msg"]
    for separator in (": ", ", "):
        if separator in message:
            return message.split(separator, 1)[1]
    return message


def email_error(email: str) -> Optional[str]:
    """Why an email address is rejected, or None when it is valid."""
    try:
        EMAIL_ADAPTER.validate_python(email)
    except ValidationError as e:
        return _error_reason(e)
    return None


def url_error(url: str) -> Optional[str]:
    """Why a URL is rejected, or None for an absolute http(s) URL."""
    try:
        URL_ADAPTER.validate_python(url)
    except ValidationError as e:
        return _error_reason(e)
    return None


def is_valid_email(email: str) -> bool:
    return email_error(email) is None


def is_valid_url(url: str) -> bool:
    return url_error(url) is None


def is_valid_phone_number(phone: str) -> bool:
    """Check a phone number, ignoring spaces, dashes and parentheses."""
    return bool(PHONE_PATTERN.match(re.sub(r"[\s\-()]", "", phone)))


def _parse_date(value: str) -> Optional[date]:
    if not ISO_DATE_PATTERN.match(value):
        return None
    try:
        return DATE_ADAPTER.validate_python(value)
    except ValidationError:
        return None


def _validate_period(
    start_date: str,
    end_date: str,
    is_active: bool,
    errors: List[str]
) -> None:
    """Validate a start/end pair where an active entry has no end date."""
    start = _parse_date(start_date) if start_date else None
    if start_date and start is None:
        errors.append("Start date must be a valid date (YYYY-MM-DD)")

    if is_active or not end_date:
        return

    end = _parse_date(end_date)
    if end is None:
        errors.append("End date must be a valid date (YYYY-MM-DD)")
    elif start is not None and end < start:
        errors.append("End date cannot be before start date")


def validate_personal_info(info) -> List[str]:
    """
    Validate the personal section.

    Args:
        info: PersonalInfo model

    Returns:
        List[str]: Error messages (empty when valid)
    """
    errors: List[str] = []

    if not info.name.strip():
        errors.append("Name is required")
    elif len(info.name) > MAX_NAME_LENGTH:
        errors.append(f"Name must be at most {MAX_NAME_LENGTH} characters")

    if not info.email.strip():
        errors.append("Email is required")
    else:
        reason = email_error(info.email)
        if reason:
            errors.append(f"Please enter a valid email address: {reason}")

    if info.phone and not is_valid_phone_number(info.phone):
        errors.append("Please enter a valid phone number")

    return errors


def validate_career_profile(profile) -> List[str]:
    """Validate the career section."""
    errors: List[str] = []
    if len(profile.profile_summary) > MAX_TEXT_LENGTH:
        errors.append(f"Profile summary must be at most {MAX_TEXT_LENGTH} characters")
    return errors


def validate_education(entry) -> List[str]:
    """Validate one education entry."""
    errors: List[str] = []
    if not entry.degree.strip():
        errors.append("Degree is required")
    if not entry.school.strip():
        errors.append("School is required")
    _validate_period(entry.start_date, entry.end_date, entry.is_studying, errors)
    return errors


def validate_experience(entry) -> List[str]:
    """Validate one experience entry."""
    errors: List[str] = []
    if not entry.job_title.strip():
        errors.append("Job title is required")
    if not entry.company_name.strip():
        errors.append("Company name is required")
    _validate_period(
        entry.start_date, entry.end_date, entry.is_currently_working, errors
    )
    return errors


def validate_project(entry) -> List[str]:
    """Validate one project entry."""
    errors: List[str] = []
    if not entry.project_title.strip():
        errors.append("Project title is required")
    if entry.project_link:
        reason = url_error(entry.project_link)
        if reason:
            errors.append(f"Project link must be a valid URL: {reason}")
    _validate_period(
        entry.start_date, entry.end_date, entry.is_currently_working, errors
    )
    return errors


def _validate_entries(label: str, entries, validator) -> List[str]:
    messages: List[str] = []
    for index, entry in enumerate(entries):
        # The untouched placeholder row is skipped on save, so it is not validated.
        if entry.is_placeholder():
            continue
        entry_errors = validator(entry)
        if entry_errors:
            messages.append(f"{label} {index + 1}: {', '.join(entry_errors)}")
    return messages


def validate_section(section: str, state) -> Dict[str, List[str]]:
    """
    Validate the section that is about to be saved.

    Args:
        section: Section label ('Personal', 'Career Profile', 'Education',
            'Experience', 'Projects' or 'AI')
        state: ProfileState holding the local edits

    Returns:
        Dict[str, List[str]]: Errors keyed by section key; empty when valid
    """
    errors: Dict[str, List[str]] = {}

    if section == "Personal":
        personal_errors = validate_personal_info(state.personal_info)
        if personal_errors:
            errors["personal"] = personal_errors
    elif section == "Career Profile":
        career_errors = validate_career_profile(state.career_profile)
        if career_errors:
            errors["career"] = career_errors
    elif section == "Education":
        education_errors = _validate_entries("Education", state.education, validate_education)
        if education_errors:
            errors["education"] = education_errors
    elif section == "Experience":
        experience_errors = _validate_entries("Experience", state.experience, validate_experience)
        if experience_errors:
            errors["experience"] = experience_errors
    elif section == "Projects":
        project_errors = _validate_entries("Project", state.projects, validate_project)
        if project_errors:
            errors["projects"] = project_errors

    return errors
