"""Tests for mapping between wire and local shapes."""

import pytest
from pydantic import ValidationError

from conftest import comprehensive_profile

from profile_sync.models.profile_models import (
    AIPreferences,
    Education,
    Experience,
    PersonalInfo,
    PersistedId,
    Project,
    UnknownId,
    UnsavedId,
)
from profile_sync.models.response_models import ComprehensiveProfile, UserGoal
from profile_sync.services import profile_mapper


def _profile(**overrides) -> ComprehensiveProfile:
    return ComprehensiveProfile(**comprehensive_profile(**overrides))


def test_format_goals_sorted_by_priority():
    goals = [
        UserGoal(priority=2, goal_display="Land an internship"),
        UserGoal(priority=1, goal_display="Win a scholarship"),
    ]
    assert profile_mapper.format_goals(goals, "ignored") == (
        "1. Win a scholarship\n2. Land an internship"
    )


def test_format_goals_falls_back_to_raw_goal():
    assert profile_mapper.format_goals(None, "Study abroad") == "Study abroad"
    assert profile_mapper.format_goals([], "Study abroad") == "Study abroad"
    assert profile_mapper.format_goals(None, None) == ""


def test_split_name():
    assert profile_mapper.split_name("Ada Lovelace") == ("Ada", "Lovelace")
    assert profile_mapper.split_name("Madonna") == ("Madonna", "")
    assert profile_mapper.split_name("Ada King Lovelace") == ("Ada", "King Lovelace")
    assert profile_mapper.split_name("") == ("", "")


def test_parse_date():
    assert profile_mapper.parse_date("2015-10-01") == "2015-10-01"
    assert profile_mapper.parse_date("October 2015") == "2015-10-01"
    assert profile_mapper.parse_date("July 2019") == "2019-07-01"
    assert profile_mapper.parse_date("Summer 2019") == ""
    assert profile_mapper.parse_date(None) == ""


def test_split_date_range():
    assert profile_mapper.split_date_range("", "October 2015 - July 2019") == (
        "October 2015", "July 2019"
    )
    assert profile_mapper.split_date_range("2019-01-01", "2020-01-01") == (
        "2019-01-01", "2020-01-01"
    )


def test_to_personal_info():
    info = profile_mapper.to_personal_info(_profile())
    assert info == PersonalInfo(
        name="Ada Lovelace",
        email="ada@example.com",
        phone="+447700900123",
        country="United Kingdom",
        goal="Find a scholarship",
    )


def test_to_personal_info_with_missing_fields():
    info = profile_mapper.to_personal_info(ComprehensiveProfile(first_name="Madonna"))
    assert info.name == "Madonna"
    assert info.email == ""


def test_to_education_list_maps_fields():
    entries = profile_mapper.to_education_list(_profile())
    assert entries == [
        Education(
            id=PersistedId(server_id=11),
            degree="BSc Mathematics",
            school="University of London",
            start_date="2019-09-01",
            end_date="2022-06-30",
            is_studying=False,
            description="Chess club",
        )
    ]


def test_empty_education_yields_single_placeholder():
    """Test an empty section becomes one blank 'new' entry."""
    entries = profile_mapper.to_education_list(_profile(education_profiles=[]))
    assert len(entries) == 1
    entry = entries[0]
    assert entry.id == UnsavedId()
    assert str(entry.id) == "new"
    assert entry.degree == entry.school == entry.start_date == entry.end_date == ""
    assert entry.description == ""
    assert entry.is_studying is False


def test_empty_sections_yield_placeholders():
    profile = ComprehensiveProfile()
    assert profile_mapper.to_experience_list(profile) == [Experience()]
    assert profile_mapper.to_project_list(profile) == [Project()]


def test_parsed_cv_data_used_when_no_profiles():
    profile = ComprehensiveProfile(parsed_profile_data={
        "education": [{
            "institution": "MIT",
            "degree": "MSc",
            "end_date": "September 2018 - June 2020",
        }],
        "experience": [{
            "company": "Acme",
            "position": "Engineer",
            "start_date": "March 2021",
            "is_current": True,
        }],
    })

    education = profile_mapper.to_education_list(profile)
    assert education[0].id == UnknownId(raw="existing_0")
    assert education[0].school == "MIT"
    assert education[0].start_date == "2018-09-01"
    assert education[0].end_date == "2020-06-01"

    experience = profile_mapper.to_experience_list(profile)
    assert experience[0].job_title == "Engineer"
    assert experience[0].start_date == "2021-03-01"
    assert experience[0].is_currently_working is True


def test_to_ai_preferences_labels_in_fixed_order():
    preferences = profile_mapper.to_ai_preferences(_profile())
    assert preferences.opportunities == ["Scholarships", "Grants"]
    assert preferences.prioritize_by == ["My academic background", "Other"]
    assert preferences.salary_expectation == "Remote only"


def test_to_ai_preferences_without_flags():
    preferences = profile_mapper.to_ai_preferences(ComprehensiveProfile())
    assert preferences.opportunities == []
    assert preferences.prioritize_by == []
    assert preferences.salary_expectation == ""


def test_personal_info_payload_splits_name():
    payload = profile_mapper.personal_info_payload(PersonalInfo(name="Ada Lovelace", email="a@b.co"))
    assert payload.first_name == "Ada"
    assert payload.last_name == "Lovelace"
    assert payload.email == "a@b.co"


def test_entry_payload_drops_end_date_when_active():
    education = Education(id="1", degree="BSc", end_date="2020-01-01", is_studying=True)
    experience = Experience(id="2", end_date="2020-01-01", is_currently_working=True)
    project = Project(id="3", end_date="2020-01-01", is_currently_working=True)

    assert "end_date" not in profile_mapper.education_payload(education).model_dump(exclude_none=True)
    assert "end_date" not in profile_mapper.experience_payload(experience).model_dump(exclude_none=True)
    assert "end_date" not in profile_mapper.project_payload(project).model_dump(exclude_none=True)


def test_entry_payload_keeps_end_date_when_finished():
    education = Education(id="1", end_date="2020-01-01", description="Debate")
    payload = profile_mapper.education_payload(education)
    assert payload.end_date == "2020-01-01"
    assert payload.extra_curricular == "Debate"


def test_opportunities_interest_payload_from_labels():
    preferences = AIPreferences.from_labels(["Jobs", "Grants"], [])
    payload = profile_mapper.opportunities_interest_payload(preferences)
    assert payload.model_dump() == {
        "scholarships": False,
        "jobs": True,
        "grants": True,
        "internships": False,
    }


def test_recommendation_priority_payload():
    preferences = AIPreferences.from_labels(
        [], ["My work experience", "Not a label"], "Above 50k"
    )
    payload = profile_mapper.recommendation_priority_payload(preferences)
    assert payload.model_dump() == {
        "academic_background": False,
        "work_experience": True,
        "preferred_locations": False,
        "others": False,
        "additional_preferences": "Above 50k",
    }


def test_null_wire_values_use_defaults():
    profile = ComprehensiveProfile(**comprehensive_profile(
        user_goals=[
            {"priority": 2, "goal_display": "Land an internship"},
            {"priority": None, "goal_display": None},
        ],
        experience_profiles=[{
            "id": 21,
            "job_title": "Analyst",
            "is_currently_working": None,
            "end_date": None,
        }],
        opportunities_interest={"scholarships": None, "jobs": None, "grants": True, "internships": None},
        parsed_profile_data={"education": None, "experience": [{"company": "Acme", "is_current": None}]},
    ))

    assert profile.user_goals[1].priority == 0
    assert profile_mapper.format_goals(profile.user_goals, None) == "0. \n2. Land an internship"
    experience = profile_mapper.to_experience_list(profile)
    assert experience[0].is_currently_working is False
    assert experience[0].end_date == ""
    assert profile_mapper.to_ai_preferences(profile).opportunities == ["Grants"]
    assert profile.parsed_profile_data.education == []
    assert profile.parsed_profile_data.experience[0].is_current is False


def test_null_row_id_is_still_rejected():
    with pytest.raises(ValidationError):
        ComprehensiveProfile(education_profiles=[{"id": None, "degree": "BSc"}])
