"""Shared fixtures for the profile sync tests."""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest

from profile_sync.main import app, get_repository
from profile_sync.services.auth_context import AuthContext
from profile_sync.services.profile_api import ProfileAPIClient, ProfileAPISettings
from profile_sync.services.profile_repository import InMemoryProfileRepository
from profile_sync.services.seed_loader import ProfileSeedLoader


ENTRY_PATHS = {
    "/api/profile/education/",
    "/api/profile/experience/",
    "/api/profile/project/",
}


def comprehensive_profile(**overrides) -> Dict[str, Any]:
    """A comprehensive profile `data` object with one row per section."""
    data = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "phone_number": "+447700900123",
        "country": "United Kingdom",
        "goal": "Find a scholarship",
        "user_goals": None,
        "career_profile": {
            "industry": "Technology",
            "job_title": "Research Assistant",
            "profile_summary": "Mathematician",
        },
        "education_profiles": [
            {
                "id": 11,
                "degree": "BSc Mathematics",
                "school": "University of London",
                "start_date": "2019-09-01",
                "end_date": "2022-06-30",
                "is_currently_studying": False,
                "extra_curricular": "Chess club",
            }
        ],
        "experience_profiles": [
            {
                "id": 21,
                "job_title": "Analyst",
                "company_name": "Engines Ltd",
                "location": "London",
                "start_date": "2022-09-01",
                "end_date": None,
                "is_currently_working": True,
                "description": "",
            }
        ],
        "project_profiles": [],
        "opportunities_interest": {
            "scholarships": True,
            "jobs": False,
            "grants": True,
            "internships": False,
        },
        "recommendation_priority": {
            "academic_background": True,
            "work_experience": False,
            "preferred_locations": False,
            "others": True,
            "additional_preferences": "Remote only",
        },
    }
    data.update(overrides)
    return data


Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeProfileServer:
    """
    Records every request and answers from canned responses.

    Unconfigured requests get sensible defaults: the comprehensive read
    returns `profile`, entry creation returns a fresh id, everything else
    returns {"success": true}.
    """

    def __init__(self, profile: Optional[Dict[str, Any]] = None):
        self.profile = profile if profile is not None else comprehensive_profile()
        self.requests: List[Tuple[str, str, Any]] = []
        self.responses: Dict[Tuple[str, str], Responder] = {}
        self.next_id = 100

    def respond(self, method: str, path: str, response: Responder) -> None:
        self.responses[(method, path)] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        path = request.url.path
        self.requests.append((request.method, path, body))

        configured = self.responses.get((request.method, path))
        if configured is not None:
            return configured(request) if callable(configured) else configured

        if request.method == "GET" and path == "/api/profile/comprehensive/":
            return httpx.Response(200, json={"success": True, "data": self.profile})
        if request.method == "POST" and path in ENTRY_PATHS:
            entry_id = self.next_id
            self.next_id += 1
            return httpx.Response(201, json={"success": True, "id": entry_id})
        return httpx.Response(200, json={"success": True})

    def calls(self, method: Optional[str] = None) -> List[Tuple[str, str, Any]]:
        """Requests other than the comprehensive read, optionally by method."""
        return [
            call for call in self.requests
            if call[1] != "/api/profile/comprehensive/"
            and (method is None or call[0] == method)
        ]

    def fetch_count(self) -> int:
        return sum(1 for call in self.requests if call[1] == "/api/profile/comprehensive/")


@pytest.fixture
def settings() -> ProfileAPISettings:
    return ProfileAPISettings(
        profile_api_base_url="http://profile.test",
        profile_api_timeout=5,
        profile_api_token=None,
    )


@pytest.fixture
def auth() -> AuthContext:
    return AuthContext(access_token="test-token", refresh_token="refresh-token", user={"id": 1})


@pytest.fixture
def fake_server() -> FakeProfileServer:
    return FakeProfileServer()


@pytest.fixture
def client(settings, auth, fake_server) -> ProfileAPIClient:
    """Client wired to the fake server."""
    return ProfileAPIClient(settings, auth=auth, transport=httpx.MockTransport(fake_server.handler))


@pytest.fixture
def alerts() -> List[str]:
    return []


@pytest.fixture
def repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository(ProfileSeedLoader().load_profile())


@pytest.fixture
def api_app(repository):
    """Reference FastAPI app backed by a fresh repository."""
    app.dependency_overrides[get_repository] = lambda: repository
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def asgi_client(settings, auth, api_app) -> ProfileAPIClient:
    """Client wired to the reference FastAPI app."""
    return ProfileAPIClient(settings, auth=auth, transport=httpx.ASGITransport(app=api_app))
