"""Tests for the Profile API client."""

import httpx
import pytest

from profile_sync.models.request_models import (
    CareerProfilePayload,
    EducationPayload,
    ExperiencePayload,
    OpportunitiesInterestPayload,
    PersonalInfoPayload,
)
from profile_sync.services.auth_context import AuthContext
from profile_sync.services.errors import (
    AuthenticationExpiredError,
    ProfileAPIError,
    ProfileAPITransportError,
)
from profile_sync.services.profile_api import ProfileAPIClient


@pytest.mark.asyncio
async def test_requests_carry_bearer_token(settings, auth):
    """Test every request sends the current access token as JSON."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True, "data": {}})

    client = ProfileAPIClient(settings, auth=auth, transport=httpx.MockTransport(handler))
    await client.get_comprehensive_profile()

    assert seen[0].headers["Authorization"] == "Bearer test-token"
    assert seen[0].headers["Content-Type"] == "application/json"
    assert str(seen[0].url) == "http://profile.test/api/profile/comprehensive/"


@pytest.mark.asyncio
async def test_no_authorization_header_when_signed_out(settings):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True})

    client = ProfileAPIClient(settings, auth=AuthContext(), transport=httpx.MockTransport(handler))
    await client.update_personal_info(PersonalInfoPayload(first_name="Ada"))

    assert "Authorization" not in seen[0].headers


@pytest.mark.asyncio
async def test_unauthorized_clears_auth_context(client, fake_server, auth):
    """Test a 401 drops the stored tokens and reports expiry."""
    fake_server.respond(
        "GET", "/api/profile/comprehensive/",
        httpx.Response(401, json={"detail": "Token expired"})
    )

    with pytest.raises(AuthenticationExpiredError) as exc_info:
        await client.get_comprehensive_profile()

    assert exc_info.value.message == "Authentication expired. Please log in again."
    assert exc_info.value.code == "AUTHENTICATION_ERROR"
    assert exc_info.value.status_code == 401
    assert auth.access_token is None
    assert auth.refresh_token is None
    assert auth.user is None
    assert not auth.is_authenticated


@pytest.mark.asyncio
@pytest.mark.parametrize("body, expected", [
    ({"message": "Invalid degree", "error": "ignored"}, "Invalid degree"),
    ({"error": "Bad request"}, "Bad request"),
    ({"detail": "Not allowed"}, "Not allowed"),
    ({"detail": [{"loc": ["body", "email"], "msg": "field required"}]}, None),
    ({}, "API error: 400"),
])
async def test_error_message_extraction(client, fake_server, body, expected):
    fake_server.respond("POST", "/api/profile/personal/", httpx.Response(400, json=body))

    with pytest.raises(ProfileAPIError) as exc_info:
        await client.update_personal_info(PersonalInfoPayload())

    if expected is None:
        assert "field required" in exc_info.value.message
    else:
        assert exc_info.value.message == expected
    assert exc_info.value.details == body


@pytest.mark.asyncio
async def test_non_json_error_body(client, fake_server):
    fake_server.respond(
        "POST", "/api/profile/career/",
        httpx.Response(500, text="<html>Internal Server Error</html>")
    )

    with pytest.raises(ProfileAPIError) as exc_info:
        await client.update_career_profile(CareerProfilePayload())

    assert exc_info.value.message == "API error: 500"
    assert exc_info.value.code == "SERVER_ERROR"
    assert exc_info.value.details is None


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code, code", [
    (400, "VALIDATION_ERROR"),
    (422, "VALIDATION_ERROR"),
    (403, "PERMISSION_ERROR"),
    (404, "NOT_FOUND_ERROR"),
    (502, "SERVER_ERROR"),
    (409, "UNKNOWN_ERROR"),
])
async def test_error_codes_by_status(client, fake_server, status_code, code):
    fake_server.respond(
        "DELETE", "/api/profile/education/11/",
        httpx.Response(status_code, json={"detail": "nope"})
    )

    with pytest.raises(ProfileAPIError) as exc_info:
        await client.delete_education(11)

    assert exc_info.value.status_code == status_code
    assert exc_info.value.code == code


@pytest.mark.asyncio
async def test_network_failure_is_reported(settings, auth):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    client = ProfileAPIClient(settings, auth=auth, transport=httpx.MockTransport(handler))

    with pytest.raises(ProfileAPITransportError) as exc_info:
        await client.get_comprehensive_profile()

    assert exc_info.value.code == "NETWORK_ERROR"
    assert exc_info.value.status_code is None
    assert auth.access_token == "test-token"


@pytest.mark.asyncio
async def test_create_returns_server_id(client, fake_server):
    created = await client.create_education(EducationPayload(degree="BSc", school="UCL"))

    assert created.id == 100
    assert fake_server.requests[-1] == (
        "POST",
        "/api/profile/education/",
        {
            "degree": "BSc",
            "school": "UCL",
            "start_date": "",
            "is_currently_studying": False,
            "extra_curricular": "",
        },
    )


@pytest.mark.asyncio
async def test_update_omits_missing_end_date(client, fake_server):
    """Test a current position is sent without an end_date key."""
    await client.update_experience(
        21, ExperiencePayload(job_title="Analyst", is_currently_working=True)
    )

    method, path, body = fake_server.requests[-1]
    assert (method, path) == ("PUT", "/api/profile/experience/21/")
    assert "end_date" not in body
    assert body["is_currently_working"] is True


@pytest.mark.asyncio
async def test_empty_success_body(client, fake_server):
    fake_server.respond(
        "POST", "/api/profile/opportunities-interest/", httpx.Response(204)
    )

    response = await client.update_opportunities_interest(OpportunitiesInterestPayload(jobs=True))

    assert response.success is True


@pytest.mark.asyncio
async def test_completion_status(client, fake_server):
    fake_server.respond(
        "GET", "/api/profile/completion-status/",
        httpx.Response(200, json={
            "completion_percentage": 50,
            "missing_sections": ["projects", "ai", "career"],
            "completed_sections": ["personal", "education", "experience"],
        })
    )

    status = await client.get_completion_status()

    assert status.completion_percentage == 50
    assert "projects" in status.missing_sections


def test_base_url_trailing_slash_is_dropped(settings):
    settings.profile_api_base_url = "http://profile.test/"
    assert ProfileAPIClient(settings).base_url == "http://profile.test"


def test_auth_built_from_settings(settings):
    settings.profile_api_token = "configured"
    client = ProfileAPIClient(settings)
    assert client.auth.headers() == {"Authorization": "Bearer configured"}


@pytest.mark.asyncio
async def test_non_json_success_body(client, fake_server):
    fake_server.respond(
        "GET", "/api/profile/comprehensive/",
        httpx.Response(200, text="<html>Welcome</html>")
    )

    with pytest.raises(ProfileAPIError) as exc_info:
        await client.get_comprehensive_profile()

    assert exc_info.value.message == (
        "Unexpected response format from /api/profile/comprehensive/"
    )
    assert exc_info.value.status_code == 200
    assert exc_info.value.details == "<html>Welcome</html>"
