"""FastAPI reference implementation of the Remote Profile API.

Serves the comprehensive profile contract from an in-memory repository so the
profile wizard can run locally and the client can be tested end to end.
"""

from typing import Optional
from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, status
from profile_sync.models.request_models import (
    CareerProfilePayload,
    EducationPayload,
    ExperiencePayload,
    OpportunitiesInterestPayload,
    PersonalInfoPayload,
    ProjectPayload,
    RecommendationPriorityPayload,
)
from profile_sync.models.response_models import (
    CompletionStatus,
    CreatedResponse,
    ErrorResponse,
    HealthResponse,
    RootResponse,
    SuccessResponse,
)
from profile_sync.services.profile_repository import EntryNotFoundError, InMemoryProfileRepository
from profile_sync.services.seed_loader import ProfileSeedLoader
from profile_sync.utils.logger import get_logger

API_VERSION = "1.0.0"

logger = get_logger(component="profile_api_server")

app = FastAPI(
    title="Profile API",
    description="""Reference implementation of the comprehensive profile API.

## Features

* **Comprehensive read**: every profile section in one call
* **Singleton upserts**: personal info, career profile, AI preferences
* **Entry CRUD**: education, experience and project rows with server ids

All `/api/profile/` endpoints require an `Authorization: Bearer <token>` header.""",
    version=API_VERSION,
    tags_metadata=[
        {
            "name": "health",
            "description": "Health check and status endpoints"
        },
        {
            "name": "profile",
            "description": "Profile sections"
        },
        {
            "name": "entries",
            "description": "Education, experience and project entries"
        }
    ]
)

_repository: Optional[InMemoryProfileRepository] = None


def get_repository() -> InMemoryProfileRepository:
    """
    Get or create the repository singleton, seeded from the sample profile.

    Returns:
        InMemoryProfileRepository: The repository instance
    """
    global _repository
    if _repository is None:
        _repository = InMemoryProfileRepository(ProfileSeedLoader().load_profile())
    return _repository


def require_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    """Reject requests without a bearer token."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme != "Bearer" or not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication credentials were not provided."
        )
    return token.strip()


AUTH_ERROR_RESPONSES = {
    401: {
        "description": "Missing or invalid bearer token",
        "model": ErrorResponse
    }
}

ENTRY_ERROR_RESPONSES = {
    **AUTH_ERROR_RESPONSES,
    404: {
        "description": "Entry not found",
        "model": ErrorResponse
    }
}

profile_router = APIRouter(
    prefix="/api/profile",
    dependencies=[Depends(require_bearer_token)],
    responses=AUTH_ERROR_RESPONSES,
)


@app.get(
    "/",
    response_model=RootResponse,
    status_code=status.HTTP_200_OK,
    summary="Root endpoint",
    tags=["health"]
)
async def root():
    """Returns basic API information including name and version."""
    return RootResponse(message="Profile API", version=API_VERSION)


@app.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    tags=["health"]
)
async def health():
    """Returns the health status of the API service."""
    return HealthResponse(status="ok")


@profile_router.get(
    "/comprehensive/",
    status_code=status.HTTP_200_OK,
    summary="Read the comprehensive profile",
    tags=["profile"]
)
async def get_comprehensive_profile(
    repository: InMemoryProfileRepository = Depends(get_repository)
):
    """
    Read every profile section in one call.

    **Returns:**
    - `{"success": true, "data": {...}}` with personal fields, goals, career
      profile, entry lists, interest flags and priority flags
    """
    profile = repository.get_profile()
    return {"success": True, "data": profile.model_dump()}


@profile_router.get(
    "/completion-status/",
    response_model=CompletionStatus,
    summary="Profile completion summary",
    tags=["profile"]
)
async def get_completion_status(
    repository: InMemoryProfileRepository = Depends(get_repository)
):
    """Percentage of the six sections that hold data, and which ones."""
    return repository.completion_status()


@profile_router.post(
    "/personal/",
    response_model=SuccessResponse,
    summary="Upsert personal info",
    tags=["profile"]
)
async def upsert_personal_info(
    payload: PersonalInfoPayload,
    repository: InMemoryProfileRepository = Depends(get_repository)
):
    repository.upsert_personal_info(payload)
    return SuccessResponse(success=True)


@profile_router.post(
    "/career/",
    response_model=SuccessResponse,
    summary="Upsert career profile",
    tags=["profile"]
)
async def upsert_career_profile(
    payload: CareerProfilePayload,
    repository: InMemoryProfileRepository = Depends(get_repository)
):
    repository.upsert_career_profile(payload)
    return SuccessResponse(success=True)


@profile_router.post(
    "/opportunities-interest/",
    response_model=SuccessResponse,
    summary="Upsert opportunities interest flags",
    tags=["profile"]
)
async def upsert_opportunities_interest(
    payload: OpportunitiesInterestPayload,
    repository: InMemoryProfileRepository = Depends(get_repository)
):
    repository.upsert_opportunities_interest(payload)
    return SuccessResponse(success=True)


@profile_router.post(
    "/recommendation-priority/",
    response_model=SuccessResponse,
    summary="Upsert recommendation priority flags",
    tags=["profile"]
)
async def upsert_recommendation_priority(
    payload: RecommendationPriorityPayload,
    repository: InMemoryProfileRepository = Depends(get_repository)
):
    repository.upsert_recommendation_priority(payload)
    return SuccessResponse(success=True)


def register_entry_routes(router: APIRouter, section: str, payload_model: type) -> None:
    """
    Register create, update and delete routes for one repeating section.

    Args:
        router: Router to attach the routes to
        section: Path segment ('education', 'experience' or 'project')
        payload_model: Request body model for create and update
    """

    async def create_entry(
        payload: payload_model,
        repository: InMemoryProfileRepository = Depends(get_repository)
    ):
        entry_id = repository.create_entry(section, payload)
        logger.info("Entry created", section=section, entry_id=entry_id)
        return CreatedResponse(success=True, id=entry_id)

    async def update_entry(
        entry_id: int,
        payload: payload_model,
        repository: InMemoryProfileRepository = Depends(get_repository)
    ):
        try:
            repository.update_entry(section, entry_id, payload)
        except EntryNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return SuccessResponse(success=True)

    async def delete_entry(
        entry_id: int,
        repository: InMemoryProfileRepository = Depends(get_repository)
    ):
        try:
            repository.delete_entry(section, entry_id)
        except EntryNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return SuccessResponse(success=True)

    router.add_api_route(
        f"/{section}/",
        create_entry,
        methods=["POST"],
        response_model=CreatedResponse,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create a {section} entry",
        tags=["entries"],
    )
    router.add_api_route(
        f"/{section}/{{entry_id}}/",
        update_entry,
        methods=["PUT"],
        response_model=SuccessResponse,
        summary=f"Update a {section} entry",
        tags=["entries"],
        responses=ENTRY_ERROR_RESPONSES,
    )
    router.add_api_route(
        f"/{section}/{{entry_id}}/",
        delete_entry,
        methods=["DELETE"],
        response_model=SuccessResponse,
        summary=f"Delete a {section} entry",
        tags=["entries"],
        responses=ENTRY_ERROR_RESPONSES,
    )


register_entry_routes(profile_router, "education", EducationPayload)
register_entry_routes(profile_router, "experience", ExperiencePayload)
register_entry_routes(profile_router, "project", ProjectPayload)

app.include_router(profile_router)
