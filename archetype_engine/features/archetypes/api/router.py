"""HTTP endpoints for triggering archetype assignment and reading the catalog."""

from dataclasses import asdict

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from archetype_engine.features.archetypes.domain import get_archetype_info, list_archetypes
from archetype_engine.features.archetypes.errors import (
    ArchetypeAssignmentError,
    ClassificationInvariantViolation,
    DataAccessError,
    ProfileNotFoundError,
)
from archetype_engine.features.archetypes.jobs import archetype_assignment_job
from archetype_engine.features.archetypes.services import archetype_assignment_service
from archetype_engine.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/archetypes", tags=["archetypes"])


class ArchetypeResponse(BaseModel):
    key: str
    title: str
    emoji: str
    description: str


@router.get("", response_model=list[ArchetypeResponse])
async def get_archetypes() -> list[ArchetypeResponse]:
    return [ArchetypeResponse(**asdict(a)) for a in list_archetypes()]


@router.post("/assign")
async def assign_all_archetypes():
    """Run a full batch pass and return the run summary."""
    try:
        summary = await archetype_assignment_job.run_once()
    except DataAccessError as e:
        logger.error("Archetype assignment batch failed", error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(e)}
        )

    if summary.skipped:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=summary.to_dict())
    return summary.to_dict()


@router.post("/assign/{user_id}")
async def assign_user_archetype(user_id: str) -> dict:
    """Recompute one user's archetype on demand."""
    try:
        result = await archetype_assignment_service.assign_archetype_detailed(user_id)
    except DataAccessError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ArchetypeAssignmentError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ClassificationInvariantViolation as e:
        logger.error("Archetype rule table matched nothing", user_id=user_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Classification failed"
        ) from e

    return result.to_dict()


@router.get("/{key}", response_model=ArchetypeResponse)
async def get_archetype(key: str) -> ArchetypeResponse:
    archetype = get_archetype_info(key)
    if archetype is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown archetype '{key}'")
    return ArchetypeResponse(**asdict(archetype))
