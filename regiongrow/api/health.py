"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from regiongrow import __version__
from regiongrow.engine.traversal import available_traversals
from regiongrow.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        traversals=available_traversals(),
    )
