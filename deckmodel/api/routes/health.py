"""Health check routes."""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from deckmodel.api.dependencies import AppSettings, Store

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: str
    version: str
    documents: int


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: AppSettings, store: Store):
    """Basic health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.app_version,
        documents=len(store),
    )
