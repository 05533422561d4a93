"""API routes for deckmodel."""

from fastapi import APIRouter

from deckmodel.api.routes.health import router as health_router
from deckmodel.api.routes.pptx import router as pptx_router

# Main API router, mounted under the configured prefix
api_router = APIRouter()
api_router.include_router(pptx_router, tags=["PPTX"])

__all__ = ["api_router", "health_router"]
