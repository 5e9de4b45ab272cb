"""API v1 router assembly."""

from fastapi import APIRouter

from storageaccessor.api.v1.endpoints import admission, health
from storageaccessor.core.config import Settings


def build_api_router(settings: Settings) -> APIRouter:
    """Assemble probe and webhook routes for the given settings."""
    api_router = APIRouter()

    # Health checks (no prefix)
    api_router.include_router(health.build_router(settings), tags=["health"])

    # Validating webhook
    api_router.include_router(
        admission.router, prefix=settings.webhook_path, tags=["admission"]
    )

    return api_router
