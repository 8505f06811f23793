"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

import logging

from fastapi import APIRouter, Depends

from perfumeria.catalog.store import CatalogStore
from perfumeria.core.dependencies import get_catalog_store
from perfumeria.schemas.common import HealthResponse


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, store: CatalogStore):
        self._store = store

    def check_store(self) -> str:
        """Check catalog store connectivity."""
        try:
            return "healthy" if self._store.ping() else "unhealthy"
        except Exception as e:
            logger.error(f"❌ Store health check failed: {e}")
            return "unhealthy"

    def get_health(self) -> HealthResponse:
        store_status = self.check_store()
        overall = "healthy" if store_status == "healthy" else "degraded"

        return HealthResponse(
            status=overall,
            components={
                "api": "healthy",
                "database": store_status,
            }
        )


@router.get("", response_model=HealthResponse)
async def health_check(store: CatalogStore = Depends(get_catalog_store)):
    """
    Health check endpoint.

    Returns API and database status.
    """
    controller = HealthController(store)
    return controller.get_health()


@router.get("/ready")
async def readiness_check():
    """Readiness probe for container orchestration."""
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    """Liveness probe for container orchestration."""
    return {"alive": True}
