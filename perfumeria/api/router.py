"""
==============================================================================
Main API Router
==============================================================================

Combines all v1 API routes under the configured API_PREFIX (empty by
default, so routes are served from the root).

==============================================================================
"""

from fastapi import APIRouter

from perfumeria.api.v1 import health, auth, products
from perfumeria.config import get_settings


class MainAPIRouter:
    """
    Main API router combining all versioned routes.

    Provides a single entry point for all API endpoints.
    """

    def __init__(self, prefix: str = ""):
        self._router = APIRouter(prefix=prefix)
        self._include_routers()

    def _include_routers(self) -> None:
        """Include all v1 routers."""
        self._router.include_router(health.router)
        self._router.include_router(auth.router)
        self._router.include_router(products.router)

    @property
    def router(self):
        """Get the FastAPI router instance."""
        return self._router


# Create main API router instance
api_router = MainAPIRouter(get_settings().api_prefix).router
