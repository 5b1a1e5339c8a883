"""
==============================================================================
Main API Router
==============================================================================

Combines the health and products routers under the configured base path.

==============================================================================
"""

from fastapi import APIRouter

from product_api.api import health, products


class MainAPIRouter:
    """
    Main API router combining all resource routers.

    Provides a single entry point for all API endpoints.
    """

    def __init__(self, prefix: str = "/api"):
        """Initialize the main router with all sub-routers."""
        self._router = APIRouter(prefix=prefix)
        self._include_routers()

    def _include_routers(self) -> None:
        """Include all resource routers."""
        self._router.include_router(health.router)
        self._router.include_router(products.router)

    @property
    def router(self) -> APIRouter:
        """Get the FastAPI router instance."""
        return self._router
