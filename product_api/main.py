"""
==============================================================================
Products API - Application Entry Point
==============================================================================

FastAPI application with:
- In-memory product catalog (CRUD, search, stats)
- Static API-key gate on the products routes
- Request logging and a single structured error formatter

Usage:
------
    # Development
    uvicorn product_api.main:create_app --factory --reload

    # Production
    APP_ENV=production API_KEY=... PORT=8080 product-api

==============================================================================
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from product_api.api.router import MainAPIRouter
from product_api.catalog import DEFAULT_PRODUCTS, ProductCatalog
from product_api.config import Settings, get_settings
from product_api.core.exceptions import register_exception_handlers
from product_api.core.middleware import RequestLoggingMiddleware


logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Root logging setup for the process."""
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )


# ============================================================================
# APPLICATION FACTORY
# ============================================================================

class Application:
    """
    FastAPI application factory and manager.

    Handles application lifecycle including:
    - Catalog ownership (created here, injected into handlers)
    - Middleware configuration
    - Router registration
    - Exception handler setup

    Example:
        >>> application = Application(Settings(api_key="s3cret"), ProductCatalog())
        >>> app = application.app
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        catalog: Optional[ProductCatalog] = None
    ):
        """
        Initialize the application.

        Args:
            settings: Settings to use (global settings if None)
            catalog: Catalog to serve (a new one, optionally seeded, if None)
        """
        self._settings = settings or get_settings()
        configure_logging(self._settings)
        self._catalog = catalog if catalog is not None else self._build_catalog()
        self._app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create and configure the FastAPI application."""
        app = FastAPI(
            title=self._settings.app_name,
            version="1.0.0",
            description="In-memory products catalog API",
            lifespan=self._lifespan,
            docs_url="/docs",
            redoc_url="/redoc",
        )

        app.state.settings = self._settings
        app.state.catalog = self._catalog

        self._configure_middleware(app)
        register_exception_handlers(app)
        self._register_routers(app)
        self._register_root(app)

        return app

    def _build_catalog(self) -> ProductCatalog:
        """Create the catalog, seeding sample data when enabled."""
        seed = DEFAULT_PRODUCTS if self._settings.seed_products else None
        return ProductCatalog(seed)

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Application lifespan manager."""
        self._startup()
        yield
        self._shutdown()

    def _startup(self) -> None:
        """Application startup tasks."""
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {self._settings.app_name} ({self._settings.app_env})")
        logger.info(f"📦 Catalog holds {len(self._catalog)} products")
        if self._settings.uses_default_api_key:
            logger.warning("⚠️ Default API key in use; set API_KEY outside development")
        logger.info(f"📍 Listening on http://{self._settings.host}:{self._settings.port}")
        logger.info("=" * 60)

    def _shutdown(self) -> None:
        """Application shutdown tasks."""
        logger.info("🛑 Shutting down...")
        logger.info("✅ Shutdown complete")

    def _configure_middleware(self, app: FastAPI) -> None:
        """Configure application middleware."""
        app.add_middleware(RequestLoggingMiddleware)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self._settings.cors_origins_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _register_routers(self, app: FastAPI) -> None:
        """Register API routers."""
        app.include_router(MainAPIRouter(self._settings.api_prefix).router)

    def _register_root(self, app: FastAPI) -> None:
        """Register root endpoint."""
        prefix = self._settings.api_prefix

        @app.get("/")
        async def root():
            """Welcome message and endpoint map (no API key required)."""
            return {
                "message": "Hello World!",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "endpoints": {
                    "products": f"{prefix}/products",
                    "search": f"{prefix}/products/search?q=name",
                    "stats": f"{prefix}/products/stats",
                    "health": f"{prefix}/health",
                },
            }

    @property
    def app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self._app

    @property
    def catalog(self) -> ProductCatalog:
        """Get the catalog served by this application."""
        return self._catalog


def create_app(
    settings: Optional[Settings] = None,
    catalog: Optional[ProductCatalog] = None
) -> FastAPI:
    """Build a configured FastAPI app (used by uvicorn's --factory and tests)."""
    return Application(settings, catalog).app


def run() -> None:
    """Run the server with uvicorn using the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "product_api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )


if __name__ == "__main__":
    run()
