"""
==============================================================================
Energy Drink Finder - Application Entry Point
==============================================================================

FastAPI application with:
- RESTful API endpoints (catalog, stores, search, scan, geocoding)
- WebSocket real-time barcode scanning
- Static web UI (search map, camera scanner, catalog admin)

Usage:
------
    # Development
    uvicorn drinkfinder.main:app --reload

    # Production
    uvicorn drinkfinder.main:app --host 0.0.0.0 --port 8000

==============================================================================
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from drinkfinder.api import api_router
from drinkfinder.config import get_settings
from drinkfinder.core.exceptions import register_exception_handlers
from drinkfinder.db import DatabaseManager, init_db
from drinkfinder.websockets import scanner_router


STATIC_DIR = Path(__file__).resolve().parent / "static"


# ============================================================================
# LOGGING SETUP
# ============================================================================

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

logger = logging.getLogger(__name__)


# ============================================================================
# APPLICATION FACTORY
# ============================================================================

class Application:
    """
    FastAPI application factory and manager.

    Handles application lifecycle including:
    - Startup and shutdown events
    - Middleware configuration
    - Router registration
    - Exception handler setup
    """

    def __init__(self):
        """Initialize the application."""
        self._settings = get_settings()
        self._app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create and configure the FastAPI application."""
        app = FastAPI(
            title=self._settings.app_name,
            version="1.0.0",
            description="Find nearby stores stocking a given energy drink",
            lifespan=self._lifespan,
            docs_url="/docs",
            redoc_url="/redoc",
        )

        # Configure middleware
        self._configure_middleware(app)

        # Register exception handlers
        register_exception_handlers(app)

        # Register routers
        self._register_routers(app)

        # Mount static files directory
        app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

        # Register root endpoint
        self._register_root(app)

        return app

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Application lifespan manager."""
        # Startup
        self._startup()
        yield
        # Shutdown
        self._shutdown()

    def _startup(self) -> None:
        """Application startup tasks."""
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {self._settings.app_name} ({self._settings.app_env})")
        logger.info("=" * 60)

        # Initialize database
        init_db()

        if not self._settings.geocoding_api_key:
            logger.warning("⚠️ GEOCODING_API_KEY not set; /api/v1/geocode will fail")

        logger.info("=" * 60)
        logger.info(f"✅ {self._settings.app_name} ready")
        logger.info(f"📍 Running on http://{self._settings.host}:{self._settings.port}")
        logger.info(f"🌐 Frontend: http://{self._settings.host}:{self._settings.port}/static/pages/index.html")
        logger.info(f"📖 API Docs: http://{self._settings.host}:{self._settings.port}/docs")
        logger.info("=" * 60)

    def _shutdown(self) -> None:
        """Application shutdown tasks."""
        logger.info("🛑 Shutting down...")
        DatabaseManager().dispose()
        logger.info("✅ Shutdown complete")

    def _configure_middleware(self, app: FastAPI) -> None:
        """Configure application middleware."""
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self._settings.cors_origins_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _register_routers(self, app: FastAPI) -> None:
        """Register API routers."""
        # REST API routes
        app.include_router(api_router)

        # WebSocket routes
        app.include_router(scanner_router)

    def _register_root(self, app: FastAPI) -> None:
        """Register root endpoint."""

        @app.get("/", include_in_schema=False)
        async def root():
            """Redirect to the search page."""
            return RedirectResponse(url="/static/pages/index.html")

    @property
    def app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self._app


# ============================================================================
# APPLICATION INSTANCE
# ============================================================================

# Create application instance
application = Application()
app = application.app


# ============================================================================
# ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "drinkfinder.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
