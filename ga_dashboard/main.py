"""
GA Dashboard
Main FastAPI application
"""
from contextlib import asynccontextmanager
from typing import Optional
import os

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from ga_dashboard import __version__
from ga_dashboard.api import auth, health, stats
from ga_dashboard.config import Settings, get_settings
from ga_dashboard.connectors.base import QueryClient
from ga_dashboard.connectors.ga4_connector import build_query_client
from ga_dashboard.middleware.security_middleware import LOGIN_PAGE, SecurityMiddleware
from ga_dashboard.models.property import PropertyRegistry, load_registry
from ga_dashboard.services.property_stats_service import PropertyStatsService
from ga_dashboard.utils.logger import log
from ga_dashboard.utils.response_cache import ResponseCache

static_dir = os.path.join(os.path.dirname(__file__), "static")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    settings = app.state.settings
    log.info(f"Starting {settings.app_name} v{__version__}")
    log.info(f"Environment: {settings.environment}")
    if app.state.query_client is None:
        log.warning(f"GA4 client unavailable: {app.state.credentials_error}")
    if settings.dashboard_password:
        log.info("Dashboard password gate enabled")

    yield

    log.info("Shutting down application")


def create_app(
    settings: Optional[Settings] = None,
    query_client: Optional[QueryClient] = None,
    registry: Optional[PropertyRegistry] = None,
) -> FastAPI:
    """
    Build the app with explicit collaborators.

    Anything not passed in comes from the environment: settings via
    get_settings(), the GA4 client from the configured credentials and the
    property registry from settings.properties_file (or the built-in one).
    """
    settings = settings or get_settings()
    credentials_error = None
    if query_client is None:
        query_client, credentials_error = build_query_client(settings)

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Google Analytics 4 usage summaries for every tracked website and app",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.registry = registry or load_registry(settings.properties_file)
    app.state.query_client = query_client
    app.state.credentials_error = credentials_error
    app.state.stats_service = (
        PropertyStatsService(query_client, timezone=settings.timezone) if query_client else None
    )
    app.state.response_cache = ResponseCache()

    # Shared-password gate, X-Robots-Tag
    app.add_middleware(SecurityMiddleware)

    app.include_router(health.router, tags=["health"])
    app.include_router(auth.router)
    app.include_router(stats.router)

    @app.get("/login", include_in_schema=False)
    async def login_page():
        return RedirectResponse(url=LOGIN_PAGE, status_code=302)

    # Dashboard and login pages; mounted last so API routes win
    if os.path.exists(static_dir):
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "ga_dashboard.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        workers=settings.api_workers if not settings.debug else 1
    )
