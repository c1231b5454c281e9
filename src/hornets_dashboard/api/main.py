"""
FastAPI application for the Hornets dashboard.

Serves:
- Server-rendered dashboard pages behind an Auth0 login
- A JSON endpoint with the same dashboard data
- Health checks

Nothing is cached: every dashboard request refetches from BallDontLie.
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlencode

import msgspec
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from ..core.config import get_settings
from .auth import LoginRequired
from .dependencies import close_clients
from .errors import APIError, api_error_handler
from .routers import auth, pages, stats

logger = logging.getLogger(__name__)


class MSGSpecResponse(Response):
    """JSON response serialized with msgspec."""

    media_type = "application/json"

    def render(self, content: Any) -> bytes:
        if content is None:
            return b""
        return msgspec.json.encode(content)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle.

    Shutdown closes the shared upstream HTTP clients.
    """
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} ({settings.environment})...")
    if not settings.balldontlie_api_key:
        logger.warning("BALLDONTLIE_API_KEY is not set; upstream requests will be rejected")
    if not settings.auth_enabled:
        logger.warning("Authentication is disabled (AUTH_ENABLED=false)")

    yield

    logger.info(f"Shutting down {settings.app_name}...")
    await close_clients()


async def login_required_handler(request: Request, exc: LoginRequired) -> RedirectResponse:
    """Send anonymous visitors of protected pages to the login flow."""
    query = urlencode({"returnTo": exc.return_to})
    return RedirectResponse(f"/auth/login?{query}", status_code=302)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Season averages and leaderboards for one NBA roster",
        version=settings.app_version,
        default_response_class=MSGSpecResponse,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        allow_credentials=settings.cors_allow_credentials,
        expose_headers=settings.cors_expose_headers,
    )

    # Dashboard pages and payloads are large and compress well
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Signed session cookie holding the signed-in user
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.environment == "production",
    )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Process-Time"] = f"{elapsed_ms:.2f}ms"
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-store"
        return response

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(LoginRequired, login_required_handler)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        show_detail = settings.debug and settings.environment != "production"
        error = APIError(500, "INTERNAL_ERROR", "An internal error occurred", str(exc) if show_detail else None)
        return JSONResponse(status_code=500, content=error.to_content())

    @app.get("/health", tags=["health"])
    async def health_check():
        return {
            "status": "healthy",
            "team": settings.team_name,
            "season": settings.season,
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        }

    # HTML pages
    app.include_router(pages.router, tags=["pages"])
    # Auth0 login / callback / logout
    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    # JSON dashboard data
    app.include_router(stats.router, prefix="/api/nba", tags=["stats"])

    return app


app = create_app()
