"""
Dependency injection for API endpoints.

Long-lived upstream clients are created once per process and closed at
shutdown; the DashboardService itself is cheap and built per request so
that every request recomputes the dashboard from fresh upstream data.
"""

from typing import Annotated

from fastapi import Depends

from ..core.config import Settings, get_settings
from ..providers.balldontlie_nba import BallDontLieNBA
from ..services.dashboard import DashboardService
from .auth import Auth0Client


# =============================================================================
# BallDontLie client
# =============================================================================

_nba_client: BallDontLieNBA | None = None


def get_nba_client() -> BallDontLieNBA:
    """Dependency that provides the shared BallDontLie client."""
    global _nba_client
    if _nba_client is None:
        settings = get_settings()
        _nba_client = BallDontLieNBA(
            settings.balldontlie_api_key,
            base_url=settings.balldontlie_base_url,
            requests_per_minute=settings.balldontlie_requests_per_minute,
            timeout=settings.balldontlie_timeout,
        )
    return _nba_client


def get_dashboard_service(
    client: Annotated[BallDontLieNBA, Depends(get_nba_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> DashboardService:
    return DashboardService.from_settings(client, settings)


DashboardServiceDependency = Annotated[DashboardService, Depends(get_dashboard_service)]


# =============================================================================
# Auth0 client
# =============================================================================

_auth_client: Auth0Client | None = None


def get_auth_client() -> Auth0Client | None:
    """Dependency that provides the shared Auth0 client (None with auth disabled)."""
    global _auth_client
    settings = get_settings()
    if not settings.auth_enabled:
        return None
    if _auth_client is None:
        _auth_client = Auth0Client.from_settings(settings)
    return _auth_client


AuthClientDependency = Annotated[Auth0Client | None, Depends(get_auth_client)]


async def close_clients() -> None:
    """Close upstream HTTP clients. Called at app shutdown."""
    global _nba_client, _auth_client
    if _nba_client is not None:
        await _nba_client.close()
        _nba_client = None
    if _auth_client is not None:
        await _auth_client.close()
        _auth_client = None
