"""
Stats router - JSON dashboard data.

Endpoints:
- GET /stats   - Dashboard payload (leaderboards, shooting, points, players)
- GET /players - The team's roster

Both recompute from the upstream API on every request.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Query

from ...core.http import ExternalAPIError
from ..auth import ApiUser
from ..dependencies import DashboardServiceDependency
from ..errors import ExternalServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats")
async def get_dashboard_stats(
    service: DashboardServiceDependency,
    user: ApiUser,
    season: Annotated[int | None, Query(ge=1946, description="Season year (defaults to configured)")] = None,
) -> dict[str, Any]:
    """Season averages for the team, ranked and shaped for the dashboard."""
    try:
        payload = await service.build_dashboard(season)
    except ExternalAPIError as e:
        logger.error(f"Error in player-stats API: {e.message}")
        raise ExternalServiceError("BallDontLie", "Failed to fetch and transform player stats") from e
    return payload.to_dict()


@router.get("/players")
async def get_roster(
    service: DashboardServiceDependency,
    user: ApiUser,
) -> dict[str, Any]:
    try:
        players = await service.get_roster()
    except ExternalAPIError as e:
        logger.error(f"Error fetching roster: {e.message}")
        raise ExternalServiceError("BallDontLie", "Failed to fetch players") from e
    return {"data": [player.model_dump() for player in players]}
