"""
Pages router - server-rendered HTML.

Endpoints:
- GET /          - Landing page with the login button
- GET /dashboard - Leaderboards, charts and the per-player radar chart
"""

import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from ... import charts
from ...core.http import ExternalAPIError
from ...core.types import STAT_CATEGORIES, format_stat_value
from ..auth import CurrentUser, PageUser
from ..dependencies import DashboardServiceDependency

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def _stat_filter(value: float, category) -> str:
    return format_stat_value(category, value)


templates.env.filters["stat"] = _stat_filter

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def index(request: Request, user: CurrentUser) -> Response:
    if user is not None:
        return RedirectResponse("/dashboard", status_code=302)
    return templates.TemplateResponse(request, "index.html", {"user": None})


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    user: PageUser,
    service: DashboardServiceDependency,
    player: Annotated[int | None, Query(description="Player shown in the radar chart")] = None,
) -> Response:
    try:
        payload = await service.build_dashboard()
    except ExternalAPIError as e:
        logger.error(f"Error building dashboard: {e.message}")
        return templates.TemplateResponse(
            request,
            "error.html",
            {"user": user, "message": "Failed to load player statistics. Please try again later."},
            status_code=502,
        )

    selected = payload.find_player(player) or (payload.players[0] if payload.players else None)
    context = {
        "user": user,
        "season": service.season,
        "team_name": service.team_name,
        "payload": payload,
        "categories": STAT_CATEGORIES,
        "selected": selected,
        "shooting_chart": charts.to_html_fragment(
            charts.shooting_efficiency_chart(payload.shooting_efficiency)
        ) if payload.shooting_efficiency else None,
        "points_chart": charts.to_html_fragment(
            charts.points_distribution_chart(payload.points_distribution)
        ) if payload.points_distribution else None,
        "radar_chart": charts.to_html_fragment(charts.performance_radar(selected)) if selected else None,
    }
    return templates.TemplateResponse(request, "dashboard.html", context)
