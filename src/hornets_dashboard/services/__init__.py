"""
Service layer for the dashboard.

Services orchestrate data fetching (providers), aggregation and view
building; the API routers only call into DashboardService.
"""

from .batching import fetch_in_batches
from .dashboard import DashboardService, build_stats_source
from .leaderboards import DashboardBuilder
from .sources import GameLogStatsSource, SeasonAveragesStatsSource, StatsSource

__all__ = [
    "DashboardBuilder",
    "DashboardService",
    "GameLogStatsSource",
    "SeasonAveragesStatsSource",
    "StatsSource",
    "build_stats_source",
    "fetch_in_batches",
]
