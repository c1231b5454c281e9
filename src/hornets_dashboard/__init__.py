"""
Hornets Stats Dashboard

Fetches a team's roster and per-game box scores from the BallDontLie API,
averages them into season stats, ranks players into leaderboards and
serves the result as a login-protected web dashboard.

Usage:
    from hornets_dashboard import NBAStatsAggregator, DashboardBuilder

    stats = NBAStatsAggregator.average_game_stats(games)
    payload = DashboardBuilder(leaderboard_size=5).build(players_with_stats)
"""

from .aggregators import NBAStatsAggregator, average_game_stats, average_roster
from .core.models import (
    AveragedStats,
    DashboardPayload,
    LeaderboardEntry,
    PlayerIdentity,
    PlayerWithStats,
    RawGameRecord,
)
from .core.types import STAT_CATEGORIES, StatCategory
from .services.leaderboards import DashboardBuilder

__version__ = "1.0.0"

__all__ = [
    "NBAStatsAggregator",
    "average_game_stats",
    "average_roster",
    "AveragedStats",
    "DashboardPayload",
    "LeaderboardEntry",
    "PlayerIdentity",
    "PlayerWithStats",
    "RawGameRecord",
    "STAT_CATEGORIES",
    "StatCategory",
    "DashboardBuilder",
]
