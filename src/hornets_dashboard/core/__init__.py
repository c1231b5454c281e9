"""Core configuration, HTTP client, models and types."""

from .config import Settings, get_settings
from .http import BaseApiClient, ExternalAPIError, RateLimitError
from .models import (
    AveragedStats,
    DashboardPayload,
    LeaderboardEntry,
    PlayerIdentity,
    PlayerView,
    PlayerWithStats,
    PointsDistributionEntry,
    RawGameRecord,
    ShootingEfficiencyEntry,
    Team,
)
from .types import STAT_CATEGORIES, StatCategory, format_stat_value

__all__ = [
    "Settings",
    "get_settings",
    "BaseApiClient",
    "ExternalAPIError",
    "RateLimitError",
    "AveragedStats",
    "DashboardPayload",
    "LeaderboardEntry",
    "PlayerIdentity",
    "PlayerView",
    "PlayerWithStats",
    "PointsDistributionEntry",
    "RawGameRecord",
    "ShootingEfficiencyEntry",
    "Team",
    "STAT_CATEGORIES",
    "StatCategory",
    "format_stat_value",
]
