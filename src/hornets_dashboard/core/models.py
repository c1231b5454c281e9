"""
Pydantic models for dashboard entities.

These models are used for:
- Validating player and game data from the BallDontLie API
- The averaged statistics flowing from the aggregator into the view builder
- API response serialization of the dashboard payload
"""

from __future__ import annotations

import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


# =============================================================================
# Reference data
# =============================================================================


class Team(BaseModel):
    """NBA team as returned by the /teams endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    abbreviation: Optional[str] = None
    city: Optional[str] = None
    conference: Optional[str] = None
    division: Optional[str] = None
    full_name: str = ""
    name: str = ""


class PlayerIdentity(BaseModel):
    """Read-only reference data for a rostered player."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    first_name: str = ""
    last_name: str = ""
    position: str = ""
    team: Optional[Team] = None

    @field_validator("first_name", "last_name", "position", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @computed_field
    @property
    def display_name(self) -> str:
        """First and last name joined by a single space."""
        return f"{self.first_name} {self.last_name}"


# =============================================================================
# Per-game input
# =============================================================================

_GAME_NUMERIC_FIELDS = (
    "pts", "reb", "ast", "stl", "blk",
    "fgm", "fga", "fg3m", "fg3a", "ftm", "fta",
)


def to_number(value: Any) -> Optional[float]:
    """Parse an upstream numeric value; None for anything unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class RawGameRecord(BaseModel):
    """
    One player's box-score line from a single game.

    Numeric fields are optional; anything missing or unparseable is stored
    as None and counted as 0 by the aggregator.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    min: Optional[str] = None
    pts: Optional[float] = None
    reb: Optional[float] = None
    ast: Optional[float] = None
    stl: Optional[float] = None
    blk: Optional[float] = None
    fgm: Optional[float] = None
    fga: Optional[float] = None
    fg3m: Optional[float] = None
    fg3a: Optional[float] = None
    ftm: Optional[float] = None
    fta: Optional[float] = None

    @field_validator(*_GAME_NUMERIC_FIELDS, mode="before")
    @classmethod
    def _coerce_numeric(cls, value: Any) -> Optional[float]:
        return to_number(value)

    @field_validator("min", mode="before")
    @classmethod
    def _coerce_minutes(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    def value(self, field: str) -> float:
        """Return a numeric field with missing values resolved to 0."""
        return getattr(self, field) or 0.0


# =============================================================================
# Averaged output
# =============================================================================


class AveragedStats(BaseModel):
    """Per-game season averages and shooting percentages for one player."""

    model_config = ConfigDict(frozen=True)

    pts: float = 0.0
    reb: float = 0.0
    ast: float = 0.0
    stl: float = 0.0
    blk: float = 0.0
    fg_pct: float = Field(default=0.0, ge=0.0, le=1.0)
    fg3_pct: float = Field(default=0.0, ge=0.0, le=1.0)
    ft_pct: float = Field(default=0.0, ge=0.0, le=1.0)
    games_played: int = 0

    @classmethod
    def zero(cls) -> "AveragedStats":
        return cls()


class PlayerWithStats(BaseModel):
    """A roster entry joined with its averages (None when none are known)."""

    model_config = ConfigDict(frozen=True)

    player: PlayerIdentity
    stats: Optional[AveragedStats] = None

    @property
    def id(self) -> int:
        return self.player.id


# =============================================================================
# Dashboard views
# =============================================================================


class LeaderboardEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    position: str
    value: float


class ShootingEfficiencyEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    fg_pct: float
    fg3_pct: float


class PointsDistributionEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    points: float


class PlayerView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    position: str
    stats: AveragedStats


class DashboardPayload(BaseModel):
    """
    Everything the dashboard renders, serialized with camelCase keys:

        {"leaderboards": {...}, "shootingEfficiency": [...],
         "pointsDistribution": [...], "players": [...]}
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    leaderboards: dict[str, list[LeaderboardEntry]] = Field(default_factory=dict)
    shooting_efficiency: list[ShootingEfficiencyEntry] = Field(
        default_factory=list, alias="shootingEfficiency"
    )
    points_distribution: list[PointsDistributionEntry] = Field(
        default_factory=list, alias="pointsDistribution"
    )
    players: list[PlayerView] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "DashboardPayload":
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    def find_player(self, player_id: int | None) -> PlayerView | None:
        for player in self.players:
            if player.id == player_id:
                return player
        return None
