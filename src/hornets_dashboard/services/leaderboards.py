"""
Leaderboard and view builder.

Turns averaged player stats into the four views the dashboard renders:
per-category leaderboards, shooting efficiency, points distribution and
the full player list. Pure functions of their input; sorting relies on
Python's stable sort, so ties keep roster order.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ..core.models import (
    AveragedStats,
    DashboardPayload,
    LeaderboardEntry,
    PlayerView,
    PlayerWithStats,
    PointsDistributionEntry,
    ShootingEfficiencyEntry,
)
from ..core.types import STAT_CATEGORIES, StatCategory

DEFAULT_LEADERBOARD_SIZE = 5


def _stats_or_zero(player: PlayerWithStats) -> AveragedStats:
    return player.stats if player.stats is not None else AveragedStats.zero()


class DashboardBuilder:
    """Builds ranked views from a roster's averaged stats."""

    def __init__(
        self,
        leaderboard_size: int = DEFAULT_LEADERBOARD_SIZE,
        categories: Iterable[StatCategory | str] = STAT_CATEGORIES,
    ):
        if leaderboard_size < 1:
            raise ValueError("leaderboard_size must be at least 1")
        self.leaderboard_size = leaderboard_size
        self.categories: tuple[StatCategory, ...] = tuple(StatCategory(c) for c in categories)

    def top_players(
        self,
        players: Sequence[PlayerWithStats],
        category: StatCategory | str,
    ) -> list[LeaderboardEntry]:
        """Top N players by one category, highest first.

        Players without a stats record are not ranked.
        """
        category = StatCategory(category)
        ranked = sorted(
            (p for p in players if p.stats is not None),
            key=lambda p: getattr(p.stats, category.value),
            reverse=True,
        )
        return [
            LeaderboardEntry(
                id=p.player.id,
                name=p.player.display_name,
                position=p.player.position,
                value=getattr(p.stats, category.value),
            )
            for p in ranked[: self.leaderboard_size]
        ]

    def leaderboards(self, players: Sequence[PlayerWithStats]) -> dict[str, list[LeaderboardEntry]]:
        return {category.value: self.top_players(players, category) for category in self.categories}

    def shooting_efficiency(self, players: Sequence[PlayerWithStats]) -> list[ShootingEfficiencyEntry]:
        entries = [
            ShootingEfficiencyEntry(
                id=p.player.id,
                name=p.player.display_name,
                fg_pct=_stats_or_zero(p).fg_pct,
                fg3_pct=_stats_or_zero(p).fg3_pct,
            )
            for p in players
        ]
        return sorted(entries, key=lambda e: e.fg_pct, reverse=True)

    def points_distribution(self, players: Sequence[PlayerWithStats]) -> list[PointsDistributionEntry]:
        entries = [
            PointsDistributionEntry(
                id=p.player.id,
                name=p.player.display_name,
                points=_stats_or_zero(p).pts,
            )
            for p in players
        ]
        return sorted(entries, key=lambda e: e.points, reverse=True)

    def player_views(self, players: Sequence[PlayerWithStats]) -> list[PlayerView]:
        return [
            PlayerView(
                id=p.player.id,
                name=p.player.display_name,
                position=p.player.position,
                stats=_stats_or_zero(p),
            )
            for p in players
        ]

    def build(self, players: Sequence[PlayerWithStats]) -> DashboardPayload:
        """Build the full dashboard payload.

        An empty roster, or one where nobody played a game, yields the
        empty payload rather than a page of zeros.
        """
        if not any(p.stats is not None and p.stats.games_played > 0 for p in players):
            return DashboardPayload.empty()

        return DashboardPayload(
            leaderboards=self.leaderboards(players),
            shooting_efficiency=self.shooting_efficiency(players),
            points_distribution=self.points_distribution(players),
            players=self.player_views(players),
        )
