"""
Dashboard service: roster lookup, stats fetch and view building.

Recomputes everything on each call; nothing is cached or stored.
Roster-level failures propagate to the caller; per-player stat failures
degrade to zero stats for that player.
"""

from __future__ import annotations

import logging

from ..core.config import Settings
from ..core.models import DashboardPayload, PlayerIdentity, PlayerWithStats
from ..providers.balldontlie_nba import BallDontLieNBA
from .leaderboards import DashboardBuilder
from .sources import GameLogStatsSource, SeasonAveragesStatsSource, StatsSource

logger = logging.getLogger(__name__)


def build_stats_source(client: BallDontLieNBA, settings: Settings) -> StatsSource:
    """Create the stats source selected by ``settings.stats_source``."""
    if settings.stats_source == "season_averages":
        return SeasonAveragesStatsSource(
            client,
            batch_size=settings.batch_size,
            batch_delay_seconds=settings.batch_delay_seconds,
        )
    return GameLogStatsSource(
        client,
        batch_size=settings.batch_size,
        batch_delay_seconds=settings.batch_delay_seconds,
        per_page=settings.stats_per_page,
    )


class DashboardService:
    """Fetches one team's roster and season stats and builds the dashboard."""

    def __init__(
        self,
        client: BallDontLieNBA,
        source: StatsSource,
        builder: DashboardBuilder,
        *,
        team_name: str = "Hornets",
        season: int = 2024,
        active_players_only: bool = False,
    ):
        self.client = client
        self.source = source
        self.builder = builder
        self.team_name = team_name
        self.season = season
        self.active_players_only = active_players_only

    @classmethod
    def from_settings(cls, client: BallDontLieNBA, settings: Settings) -> "DashboardService":
        return cls(
            client,
            build_stats_source(client, settings),
            DashboardBuilder(leaderboard_size=settings.leaderboard_size),
            team_name=settings.team_name,
            season=settings.season,
            active_players_only=settings.active_players_only,
        )

    async def get_roster(self) -> list[PlayerIdentity]:
        """Get the configured team's players.

        Raises:
            ExternalAPIError: If the team or its roster cannot be fetched
        """
        team = await self.client.find_team(self.team_name)
        players = await self.client.get_team_players(
            team.id, active_only=self.active_players_only
        )
        logger.info(f"Found {len(players)} {team.name} players")
        return players

    async def get_players_with_stats(
        self,
        season: int | None = None,
    ) -> list[PlayerWithStats]:
        season = season or self.season
        players = await self.get_roster()
        if not players:
            return []

        averages = await self.source.fetch_averages(players, season)
        joined = [PlayerWithStats(player=p, stats=averages.get(p.id)) for p in players]

        without_stats = [
            f"{p.player.display_name} (ID: {p.player.id})"
            for p in joined
            if p.stats is None or p.stats.games_played == 0
        ]
        if without_stats:
            logger.warning(f"Players without stats: {', '.join(without_stats)}")
        return joined

    async def build_dashboard(self, season: int | None = None) -> DashboardPayload:
        """Build the full dashboard payload for a season (default: configured)."""
        season = season or self.season
        logger.info(f"Building {self.team_name} dashboard for {season} ({self.source.name})")

        players = await self.get_players_with_stats(season)
        if not players:
            logger.warning(f"No {self.team_name} players found, returning empty dashboard")
            return DashboardPayload.empty()

        payload = self.builder.build(players)
        logger.info(f"Dashboard built for {len(payload.players)} players")
        return payload
