"""
Stats sources.

Two interchangeable ways of obtaining one AveragedStats per player:

- GameLogStatsSource: fetches every per-game box score from /stats in
  throttled batches and averages them with NBAStatsAggregator.
- SeasonAveragesStatsSource: asks /season_averages for records the API
  has already averaged.

Both return a mapping for every requested player; players the upstream
has nothing for get zero stats.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from ..aggregators.nba import NBAStatsAggregator
from ..core.models import AveragedStats, PlayerIdentity, RawGameRecord, to_number
from ..providers.balldontlie_nba import BallDontLieNBA
from .batching import DEFAULT_BATCH_DELAY_SECONDS, DEFAULT_BATCH_SIZE, fetch_in_batches

logger = logging.getLogger(__name__)


class StatsSource(ABC):
    """Produces season averages for a roster."""

    name: str = ""

    @abstractmethod
    async def fetch_averages(
        self,
        players: Sequence[PlayerIdentity],
        season: int,
    ) -> dict[int, AveragedStats]:
        """Return averaged stats keyed by player ID for every player given."""
        ...


class GameLogStatsSource(StatsSource):
    """Averages per-game box scores fetched player by player."""

    name = "game_logs"

    def __init__(
        self,
        client: BallDontLieNBA,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS,
        per_page: int = 100,
    ):
        self.client = client
        self.batch_size = batch_size
        self.batch_delay_seconds = batch_delay_seconds
        self.per_page = per_page

    async def fetch_game_logs(
        self,
        players: Sequence[PlayerIdentity],
        season: int,
    ) -> dict[int, list[RawGameRecord]]:
        async def fetch(player_id: int) -> list[RawGameRecord]:
            return await self.client.get_player_game_stats(
                player_id, season, per_page=self.per_page
            )

        player_ids = [player.id for player in players]
        logger.info(f"Fetching {season} game logs for {len(player_ids)} players")
        game_logs = await fetch_in_batches(
            player_ids,
            fetch,
            batch_size=self.batch_size,
            delay_seconds=self.batch_delay_seconds,
        )

        total = sum(len(games) for games in game_logs.values())
        with_games = sum(1 for games in game_logs.values() if games)
        logger.info(f"Retrieved {total} game records for {with_games} players")
        return game_logs

    async def fetch_averages(
        self,
        players: Sequence[PlayerIdentity],
        season: int,
    ) -> dict[int, AveragedStats]:
        game_logs = await self.fetch_game_logs(players, season)
        return {
            player.id: NBAStatsAggregator.average_game_stats(game_logs.get(player.id, []))
            for player in players
        }


def averaged_stats_from_season_average(record: Mapping[str, Any]) -> AveragedStats:
    """Map a /season_averages record onto AveragedStats.

    Missing or malformed values become 0 and percentages are clamped to [0, 1].
    """
    def number(key: str) -> float:
        return to_number(record.get(key)) or 0.0

    def pct(key: str) -> float:
        return min(max(number(key), 0.0), 1.0)

    return AveragedStats(
        pts=number("pts"),
        reb=number("reb"),
        ast=number("ast"),
        stl=number("stl"),
        blk=number("blk"),
        fg_pct=pct("fg_pct"),
        fg3_pct=pct("fg3_pct"),
        ft_pct=pct("ft_pct"),
        games_played=int(number("games_played")),
    )


class SeasonAveragesStatsSource(StatsSource):
    """Uses the API's own season averages, one request per player."""

    name = "season_averages"

    def __init__(
        self,
        client: BallDontLieNBA,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS,
    ):
        self.client = client
        self.batch_size = batch_size
        self.batch_delay_seconds = batch_delay_seconds

    async def fetch_averages(
        self,
        players: Sequence[PlayerIdentity],
        season: int,
    ) -> dict[int, AveragedStats]:
        async def fetch(player_id: int) -> list[dict[str, Any]]:
            return await self.client.get_season_averages(season, [player_id])

        records = await fetch_in_batches(
            [player.id for player in players],
            fetch,
            batch_size=self.batch_size,
            delay_seconds=self.batch_delay_seconds,
        )

        averages: dict[int, AveragedStats] = {}
        for player in players:
            rows = records.get(player.id) or []
            averages[player.id] = (
                averaged_stats_from_season_average(rows[0]) if rows else AveragedStats.zero()
            )
        return averages
