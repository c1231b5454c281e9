"""
NBA statistics aggregator.

Handles aggregation of game-by-game box scores into season averages.
The BallDontLie /stats endpoint returns one record per player per game,
including games the player sat out; only games with recorded minutes
count towards the averages.

Design: Self-contained, no I/O and no dependencies on the web layer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence, Union

from ..core.models import AveragedStats, PlayerIdentity, PlayerWithStats, RawGameRecord

GameInput = Union[RawGameRecord, Mapping[str, Any]]

# Minutes value the API uses for a player who was listed but did not play
DID_NOT_PLAY_MINUTES = "0:00"


@dataclass
class _Totals:
    pts: float = 0.0
    reb: float = 0.0
    ast: float = 0.0
    stl: float = 0.0
    blk: float = 0.0
    fgm: float = 0.0
    fga: float = 0.0
    fg3m: float = 0.0
    fg3a: float = 0.0
    ftm: float = 0.0
    fta: float = 0.0
    games: int = 0

    def add(self, game: RawGameRecord) -> None:
        self.pts += game.value("pts")
        self.reb += game.value("reb")
        self.ast += game.value("ast")
        self.stl += game.value("stl")
        self.blk += game.value("blk")
        self.fgm += game.value("fgm")
        self.fga += game.value("fga")
        self.fg3m += game.value("fg3m")
        self.fg3a += game.value("fg3a")
        self.ftm += game.value("ftm")
        self.fta += game.value("fta")
        self.games += 1


def _mean(total: float, games: int) -> float:
    mean = total / games
    return mean if math.isfinite(mean) else 0.0


def _ratio(made: float, attempted: float) -> float:
    """made/attempted clamped to [0, 1]; no attempts or an overflowed total means 0."""
    if attempted <= 0:
        return 0.0
    ratio = made / attempted
    if not math.isfinite(ratio):
        return 0.0
    return min(max(ratio, 0.0), 1.0)


class NBAStatsAggregator:
    """Aggregate NBA game-by-game statistics into season averages."""

    @staticmethod
    def to_record(game: GameInput) -> RawGameRecord:
        if isinstance(game, RawGameRecord):
            return game
        return RawGameRecord.model_validate(game)

    @staticmethod
    def is_played_game(game: GameInput) -> bool:
        """A game counts only if minutes are present, non-empty and not "0:00"."""
        minutes = NBAStatsAggregator.to_record(game).min
        return bool(minutes) and minutes != DID_NOT_PLAY_MINUTES

    @staticmethod
    def average_game_stats(games: Iterable[GameInput] | None) -> AveragedStats:
        """Average a player's game records into one AveragedStats.

        Unplayed games are skipped entirely, so they add to neither the
        sums nor the game count. No rounding is applied.

        Args:
            games: RawGameRecord instances or raw API dicts, in any order

        Returns:
            Averaged statistics; all zeros when no game was played
        """
        totals = _Totals()
        for game in games or ():
            record = NBAStatsAggregator.to_record(game)
            if NBAStatsAggregator.is_played_game(record):
                totals.add(record)

        if totals.games == 0:
            return AveragedStats.zero()

        games_played = totals.games
        return AveragedStats(
            pts=_mean(totals.pts, games_played),
            reb=_mean(totals.reb, games_played),
            ast=_mean(totals.ast, games_played),
            stl=_mean(totals.stl, games_played),
            blk=_mean(totals.blk, games_played),
            fg_pct=_ratio(totals.fgm, totals.fga),
            fg3_pct=_ratio(totals.fg3m, totals.fg3a),
            ft_pct=_ratio(totals.ftm, totals.fta),
            games_played=games_played,
        )

    @staticmethod
    def average_roster(
        players: Sequence[PlayerIdentity],
        games_by_player: Mapping[int, Sequence[GameInput]],
    ) -> list[PlayerWithStats]:
        """Join every rostered player with the average of their games.

        Players missing from ``games_by_player`` get zero stats rather
        than being dropped. Roster order is preserved.
        """
        return [
            PlayerWithStats(
                player=player,
                stats=NBAStatsAggregator.average_game_stats(games_by_player.get(player.id, ())),
            )
            for player in players
        ]


# Module-level aliases for callers that prefer plain functions
is_played_game = NBAStatsAggregator.is_played_game
average_game_stats = NBAStatsAggregator.average_game_stats
average_roster = NBAStatsAggregator.average_roster
