"""
Pytest configuration and shared fixtures for hornets-dashboard tests.

Upstream APIs are never contacted: BallDontLie is replaced either by
FakeNBAClient (service-level tests) or by httpx.MockTransport
(client-level tests).
"""

from __future__ import annotations

from typing import Any

import pytest

from hornets_dashboard.core.http import ExternalAPIError
from hornets_dashboard.core.models import PlayerIdentity, RawGameRecord, Team
from hornets_dashboard.providers.balldontlie_nba import TeamNotFoundError

HORNETS = Team(
    id=4,
    abbreviation="CHA",
    city="Charlotte",
    conference="East",
    division="Southeast",
    full_name="Charlotte Hornets",
    name="Hornets",
)


def _player(player_id: int, first: str, last: str, position: str = "G") -> PlayerIdentity:
    return PlayerIdentity(id=player_id, first_name=first, last_name=last, position=position, team=HORNETS)


def _box_score(minutes: str | None = "30:00", **stats: Any) -> RawGameRecord:
    return RawGameRecord(min=minutes, **stats)


class FakeNBAClient:
    """In-memory stand-in for BallDontLieNBA."""

    def __init__(
        self,
        roster: list[PlayerIdentity] | None = None,
        games: dict[int, list[RawGameRecord]] | None = None,
        season_averages: dict[int, dict[str, Any]] | None = None,
        failing_players: set[int] | None = None,
        roster_error: Exception | None = None,
    ):
        self.roster = roster or []
        self.games = games or {}
        self.season_averages = season_averages or {}
        self.failing_players = failing_players or set()
        self.roster_error = roster_error
        self.game_stats_calls: list[tuple[int, int]] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    async def find_team(self, team_name: str) -> Team:
        if self.roster_error:
            raise self.roster_error
        if team_name.lower() != "hornets":
            raise TeamNotFoundError(team_name)
        return HORNETS

    async def get_team_players(self, team_id: int, *, active_only: bool = False, per_page: int = 100):
        return list(self.roster)

    async def get_player_game_stats(self, player_id: int, season: int, *, postseason: bool = False, per_page: int = 100):
        self.game_stats_calls.append((player_id, season))
        if player_id in self.failing_players:
            raise ExternalAPIError(f"HTTP 500 for player {player_id}")
        return list(self.games.get(player_id, []))

    async def get_season_averages(self, season: int, player_ids: list[int], season_type: str = "regular"):
        rows = []
        for player_id in player_ids:
            if player_id in self.failing_players:
                raise ExternalAPIError(f"HTTP 500 for player {player_id}")
            if player_id in self.season_averages:
                rows.append({"player_id": player_id, "season": season, **self.season_averages[player_id]})
        return rows


@pytest.fixture
def make_player():
    """Factory: make_player(id, first, last, position="G") -> PlayerIdentity on the Hornets."""
    return _player


@pytest.fixture
def make_game():
    """Factory: make_game(minutes="30:00", **box_score) -> RawGameRecord."""
    return _box_score


@pytest.fixture
def nba_client():
    """Factory for in-memory BallDontLie clients (see FakeNBAClient)."""
    return FakeNBAClient


@pytest.fixture
def ball():
    return _player(1, "LaMelo", "Ball", "G")


@pytest.fixture
def miller():
    return _player(2, "Brandon", "Miller", "F")


@pytest.fixture
def bridges():
    return _player(3, "Miles", "Bridges", "F")


@pytest.fixture
def roster(ball, miller, bridges):
    return [ball, miller, bridges]


@pytest.fixture
def roster_games(ball, miller, bridges):
    """Game logs for the roster; Bridges has no games at all."""
    return {
        ball.id: [
            _box_score("34:12", pts=30, reb=5, ast=10, stl=2, blk=0, fgm=11, fga=24, fg3m=5, fg3a=12, ftm=3, fta=4),
            _box_score("0:00", pts=0, reb=0, ast=0),
            _box_score("31:40", pts=20, reb=7, ast=8, stl=1, blk=1, fgm=8, fga=20, fg3m=3, fg3a=10, ftm=1, fta=2),
        ],
        miller.id: [
            _box_score("35:00", pts=24, reb=4, ast=3, stl=1, blk=1, fgm=9, fga=18, fg3m=4, fg3a=9, ftm=2, fta=2),
        ],
    }


@pytest.fixture
def fake_client(roster, roster_games):
    return FakeNBAClient(roster=roster, games=roster_games)
