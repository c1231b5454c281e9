"""
Tests for DashboardService and the stats sources, against an in-memory
BallDontLie client.
"""

import pytest

from hornets_dashboard.core.config import Settings
from hornets_dashboard.core.http import ExternalAPIError
from hornets_dashboard.core.models import AveragedStats
from hornets_dashboard.services.dashboard import DashboardService, build_stats_source
from hornets_dashboard.services.leaderboards import DashboardBuilder
from hornets_dashboard.services.sources import (
    GameLogStatsSource,
    SeasonAveragesStatsSource,
    averaged_stats_from_season_average,
)


def make_service(client, source=None, **kwargs):
    source = source or GameLogStatsSource(client, batch_size=2, batch_delay_seconds=0)
    return DashboardService(client, source, DashboardBuilder(), **kwargs)


class TestGameLogStatsSource:
    async def test_averages_every_player(self, fake_client, roster):
        source = GameLogStatsSource(fake_client, batch_size=2, batch_delay_seconds=0)
        averages = await source.fetch_averages(roster, 2024)

        assert set(averages) == {1, 2, 3}
        assert averages[1].games_played == 2
        assert averages[1].pts == 25.0
        assert averages[1].fg_pct == pytest.approx(19 / 44)
        assert averages[2].pts == 24.0
        assert averages[3] == AveragedStats.zero()

    async def test_requests_configured_season(self, fake_client, roster):
        source = GameLogStatsSource(fake_client, batch_size=5, batch_delay_seconds=0)
        await source.fetch_averages(roster, 2023)
        assert sorted(fake_client.game_stats_calls) == [(1, 2023), (2, 2023), (3, 2023)]

    async def test_failed_player_gets_zero_stats(self, nba_client, roster, roster_games):
        client = nba_client(roster=roster, games=roster_games, failing_players={2})
        source = GameLogStatsSource(client, batch_size=2, batch_delay_seconds=0)
        averages = await source.fetch_averages(roster, 2024)
        assert averages[2] == AveragedStats.zero()
        assert averages[1].games_played == 2


class TestSeasonAveragesStatsSource:
    async def test_maps_api_averages(self, nba_client, roster):
        client = nba_client(
            roster=roster,
            season_averages={1: {"games_played": 60, "pts": 23.9, "reb": 5.1, "fg_pct": 0.433}},
        )
        source = SeasonAveragesStatsSource(client, batch_size=5, batch_delay_seconds=0)
        averages = await source.fetch_averages(roster, 2024)

        assert averages[1].pts == 23.9
        assert averages[1].games_played == 60
        assert averages[2] == AveragedStats.zero()
        assert averages[3] == AveragedStats.zero()

    def test_record_mapping(self):
        stats = averaged_stats_from_season_average(
            {"pts": "18.5", "reb": None, "ast": 4, "fg_pct": 1.2, "fg3_pct": -0.1, "games_played": 40}
        )
        assert stats.pts == 18.5
        assert stats.reb == 0.0
        assert stats.ast == 4.0
        assert stats.fg_pct == 1.0
        assert stats.fg3_pct == 0.0
        assert stats.ft_pct == 0.0
        assert stats.games_played == 40


class TestBuildStatsSource:
    def test_default_is_game_logs(self, fake_client):
        settings = Settings(_env_file=None)
        assert isinstance(build_stats_source(fake_client, settings), GameLogStatsSource)

    def test_season_averages(self, fake_client):
        settings = Settings(_env_file=None, stats_source="season_averages")
        assert isinstance(build_stats_source(fake_client, settings), SeasonAveragesStatsSource)


class TestDashboardService:
    async def test_build_dashboard(self, fake_client):
        payload = await make_service(fake_client).build_dashboard()

        assert [p.id for p in payload.players] == [1, 2, 3]
        assert payload.leaderboards["pts"][0].name == "LaMelo Ball"
        assert payload.points_distribution[0].points == 25.0
        # Bridges has no games but is still listed, with zeros
        assert payload.find_player(3).stats == AveragedStats.zero()

    async def test_season_override(self, fake_client):
        await make_service(fake_client, season=2024).build_dashboard(2022)
        assert {season for _, season in fake_client.game_stats_calls} == {2022}

    async def test_failing_player_keeps_dashboard(self, nba_client, roster, roster_games):
        client = nba_client(roster=roster, games=roster_games, failing_players={1})
        payload = await make_service(client).build_dashboard()

        assert len(payload.players) == 3
        assert payload.find_player(1).stats == AveragedStats.zero()
        assert payload.leaderboards["pts"][0].id == 2

    async def test_empty_roster(self, nba_client):
        payload = await make_service(nba_client(roster=[])).build_dashboard()
        assert payload.to_dict() == {
            "leaderboards": {},
            "shootingEfficiency": [],
            "pointsDistribution": [],
            "players": [],
        }

    async def test_roster_without_games(self, nba_client, roster):
        payload = await make_service(nba_client(roster=roster)).build_dashboard()
        assert payload.players == []
        assert payload.leaderboards == {}

    async def test_roster_failure_propagates(self, nba_client):
        client = nba_client(roster_error=ExternalAPIError("HTTP 503: unavailable"))
        with pytest.raises(ExternalAPIError):
            await make_service(client).build_dashboard()

    async def test_unknown_team(self, fake_client):
        service = make_service(fake_client, team_name="Celtics")
        with pytest.raises(ExternalAPIError) as exc_info:
            await service.get_roster()
        assert exc_info.value.status_code == 404

    def test_from_settings(self, fake_client):
        settings = Settings(_env_file=None, team_name="Hornets", season=2023, leaderboard_size=3)
        service = DashboardService.from_settings(fake_client, settings)
        assert service.season == 2023
        assert service.builder.leaderboard_size == 3
        assert isinstance(service.source, GameLogStatsSource)
