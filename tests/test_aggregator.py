"""
Tests for NBAStatsAggregator: played-game filtering, averaging and
percentage semantics.
"""

import pytest

from hornets_dashboard.aggregators.nba import NBAStatsAggregator, average_game_stats, is_played_game
from hornets_dashboard.core.models import AveragedStats, RawGameRecord

PERCENTAGES = ("fg_pct", "fg3_pct", "ft_pct")


class TestPlayedGameFilter:
    @pytest.mark.parametrize("minutes", [None, "", "0:00"])
    def test_unplayed(self, minutes):
        assert not is_played_game(RawGameRecord(min=minutes, pts=10))

    @pytest.mark.parametrize("minutes", ["0:01", "12:30", "34", "5:00"])
    def test_played(self, minutes):
        assert is_played_game(RawGameRecord(min=minutes))

    def test_numeric_minutes_are_read_as_strings(self):
        assert RawGameRecord.model_validate({"min": 32}).min == "32"


class TestZeroPlayedGames:
    """No played games is a defined result, not an error."""

    def test_empty_sequence(self):
        assert average_game_stats([]) == AveragedStats.zero()

    def test_none(self):
        assert average_game_stats(None) == AveragedStats.zero()

    def test_all_unplayed(self, make_game):
        games = [make_game("0:00", pts=12, fgm=5, fga=9), make_game("", reb=3), make_game(None, ast=4)]
        result = average_game_stats(games)
        assert result == AveragedStats.zero()
        assert result.model_dump() == {
            "pts": 0.0, "reb": 0.0, "ast": 0.0, "stl": 0.0, "blk": 0.0,
            "fg_pct": 0.0, "fg3_pct": 0.0, "ft_pct": 0.0, "games_played": 0,
        }


class TestAveraging:
    def test_averages_only_played_games(self, make_game):
        games = [
            make_game("30:00", pts=20, reb=10, ast=4, stl=2, blk=1),
            make_game("0:00", pts=50, reb=50),
            make_game("28:00", pts=10, reb=6, ast=2, stl=0, blk=3),
        ]
        result = average_game_stats(games)
        assert result.games_played == 2
        assert result.pts == pytest.approx(15.0)
        assert result.reb == pytest.approx(8.0)
        assert result.ast == pytest.approx(3.0)
        assert result.stl == pytest.approx(1.0)
        assert result.blk == pytest.approx(2.0)

    def test_no_rounding(self, make_game):
        games = [make_game(pts=10), make_game(pts=10), make_game(pts=11)]
        assert average_game_stats(games).pts == pytest.approx(31 / 3)

    def test_percentages_use_season_totals(self, make_game):
        games = [
            make_game(fgm=1, fga=2, fg3m=0, fg3a=1, ftm=4, fta=4),
            make_game(fgm=9, fga=18, fg3m=3, fg3a=5, ftm=0, fta=1),
        ]
        result = average_game_stats(games)
        assert result.fg_pct == pytest.approx(10 / 20)
        assert result.fg3_pct == pytest.approx(3 / 6)
        assert result.ft_pct == pytest.approx(4 / 5)

    def test_removing_unplayed_games_changes_nothing(self, make_game):
        games = [
            make_game("33:10", pts=18, reb=4, fgm=7, fga=15, fg3m=2, fg3a=6, ftm=2, fta=3),
            make_game("0:00", pts=99, fgm=40, fga=40),
            make_game("", reb=20),
            make_game("21:05", pts=9, ast=7, fgm=3, fga=10, ftm=3, fta=4),
            make_game(None, blk=5),
        ]
        played = [g for g in games if is_played_game(g)]
        assert average_game_stats(games) == average_game_stats(played)

    def test_accepts_raw_api_dicts(self):
        games = [
            {"id": 1, "min": "30", "pts": 20, "fgm": 8, "fga": 16, "player": {"id": 1}},
            {"id": 2, "min": "0:00", "pts": 40},
        ]
        result = NBAStatsAggregator.average_game_stats(games)
        assert result.pts == 20
        assert result.fg_pct == 0.5


class TestMissingAndMalformedFields:
    def test_missing_fields_count_as_zero(self, make_game):
        games = [make_game(pts=10), make_game(reb=6)]
        result = average_game_stats(games)
        assert result.pts == 5
        assert result.reb == 3
        assert result.ast == 0

    def test_malformed_values_count_as_zero(self):
        games = [
            {"min": "30:00", "pts": "n/a", "reb": None, "ast": "4"},
            {"min": "30:00", "pts": 10, "reb": 2, "ast": True},
        ]
        result = average_game_stats(games)
        assert result.pts == 5
        assert result.reb == 1
        assert result.ast == 2

    def test_non_finite_values_count_as_zero(self):
        games = [{"min": "30:00", "pts": "inf", "fgm": float("nan"), "fga": 4}]
        result = average_game_stats(games)
        assert result.pts == 0.0
        assert result.fg_pct == 0.0


class TestPercentageBounds:
    def test_no_attempts_gives_zero(self, make_game):
        result = average_game_stats([make_game(pts=8, fgm=0, fga=0, fg3m=0, fg3a=0, ftm=0, fta=0)])
        for field in PERCENTAGES:
            assert getattr(result, field) == 0.0

    def test_inconsistent_counts_are_clamped(self, make_game):
        result = average_game_stats([make_game(fgm=7, fga=5, fg3m=-1, fg3a=2)])
        assert result.fg_pct == 1.0
        assert result.fg3_pct == 0.0

    def test_overflowing_totals_count_as_zero(self):
        games = [
            {"min": "30:00", "pts": 1e308, "fgm": 1e308, "fga": 1e308, "ftm": 1e308, "fta": 1e308},
            {"min": "30:00", "pts": 1e308, "fgm": 1e308, "fga": 1e308, "ftm": 1e308, "fta": 1e308},
        ]
        result = average_game_stats(games)
        assert result.games_played == 2
        assert result.pts == 0.0
        assert result.fg_pct == 0.0
        assert result.ft_pct == 0.0

    @pytest.mark.parametrize(
        "games",
        [
            [{"min": "30:00", "fgm": 3, "fga": 7, "fg3m": 1, "fg3a": 4, "ftm": 2, "fta": 2}],
            [
                {"min": "30:00", "fgm": 0, "fga": 12, "fg3m": 0, "fg3a": 0, "ftm": 5, "fta": 9},
                {"min": "0:00", "fgm": 5, "fga": 5},
            ],
            [
                {"min": "30:00", "fgm": 10, "fga": 10, "fg3a": 3},
                {"min": "30:00", "fgm": 0, "fga": 1, "ftm": 1, "fta": 3},
            ],
        ],
    )
    def test_percentages_within_unit_interval(self, games):
        result = average_game_stats(games)
        for field in PERCENTAGES:
            assert 0.0 <= getattr(result, field) <= 1.0


class TestAverageRoster:
    def test_players_without_games_get_zero_stats(self, make_player, make_game):
        a = make_player(10, "A", "Player")
        b = make_player(20, "B", "Player")
        joined = NBAStatsAggregator.average_roster([a, b], {10: [make_game(pts=12)]})
        assert [p.player.id for p in joined] == [10, 20]
        assert joined[0].stats.pts == 12
        assert joined[1].stats == AveragedStats.zero()


def test_two_player_scenario(make_game):
    a_games = [make_game("30:00", pts=20, fga=10, fgm=5), make_game("0:00", pts=10)]
    b_games = [make_game("25:00", pts=15, fga=8, fgm=4)]

    a = average_game_stats(a_games)
    b = average_game_stats(b_games)

    assert a.pts == 20
    assert a.fg_pct == 0.5
    assert b.pts == 15
    assert b.fg_pct == 0.5
