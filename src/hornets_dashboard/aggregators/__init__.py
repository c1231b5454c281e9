"""
Statistics aggregators.

These aggregators handle the conversion from raw API responses to season
averages. The BallDontLie API returns game-by-game stats that need to be
averaged over the games a player actually played.
"""

from .nba import NBAStatsAggregator, average_game_stats, average_roster, is_played_game

__all__ = ["NBAStatsAggregator", "average_game_stats", "average_roster", "is_played_game"]
