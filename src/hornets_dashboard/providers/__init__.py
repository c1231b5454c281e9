"""Upstream data providers."""

from .balldontlie_nba import BallDontLieNBA, TeamNotFoundError

__all__ = ["BallDontLieNBA", "TeamNotFoundError"]
