"""
Core types and constants for the Hornets dashboard.

This module provides:
- StatCategory enum for the ranked statistical categories
- STAT_CATEGORIES, the fixed leaderboard category order
- Display labels shared by tables and charts
"""

from enum import Enum


class StatCategory(str, Enum):
    """Statistical categories available on an AveragedStats record."""

    pts = "pts"
    reb = "reb"
    ast = "ast"
    stl = "stl"
    blk = "blk"
    fg_pct = "fg_pct"
    fg3_pct = "fg3_pct"
    ft_pct = "ft_pct"

    @property
    def is_percentage(self) -> bool:
        return self.value.endswith("_pct")

    @property
    def label(self) -> str:
        return STAT_LABELS[self]


STAT_CATEGORIES: tuple[StatCategory, ...] = tuple(StatCategory)

STAT_LABELS: dict[StatCategory, str] = {
    StatCategory.pts: "Points",
    StatCategory.reb: "Rebounds",
    StatCategory.ast: "Assists",
    StatCategory.stl: "Steals",
    StatCategory.blk: "Blocks",
    StatCategory.fg_pct: "FG%",
    StatCategory.fg3_pct: "3PT%",
    StatCategory.ft_pct: "FT%",
}


def format_stat_value(category: StatCategory | str, value: float) -> str:
    """Format a stat for display: percentages as ``45.3%``, others as ``12.4``."""
    category = StatCategory(category)
    if category.is_percentage:
        return f"{value * 100:.1f}%"
    return f"{value:.1f}"
