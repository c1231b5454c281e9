"""
Plotly chart builders for the dashboard page.

Each builder returns a ``plotly.graph_objects.Figure``; ``to_html_fragment``
renders it as a <div> without bundling plotly.js (the page loads it once
from the CDN).
"""

from __future__ import annotations

from typing import Sequence

import plotly.graph_objects as go

from .core.models import AveragedStats, PlayerView, PointsDistributionEntry, ShootingEfficiencyEntry

HORNETS_PURPLE = "#201747"
HORNETS_TEAL = "#1d8caa"
HORNETS_GRAY = "#a1a1a4"

SHOOTING_CHART_LIMIT = 10
POINTS_CHART_LIMIT = 15
RADAR_COUNTING_CAP = 20.0

RADAR_LABELS = ["Points", "Rebounds", "Assists", "Steals", "Blocks", "FG%", "3PT%", "FT%"]

PLOT_CONFIG = {"displayModeBar": False, "responsive": True}


def _base_layout(fig: go.Figure, title: str) -> go.Figure:
    fig.update_layout(
        title=title,
        template="plotly_dark",
        paper_bgcolor="black",
        plot_bgcolor="black",
        margin=dict(l=40, r=20, t=50, b=40),
        legend=dict(orientation="h", y=-0.2),
    )
    return fig


def shooting_efficiency_chart(
    entries: Sequence[ShootingEfficiencyEntry],
    limit: int = SHOOTING_CHART_LIMIT,
) -> go.Figure:
    """Grouped FG% / 3PT% bars for the best field-goal shooters."""
    top = sorted(entries, key=lambda e: e.fg_pct, reverse=True)[:limit]
    names = [e.name for e in top]
    fig = go.Figure(
        data=[
            go.Bar(name="FG%", x=names, y=[e.fg_pct * 100 for e in top], marker_color=HORNETS_TEAL),
            go.Bar(name="3PT%", x=names, y=[e.fg3_pct * 100 for e in top], marker_color=HORNETS_GRAY),
        ]
    )
    fig.update_layout(barmode="group", yaxis=dict(title="Percentage", range=[0, 100]))
    return _base_layout(fig, "Shooting Efficiency")


def points_distribution_chart(
    entries: Sequence[PointsDistributionEntry],
    limit: int = POINTS_CHART_LIMIT,
) -> go.Figure:
    """Points-per-game bars for the top scorers."""
    top = sorted(entries, key=lambda e: e.points, reverse=True)[:limit]
    fig = go.Figure(
        data=[
            go.Bar(
                name="Points Per Game",
                x=[e.name for e in top],
                y=[e.points for e in top],
                marker_color=HORNETS_TEAL,
                hovertemplate="%{x}: %{y:.1f} PPG<extra></extra>",
            )
        ]
    )
    fig.update_layout(yaxis=dict(title="Points"))
    return _base_layout(fig, "Points Distribution")


def radar_values(stats: AveragedStats) -> list[float]:
    """Radar axes: counting stats capped at 20, percentages scaled to 0-100."""
    counting = [stats.pts, stats.reb, stats.ast, stats.stl, stats.blk]
    shooting = [stats.fg_pct, stats.fg3_pct, stats.ft_pct]
    return [min(v, RADAR_COUNTING_CAP) for v in counting] + [v * 100 for v in shooting]


def performance_radar(player: PlayerView) -> go.Figure:
    values = radar_values(player.stats)
    fig = go.Figure(
        data=[
            go.Scatterpolar(
                r=values + values[:1],
                theta=RADAR_LABELS + RADAR_LABELS[:1],
                fill="toself",
                name=player.name,
                line_color=HORNETS_TEAL,
            )
        ]
    )
    fig.update_layout(polar=dict(radialaxis=dict(visible=True, range=[0, 100])))
    return _base_layout(fig, f"{player.name} Performance")


def to_html_fragment(fig: go.Figure) -> str:
    return fig.to_html(full_html=False, include_plotlyjs=False, config=PLOT_CONFIG)
