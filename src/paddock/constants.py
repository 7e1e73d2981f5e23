"""Shared constants for insight charts."""

from __future__ import annotations

F1_RED = "#E10600"

# Fallback colours when teammates share a team colour
COMPARISON_COLORS: list[str] = [
    "#00D2BE",  # teal
    "#FF8700",  # orange
    "#BF00FF",  # purple
    "#FFD700",  # gold
    "#1E90FF",  # blue
]

# Charts are rasterised for chat clients, so a solid background.
PLOTLY_LAYOUT_DEFAULTS = dict(
    paper_bgcolor="#FFFFFF",
    plot_bgcolor="#FFFFFF",
    font_color="#15151E",
    margin=dict(l=60, r=20, t=60, b=50),
)

CHART_WIDTH = 1000
CHART_HEIGHT = 600
