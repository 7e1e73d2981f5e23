"""Chart figures for insight handlers, rendered to PNG and published to Cloudinary.

Handlers build a plotly figure from the numeric series they computed and hand
it to :class:`ChartPublisher`, which rasterises it (kaleido) and uploads the
image. Both steps block, so they run in a worker thread.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import re
from typing import Protocol, Sequence

import cloudinary
import cloudinary.uploader
import plotly.graph_objects as go

from paddock.config import Settings
from paddock.constants import (
    CHART_HEIGHT,
    CHART_WIDTH,
    COMPARISON_COLORS,
    F1_RED,
    PLOTLY_LAYOUT_DEFAULTS,
)
from paddock.openf1.models import Driver

logger = logging.getLogger(__name__)

_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{3,8}$")
_PUBLIC_ID_RE = re.compile(r"[^A-Za-z0-9_\-]+")


def normalize_team_color(team_colour: str | None) -> str:
    """Return a validated hex color string with '#' prefix, defaulting to F1_RED."""
    if team_colour:
        candidate = team_colour if team_colour.startswith("#") else f"#{team_colour}"
        if _HEX_COLOR_RE.match(candidate):
            return candidate.upper()
    return F1_RED


def assign_driver_colors(drivers: Sequence[Driver]) -> dict[int, str]:
    """Assign a unique color to each driver, handling teammate collisions."""
    colors: dict[int, str] = {}
    used: set[str] = set()
    fallback = iter(c.upper() for c in COMPARISON_COLORS)

    for driver in drivers:
        if driver.driver_number is None:
            continue
        color = normalize_team_color(driver.team_colour)
        if color in used:
            color = next((c for c in fallback if c not in used), color)
        used.add(color)
        colors[driver.driver_number] = color

    return colors


def line_chart(
    title: str,
    series: dict[str, Sequence[float | None]],
    *,
    x: Sequence[float | int] | None = None,
    x_title: str = "",
    y_title: str = "",
    colors: dict[str, str] | None = None,
    reverse_y: bool = False,
) -> go.Figure:
    """One line per entry of ``series``; x defaults to the sample index.

    A series shorter than ``x`` is drawn against the leading part of it.
    """
    fig = go.Figure()
    for name, values in series.items():
        fig.add_trace(go.Scatter(
            x=list(x)[:len(values)] if x is not None else list(range(1, len(values) + 1)),
            y=list(values),
            mode="lines",
            name=name,
            line=dict(color=(colors or {}).get(name), width=2),
        ))
    fig.update_layout(
        title=title,
        xaxis_title=x_title,
        yaxis_title=y_title,
        **PLOTLY_LAYOUT_DEFAULTS,
    )
    if reverse_y:
        fig.update_yaxes(autorange="reversed")
    return fig


def bar_chart(
    title: str,
    labels: Sequence[str],
    values: Sequence[float],
    *,
    x_title: str = "",
    y_title: str = "",
    color: str = "coral",
) -> go.Figure:
    fig = go.Figure(go.Bar(x=list(labels), y=list(values), marker_color=color))
    fig.update_layout(
        title=title,
        xaxis_title=x_title,
        yaxis_title=y_title,
        **PLOTLY_LAYOUT_DEFAULTS,
    )
    return fig


def render_png(fig: go.Figure) -> bytes:
    """Rasterise a figure with kaleido. Blocking."""
    return fig.to_image(format="png", width=CHART_WIDTH, height=CHART_HEIGHT)


def chart_public_id(*parts: object) -> str:
    """Stable upload id from the request parameters, e.g. ``2024-silverstone-gap-chart``."""
    raw = "-".join(str(p) for p in parts if p not in (None, ""))
    return _PUBLIC_ID_RE.sub("-", raw).strip("-").lower() or "chart"


class ImageUploader(Protocol):
    async def upload(self, image: bytes, public_id: str) -> str: ...


class CloudinaryUploader:
    """Upload PNG bytes to Cloudinary and return the HTTPS URL."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, folder: str) -> None:
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )
        self._folder = folder

    @classmethod
    def from_settings(cls, settings: Settings) -> CloudinaryUploader | None:
        if not settings.has_image_host:
            return None
        return cls(
            settings.cloudinary_cloud_name,
            settings.cloudinary_api_key,
            settings.cloudinary_api_secret,
            settings.chart_folder,
        )

    async def upload(self, image: bytes, public_id: str) -> str:
        data_uri = "data:image/png;base64," + base64.b64encode(image).decode("ascii")
        result = await asyncio.to_thread(
            cloudinary.uploader.upload,
            data_uri,
            folder=self._folder,
            public_id=f"f1_visuals/{public_id}",
            overwrite=True,
            resource_type="image",
        )
        return result["secure_url"]


class ChartPublisher:
    """Render figures and push them to the image host."""

    def __init__(self, uploader: ImageUploader) -> None:
        self._uploader = uploader

    async def publish(self, fig: go.Figure, public_id: str) -> str:
        image = await asyncio.to_thread(render_png, fig)
        url = await self._uploader.upload(image, public_id)
        logger.info("Published chart %s -> %s", public_id, url)
        return url
