"""Pit stop tables and stop-count charts."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass

from paddock.api_logging import log_service_call
from paddock.charts import bar_chart, chart_public_id
from paddock.context import RequestContext
from paddock.errors import DataNotFoundError
from paddock.insights.common import label_for, optional_driver
from paddock.insights.registry import INSIGHTS
from paddock.insights.request import InsightRequest
from paddock.openf1 import OpenF1Error
from paddock.openf1.models import Pit, Stint

logger = logging.getLogger(__name__)

UNKNOWN_COMPOUND = "Unknown"
# A stop fits the stint that starts within this many laps of it.
STINT_LAP_TOLERANCE = 1


@dataclass(frozen=True)
class PitStopEntry:
    driver: str
    driver_number: int | None
    lap: int | None
    duration: float | None
    tyres_fitted: str


@dataclass(frozen=True)
class PitStopSummary:
    count: int
    pit_stops: list[PitStopEntry]
    data_type: str = "Pit Stop Summary"


@dataclass(frozen=True)
class PitCountChart:
    image_url: str
    stops: dict[str, int]
    data_type: str = "Pit Count Chart"


def fitted_compound(pit: Pit, stints: list[Stint]) -> str:
    """Compound of the stint that began at this stop (±1 lap), else ``Unknown``."""
    if pit.lap_number is None:
        return UNKNOWN_COMPOUND
    for stint in stints:
        if stint.driver_number != pit.driver_number or stint.lap_start is None:
            continue
        if abs(stint.lap_start - pit.lap_number) <= STINT_LAP_TOLERANCE:
            return stint.compound or UNKNOWN_COMPOUND
    return UNKNOWN_COMPOUND


async def _stints_or_empty(ctx: RequestContext, session_key: int) -> list[Stint]:
    try:
        return await ctx.client.stints(session_key=session_key)
    except OpenF1Error as exc:
        logger.warning("Stints for %s unavailable, tyres left unknown: %s", session_key, exc)
        return []


@INSIGHTS.register("pitstops_summary")
@log_service_call
async def pitstops_summary(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> PitStopSummary:
    pits, stints, labels, driver = await asyncio.gather(
        ctx.client.pit(session_key=session_key),
        _stints_or_empty(ctx, session_key),
        ctx.drivers.labels(session_key),
        optional_driver(ctx, session_key, request.driver_token),
    )
    if driver is not None:
        pits = [p for p in pits if p.driver_number == driver.driver_number]
    entries = [
        PitStopEntry(
            driver=label_for(labels, p.driver_number),
            driver_number=p.driver_number,
            lap=p.lap_number,
            duration=p.pit_duration,
            tyres_fitted=fitted_compound(p, stints),
        )
        for p in pits
    ]
    return PitStopSummary(count=len(entries), pit_stops=entries)


@INSIGHTS.register("pitstops_chart")
@log_service_call
async def pitstops_chart(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> PitCountChart:
    charts = ctx.require_charts()
    pits, labels = await asyncio.gather(
        ctx.client.pit(session_key=session_key),
        ctx.drivers.labels(session_key),
    )
    if not pits:
        raise DataNotFoundError(f"No pit stops recorded for session {session_key}")
    counts = Counter(label_for(labels, p.driver_number) for p in pits)
    stops = dict(counts.most_common())
    fig = bar_chart(
        "Pit Stops", list(stops), list(stops.values()), x_title="Driver", y_title="Stops",
    )
    url = await charts.publish(
        fig, chart_public_id(request.year, request.location, session_key, "pit-count"),
    )
    return PitCountChart(image_url=url, stops=stops)
