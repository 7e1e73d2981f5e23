"""Lap-time insights: fastest lap, consistency and gap to the reference driver."""

from __future__ import annotations

import asyncio
import logging
import statistics
from dataclasses import dataclass

from paddock.api_logging import log_service_call
from paddock.charts import assign_driver_colors, chart_public_id, line_chart
from paddock.context import RequestContext
from paddock.errors import DataNotFoundError
from paddock.formatters import format_lap_time
from paddock.insights.common import (
    MISSING_LAP_SECONDS,
    label_for,
    optional_driver,
    valid_laps,
)
from paddock.insights.registry import INSIGHTS
from paddock.insights.request import InsightRequest
from paddock.openf1 import OpenF1Error
from paddock.openf1.models import Driver, Lap

logger = logging.getLogger(__name__)

# Drivers plotted by lap_analysis when no driver is given.
LAP_CHART_DRIVERS = 5


@dataclass(frozen=True)
class FastestLap:
    driver: str
    full_name: str | None
    driver_number: int
    lap_time: float
    lap_time_formatted: str
    lap_number: int | None
    compound: str
    tyre_age_laps: int


@dataclass(frozen=True)
class LapStats:
    average_lap: float
    std_dev: float
    count: int


@dataclass(frozen=True)
class LapAnalysis:
    summary: LapStats
    chart_url: str | None


@dataclass(frozen=True)
class GapChart:
    image_url: str
    reference_driver: str
    laps: list[int]
    gaps: dict[str, list[float]]
    data_type: str = "Gap Chart"


def fastest(laps: list[Lap]) -> Lap | None:
    """Quickest lap; the earliest listed wins a tie."""
    timed = valid_laps(laps)
    return min(timed, key=lambda lap: lap.lap_duration) if timed else None


def lap_stats(laps: list[Lap]) -> LapStats:
    """Mean and population standard deviation of lap durations."""
    times = [lap.lap_duration for lap in laps]
    return LapStats(
        average_lap=round(statistics.fmean(times), 3),
        std_dev=round(statistics.pstdev(times), 3),
        count=len(times),
    )


def cumulative_times(laps: list[Lap], driver_number: int) -> list[tuple[int | None, float]]:
    """(lap number, elapsed race time) per lap, missing durations counted as 100 s."""
    own = sorted(
        (lap for lap in laps if lap.driver_number == driver_number),
        key=lambda lap: lap.lap_number or 0,
    )
    total = 0.0
    series = []
    for lap in own:
        total += lap.lap_duration or MISSING_LAP_SECONDS
        series.append((lap.lap_number, total))
    return series


def gap_series(
    laps: list[Lap], driver_numbers: list[int],
) -> tuple[list[int | None], dict[int, list[float]]]:
    """Per-driver elapsed-time difference to the first driver, index by index.

    Series are aligned by position in each driver's lap list, not by lap
    number; a series stops where either driver's data stops.
    """
    reference = cumulative_times(laps, driver_numbers[0])
    if not reference:
        raise DataNotFoundError("Insufficient data for gap analysis")
    gaps: dict[int, list[float]] = {}
    for num in driver_numbers:
        own = cumulative_times(laps, num)
        if not own:
            continue
        gaps[num] = [
            round(total - reference[i][1], 3)
            for i, (_, total) in enumerate(own[:len(reference)])
        ]
    return [lap_number for lap_number, _ in reference], gaps


async def _compound_for(
    ctx: RequestContext, session_key: int, lap: Lap,
) -> tuple[str, int]:
    try:
        stints = await ctx.client.stints(session_key=session_key, driver_number=lap.driver_number)
    except OpenF1Error as exc:
        logger.warning("Stints for driver %s unavailable: %s", lap.driver_number, exc)
        return "N/A", 0
    if lap.lap_number is None:
        return "N/A", 0
    stint = next((s for s in stints if s.covers(lap.lap_number)), None)
    if stint is None:
        return "N/A", 0
    return stint.compound or "Unknown", lap.lap_number - stint.lap_start + 1


def _for_driver(laps: list[Lap], driver: Driver | None) -> list[Lap]:
    if driver is None:
        return laps
    return [lap for lap in laps if lap.driver_number == driver.driver_number]


@INSIGHTS.register("fastest_lap_summary")
@log_service_call
async def fastest_lap_summary(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> FastestLap:
    laps, roster, driver = await asyncio.gather(
        ctx.client.laps(session_key=session_key),
        ctx.drivers.roster(session_key),
        optional_driver(ctx, session_key, request.driver_token),
    )
    best = fastest(_for_driver(laps, driver))
    if best is None:
        raise DataNotFoundError(f"No timed laps in session {session_key}")

    compound, tyre_age = await _compound_for(ctx, session_key, best)
    holder = next((d for d in roster if d.driver_number == best.driver_number), None)
    return FastestLap(
        driver=(holder.name_acronym if holder and holder.name_acronym else "UNK"),
        full_name=holder.full_name if holder else None,
        driver_number=best.driver_number,
        lap_time=best.lap_duration,
        lap_time_formatted=format_lap_time(best.lap_duration),
        lap_number=best.lap_number,
        compound=compound,
        tyre_age_laps=tyre_age,
    )


@INSIGHTS.register("lap_analysis")
@log_service_call
async def lap_analysis(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> LapAnalysis:
    """Lap-time consistency, with a lap-time chart when an image host is configured."""
    laps, labels, driver = await asyncio.gather(
        ctx.client.laps(session_key=session_key),
        ctx.drivers.labels(session_key),
        optional_driver(ctx, session_key, request.driver_token),
    )
    timed = valid_laps(_for_driver(laps, driver))
    if not timed:
        raise DataNotFoundError(f"No timed laps in session {session_key}")
    stats = lap_stats(timed)

    if ctx.charts is None:
        return LapAnalysis(summary=stats, chart_url=None)

    plotted = list(dict.fromkeys(lap.driver_number for lap in timed))[:LAP_CHART_DRIVERS]
    series = {
        label_for(labels, num): [lap.lap_duration for lap in timed if lap.driver_number == num]
        for num in plotted
    }
    fig = line_chart("Lap Consistency", series, x_title="Lap", y_title="Lap Time (s)")
    url = await ctx.charts.publish(
        fig, chart_public_id(request.year, request.location, session_key, request.driver, "lap-analysis"),
    )
    return LapAnalysis(summary=stats, chart_url=url)


@INSIGHTS.register("gap_chart")
@log_service_call
async def gap_chart(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> GapChart:
    """Elapsed-time gap of the first ``top_n`` roster drivers to the first of them."""
    charts = ctx.require_charts()
    laps, roster = await asyncio.gather(
        ctx.client.laps(session_key=session_key),
        ctx.drivers.roster(session_key),
    )
    top = [d for d in roster if d.driver_number is not None][:request.top_n]
    if not top:
        raise DataNotFoundError(f"No drivers listed for session {session_key}")
    lap_numbers, gaps = gap_series(laps, [d.driver_number for d in top])

    labels = {d.driver_number: d.label for d in top}
    colors = assign_driver_colors(top)
    named = {labels[num]: values for num, values in gaps.items()}
    fig = line_chart(
        "Gap to Leader",
        named,
        x=lap_numbers,
        x_title="Lap",
        y_title="Gap (s)",
        colors={labels[num]: colors[num] for num in gaps},
        reverse_y=True,
    )
    url = await charts.publish(
        fig, chart_public_id(request.year, request.location, session_key, "gap-chart"),
    )
    return GapChart(
        image_url=url,
        reference_driver=labels[top[0].driver_number],
        laps=lap_numbers,
        gaps=named,
    )
