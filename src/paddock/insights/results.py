"""Classification, live leaderboard and starting grid."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from paddock.api_logging import log_service_call
from paddock.context import RequestContext
from paddock.errors import DataNotFoundError
from paddock.formatters import format_gap, format_lap_time
from paddock.insights.common import label_for
from paddock.insights.registry import INSIGHTS
from paddock.insights.request import InsightRequest
from paddock.openf1 import Filter
from paddock.openf1.models import Driver, Position, SessionResult
from paddock.resolution.dates import sort_key

LIVE_WINDOW = timedelta(seconds=60)
UNCLASSIFIED = 999


@dataclass(frozen=True)
class ClassifiedEntry:
    position: int
    driver: str
    team: str
    time_or_gap: str
    points: float
    status: str
    grid_start: int | None


@dataclass(frozen=True)
class Classification:
    count: int
    leaderboard: list[ClassifiedEntry]
    data_type: str = "Final Classification"


@dataclass(frozen=True)
class LiveLeaderboard:
    leader: str
    top_3_drivers: list[str]
    data_type: str = "Live Leaderboard"
    status: str = "Race In Progress"


@dataclass(frozen=True)
class GridSlot:
    position: int
    driver: str
    team: str | None
    driver_number: int | None
    qualifying_time: str


@dataclass(frozen=True)
class GridSummary:
    count: int
    grid: list[GridSlot]
    data_type: str = "Starting Grid"


def last_value(value: Any) -> Any:
    """Last non-null element of a per-segment list (qualifying), or the value itself."""
    if isinstance(value, list):
        present = [v for v in value if v is not None]
        return present[-1] if present else None
    return value


def latest_per_driver(positions: list[Position]) -> list[Position]:
    """Most recent sample per car, ordered by running position."""
    latest: dict[int, Position] = {}
    for sample in positions:
        if sample.driver_number is None:
            continue
        current = latest.get(sample.driver_number)
        if current is None or sort_key(sample.date) > sort_key(current.date):
            latest[sample.driver_number] = sample
    return sorted(latest.values(), key=lambda p: p.position or UNCLASSIFIED)


async def live_positions(
    ctx: RequestContext,
    session_key: int,
    now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
) -> list[Position]:
    """Running order from position samples of the last minute."""
    samples = await ctx.client.position(
        session_key=session_key, date=Filter(gt=now() - LIVE_WINDOW),
    )
    return latest_per_driver(samples)


def classify(result: SessionResult, roster: dict[int, Driver]) -> ClassifiedEntry:
    """One classification row; roster names win over the result's own acronym."""
    driver = roster.get(result.driver_number)
    status = result.classification_status
    if result.position == 1:
        time_or_gap = format_lap_time(last_value(result.duration))
    else:
        time_or_gap = format_gap(last_value(result.gap_to_leader)) or status

    name = result.name_acronym or f"#{result.driver_number}"
    team = result.team_name
    if driver is not None:
        name = driver.full_name or driver.name_acronym or name
        team = team or driver.team_name
    return ClassifiedEntry(
        position=result.position or UNCLASSIFIED,
        driver=name,
        team=team or "Unknown",
        time_or_gap=time_or_gap,
        points=result.points or 0,
        status=status,
        grid_start=result.grid_position,
    )


@INSIGHTS.register("race_results")
@log_service_call
async def race_results(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> Classification | LiveLeaderboard:
    """Final classification; while a session is running, the live order instead."""
    results = await ctx.client.session_result(session_key=session_key)
    if not results:
        live, labels = await asyncio.gather(
            live_positions(ctx, session_key), ctx.drivers.labels(session_key),
        )
        if not live:
            raise DataNotFoundError(f"No results or live positions for session {session_key}")
        return LiveLeaderboard(
            leader=label_for(labels, live[0].driver_number),
            top_3_drivers=[label_for(labels, p.driver_number) for p in live[:3]],
        )

    roster = {d.driver_number: d for d in await ctx.drivers.roster(session_key)}
    leaderboard = sorted((classify(r, roster) for r in results), key=lambda e: e.position)
    return Classification(count=len(leaderboard), leaderboard=leaderboard)


@INSIGHTS.register("starting_grid")
@log_service_call
async def starting_grid(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> GridSummary:
    slots, roster = await asyncio.gather(
        ctx.client.starting_grid(session_key=session_key),
        ctx.drivers.roster(session_key),
    )
    if not slots:
        raise DataNotFoundError(f"No starting grid for session {session_key}")
    by_number = {d.driver_number: d for d in roster}
    grid = []
    for slot in slots:
        if slot.position is None:
            continue
        driver = by_number.get(slot.driver_number)
        grid.append(GridSlot(
            position=slot.position,
            driver=driver.label if driver else f"#{slot.driver_number}",
            team=driver.team_name if driver else None,
            driver_number=slot.driver_number,
            qualifying_time=format_lap_time(slot.lap_duration),
        ))
    grid.sort(key=lambda g: g.position)
    return GridSummary(count=len(grid), grid=grid)
