"""Position changes, lap leaderboards and the current running order."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from paddock.api_logging import log_service_call
from paddock.context import RequestContext
from paddock.errors import DataNotFoundError
from paddock.formatters import format_gap, movement_status
from paddock.insights.common import (
    label_for,
    lap_order,
    optional_driver,
    require_driver,
    require_lap_number,
)
from paddock.insights.registry import INSIGHTS
from paddock.insights.request import InsightRequest
from paddock.insights.results import last_value, live_positions
from paddock.openf1 import OpenF1Error
from paddock.openf1.models import Lap, SessionResult, StartingGrid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LapPositionChange:
    driver: str
    driver_number: int
    lap_start_pos: int
    lap_end_pos: int
    positions_gained: int
    status: str


@dataclass(frozen=True)
class LapPositionChanges:
    data_type: str
    total_drivers_tracked: int
    changes: list[LapPositionChange]


@dataclass(frozen=True)
class RacePositionChange:
    driver: str
    driver_number: int | None
    team: str | None
    start: int
    finish: int
    positions_gained: int
    status: str


@dataclass(frozen=True)
class RacePositionChanges:
    total_drivers: int
    all_changes: list[RacePositionChange]
    data_type: str = "Full Race Position Changes"


@dataclass(frozen=True)
class LapLeaderboard:
    data_type: str
    leader: str
    full_order: list[int]
    drivers: list[str]


@dataclass(frozen=True)
class HistoryPoint:
    lap: int
    position: int


@dataclass(frozen=True)
class DriverHistory:
    driver: str
    driver_number: int
    history: list[HistoryPoint]
    type: str = "Driver History"


@dataclass(frozen=True)
class RunningOrderEntry:
    position: int | None
    driver: str
    gap: str | None


@dataclass(frozen=True)
class RunningOrder:
    session_key: int
    leader: str
    top_10: list[RunningOrderEntry]
    type: str = "Current Leaderboard"


def positions_at(laps: list[Lap], lap_number: int) -> dict[int, int]:
    """Car number -> 1-based rank by completion time of ``lap_number``."""
    return {num: rank for rank, num in enumerate(lap_order(laps, lap_number), start=1)}


def lap_position_changes(
    laps: list[Lap], lap_number: int, labels: dict[int, str],
) -> list[LapPositionChange]:
    """Gain per driver between the end of lap N-1 and the end of lap N.

    Only drivers ranked in both snapshots are reported; best gain first.
    """
    before = positions_at(laps, lap_number - 1)
    after = positions_at(laps, lap_number)
    changes = []
    for num, end_pos in after.items():
        start_pos = before.get(num)
        if start_pos is None:
            continue
        gained = start_pos - end_pos
        changes.append(LapPositionChange(
            driver=label_for(labels, num),
            driver_number=num,
            lap_start_pos=start_pos,
            lap_end_pos=end_pos,
            positions_gained=gained,
            status=movement_status(gained),
        ))
    changes.sort(key=lambda c: c.positions_gained, reverse=True)
    return changes


def race_position_changes(
    results: list[SessionResult], grid: list[StartingGrid], labels: dict[int, str],
) -> list[RacePositionChange]:
    """Grid slot minus classified position, grid taken from the result when present."""
    grid_slots = {g.driver_number: g.position for g in grid if g.position is not None}
    changes = []
    for result in results:
        start = result.grid_position or grid_slots.get(result.driver_number)
        if result.position is None or start is None:
            continue
        gained = start - result.position
        changes.append(RacePositionChange(
            driver=result.name_acronym or label_for(labels, result.driver_number),
            driver_number=result.driver_number,
            team=result.team_name,
            start=start,
            finish=result.position,
            positions_gained=gained,
            status=movement_status(gained),
        ))
    changes.sort(key=lambda c: c.positions_gained, reverse=True)
    return changes


async def _grid_or_empty(ctx: RequestContext, session_key: int) -> list[StartingGrid]:
    try:
        return await ctx.client.starting_grid(session_key=session_key)
    except OpenF1Error as exc:
        logger.warning("Starting grid for %s unavailable: %s", session_key, exc)
        return []


@INSIGHTS.register("position_change_summary")
@log_service_call
async def position_change_summary(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> LapPositionChanges | RacePositionChanges:
    if request.lap_number is not None:
        lap_number = require_lap_number(request.lap_number, minimum=2)
        laps, labels, driver = await asyncio.gather(
            ctx.client.laps(session_key=session_key),
            ctx.drivers.labels(session_key),
            optional_driver(ctx, session_key, request.driver_token),
        )
        changes = lap_position_changes(laps, lap_number, labels)
        if driver is not None:
            changes = [c for c in changes if c.driver_number == driver.driver_number]
        return LapPositionChanges(
            data_type=f"Lap {lap_number} Position Changes",
            total_drivers_tracked=len(changes),
            changes=changes,
        )

    results, grid, labels = await asyncio.gather(
        ctx.client.session_result(session_key=session_key),
        _grid_or_empty(ctx, session_key),
        ctx.drivers.labels(session_key),
    )
    if not results:
        raise DataNotFoundError(f"No classification for session {session_key}")
    changes = race_position_changes(results, grid, labels)
    return RacePositionChanges(total_drivers=len(changes), all_changes=changes)


@INSIGHTS.register("leaderboard_at_lap")
@log_service_call
async def leaderboard_at_lap(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> LapLeaderboard:
    lap_number = require_lap_number(request.lap_number)
    laps, roster = await asyncio.gather(
        ctx.client.laps(session_key=session_key, lap_number=lap_number),
        ctx.drivers.roster(session_key),
    )
    order = lap_order(laps, lap_number)
    if not order:
        raise DataNotFoundError(f"No timing data for lap {lap_number}")
    by_number = {d.driver_number: d for d in roster}
    leader = by_number.get(order[0])
    labels = {num: d.label for num, d in by_number.items() if num is not None}
    return LapLeaderboard(
        data_type=f"Leaderboard at Lap {lap_number}",
        leader=(leader.full_name if leader and leader.full_name else f"#{order[0]}"),
        full_order=order,
        drivers=[label_for(labels, num) for num in order],
    )


@log_service_call
async def driver_history(ctx: RequestContext, session_key: int, token: str) -> DriverHistory:
    """Lap-by-lap running position of one driver, ranked by lap completion time."""
    driver, laps = await asyncio.gather(
        require_driver(ctx, session_key, token),
        ctx.client.laps(session_key=session_key),
    )
    own_laps = sorted(
        {lap.lap_number for lap in laps if lap.driver_number == driver.driver_number and lap.lap_number}
    )
    history = []
    for lap_number in own_laps:
        rank = positions_at(laps, lap_number).get(driver.driver_number)
        if rank is not None:
            history.append(HistoryPoint(lap=lap_number, position=rank))
    return DriverHistory(driver=token, driver_number=driver.driver_number, history=history)


@log_service_call
async def running_order(ctx: RequestContext, session_key: int) -> RunningOrder:
    """Top ten from the classification, else from live position data."""
    results, labels = await asyncio.gather(
        ctx.client.session_result(session_key=session_key),
        ctx.drivers.labels(session_key),
    )
    if results:
        ordered = sorted(results, key=lambda r: r.position or 999)
        entries = [
            RunningOrderEntry(
                position=r.position,
                driver=label_for(labels, r.driver_number),
                gap=format_gap(last_value(r.gap_to_leader)),
            )
            for r in ordered[:10]
        ]
    else:
        entries = [
            RunningOrderEntry(position=p.position, driver=label_for(labels, p.driver_number), gap=None)
            for p in (await live_positions(ctx, session_key))[:10]
        ]
    if not entries:
        raise DataNotFoundError(f"No position data available yet for session {session_key}")
    return RunningOrder(session_key=session_key, leader=entries[0].driver, top_10=entries)
