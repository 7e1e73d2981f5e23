"""On-track overtakes (authenticated OpenF1 tier)."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime

from paddock.api_logging import log_service_call
from paddock.context import RequestContext
from paddock.errors import AuthenticationRequiredError, DataNotFoundError
from paddock.insights.common import label_for, lap_window, optional_driver
from paddock.insights.registry import INSIGHTS
from paddock.insights.request import InsightRequest


@dataclass(frozen=True)
class OvertakeEntry:
    overtaker: str
    overtaken: str
    position: int | None
    time: datetime | None


@dataclass(frozen=True)
class OvertakeAnalysis:
    count: int
    overtakes: list[OvertakeEntry]
    data_type: str = "Overtake Analysis"


@INSIGHTS.register("overtake_analysis")
@log_service_call
async def overtake_analysis(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> OvertakeAnalysis:
    """Overtakes in a session, optionally for one driver and/or inside one lap.

    The lap window is the given driver's lap, else the session leader's.
    """
    if not ctx.authenticated:
        raise AuthenticationRequiredError("Overtake data requires an authenticated OpenF1 account")

    overtakes, labels, driver = await asyncio.gather(
        ctx.client.overtakes(session_key=session_key),
        ctx.drivers.labels(session_key),
        optional_driver(ctx, session_key, request.driver_token),
    )
    if not overtakes:
        raise DataNotFoundError(f"No overtake data for session {session_key}")

    selected = list(overtakes)
    if driver is not None:
        involved = driver.driver_number
        selected = [
            o for o in selected
            if involved in (o.overtaking_driver_number, o.overtaken_driver_number)
        ]
    if request.lap_number:
        window = await lap_window(ctx, session_key, request.lap_number, driver)
        selected = [o for o in selected if window.contains(o.date)] if window else []

    entries = [
        OvertakeEntry(
            overtaker=label_for(labels, o.overtaking_driver_number),
            overtaken=label_for(labels, o.overtaken_driver_number),
            position=o.position,
            time=o.date,
        )
        for o in selected
    ]
    return OvertakeAnalysis(count=len(entries), overtakes=entries)
