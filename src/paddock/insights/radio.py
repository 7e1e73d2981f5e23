"""Team radio messages."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime

from paddock.api_logging import log_service_call
from paddock.context import RequestContext
from paddock.errors import DataNotFoundError
from paddock.insights.common import label_for, optional_driver
from paddock.insights.registry import INSIGHTS
from paddock.insights.request import InsightRequest
from paddock.resolution.dates import sort_key


@dataclass(frozen=True)
class RadioMessage:
    date: datetime | None
    driver: str
    driver_number: int | None
    recording_url: str | None


@dataclass(frozen=True)
class TeamRadioSummary:
    driver_filter: str
    count: int
    messages: list[RadioMessage]
    data_type: str = "Team Radio Summary"


@INSIGHTS.register("team_radio_summary")
@log_service_call
async def team_radio_summary(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> TeamRadioSummary:
    driver, labels = await asyncio.gather(
        optional_driver(ctx, session_key, request.driver_token),
        ctx.drivers.labels(session_key),
    )
    radios = await ctx.client.team_radio(
        session_key=session_key,
        driver_number=driver.driver_number if driver else None,
    )
    if not radios:
        raise DataNotFoundError(f"No team radio messages for session {session_key}")
    messages = [
        RadioMessage(
            date=r.date,
            driver=label_for(labels, r.driver_number),
            driver_number=r.driver_number,
            recording_url=r.recording_url,
        )
        for r in sorted(radios, key=lambda r: sort_key(r.date))
    ]
    return TeamRadioSummary(
        driver_filter=request.driver_token or "All",
        count=len(messages),
        messages=messages,
    )
