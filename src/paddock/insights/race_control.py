"""Race control feed: driver attribution, lap windows and keyword filters."""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from datetime import datetime

from paddock.api_logging import log_service_call
from paddock.context import RequestContext
from paddock.insights.common import LapWindow, lap_window, optional_driver
from paddock.insights.registry import INSIGHTS
from paddock.insights.request import InsightRequest
from paddock.openf1.models import Driver, RaceControl
from paddock.resolution.dates import sort_key

# Undirected messages that concern every car on track.
GLOBAL_KEYWORDS = (
    "safety car",
    "virtual safety car",
    "red flag",
    "chequered flag",
    "drs enabled",
    "drs disabled",
    "green light",
    "track clear",
)
GLOBAL_CATEGORIES = frozenset({"safetycar", "virtualsafetycar", "redflag", "drs"})
GLOBAL_FLAGS = frozenset({"green", "chequered", "red", "yellow"})

# Order matters: the longer compound must be rewritten first.
_RESPACED = (
    ("virtualsafetycar", "virtual safety car"),
    ("safetycar", "safety car"),
)


@dataclass(frozen=True)
class RaceControlEntry:
    time: datetime | None
    lap: int | None
    category: str | None
    flag: str | None
    message: str | None
    driver_number: int | None


@dataclass(frozen=True)
class RaceControlSummary:
    status_note: str
    count: int
    filter_applied: str
    messages: list[RaceControlEntry]
    data_type: str = "Race Control Summary"


def is_global_event(msg: RaceControl) -> bool:
    """Undirected message that applies to the whole field (safety car, red flag, DRS...)."""
    if not msg.is_undirected:
        return False
    text = (msg.message or "").lower()
    if any(keyword in text for keyword in GLOBAL_KEYWORDS):
        return True
    category = (msg.category or "").lower()
    if category in GLOBAL_CATEGORIES:
        return True
    return category == "flag" and (msg.flag or "").lower() in GLOBAL_FLAGS


def concerns_driver(msg: RaceControl, driver: Driver) -> bool:
    """Strict attribution: the car itself, ``car <n>``, ``(<acronym>)`` or the surname."""
    if msg.driver_number is not None and msg.driver_number == driver.driver_number:
        return True
    text = (msg.message or "").lower()
    if driver.driver_number is not None and re.search(rf"\bcar {driver.driver_number}\b", text):
        return True
    if driver.name_acronym and f"({driver.name_acronym.lower()})" in text:
        return True
    if driver.last_name and driver.last_name.lower() in text:
        return True
    return is_global_event(msg)


def keyword_forms(keyword: str) -> tuple[str, str]:
    """The keyword as typed and with run-together race-control terms spaced out."""
    raw = keyword.strip().lower()
    spaced = raw
    for compact, spelled in _RESPACED:
        spaced = spaced.replace(compact, spelled)
    return raw, spaced


def matches_keyword(msg: RaceControl, forms: tuple[str, ...]) -> bool:
    corpus = " ".join(part or "" for part in (msg.category, msg.flag, msg.message)).lower()
    return any(form in corpus for form in forms)


def in_lap(msg: RaceControl, window: LapWindow) -> bool:
    return msg.lap_number == window.lap_number or window.contains(msg.date)


def _describe_filters(driver: str | None, lap_number: int | None, keyword: str | None) -> str:
    return f"Driver: {driver or 'All'}, Lap: {lap_number or 'All'}, Type: {keyword or 'All'}"


async def summarize_race_control(
    ctx: RequestContext,
    session_key: int,
    driver_token: str | None = None,
    lap_number: int | None = None,
    keyword: str | None = None,
) -> RaceControlSummary:
    """Race control messages for a session, optionally narrowed.

    With a driver, only messages attributable to that car survive, plus
    undirected global events. With a lap, messages tagged with that lap or
    timestamped inside the reference driver's lap survive; if the reference
    driver has no such lap nothing does. A keyword is matched against
    category, flag and message text.
    """
    messages, driver = await asyncio.gather(
        ctx.client.race_control(session_key=session_key),
        optional_driver(ctx, session_key, driver_token),
    )

    selected = list(messages)
    if driver is not None:
        selected = [m for m in selected if concerns_driver(m, driver)]

    if lap_number:
        window = await lap_window(ctx, session_key, lap_number, driver)
        selected = [m for m in selected if in_lap(m, window)] if window else []

    if keyword:
        forms = keyword_forms(keyword)
        selected = [m for m in selected if matches_keyword(m, forms)]

    selected.sort(key=lambda m: sort_key(m.date))
    entries = [
        RaceControlEntry(
            time=m.date,
            lap=m.lap_number,
            category=m.category,
            flag=m.flag,
            message=m.message,
            driver_number=m.driver_number,
        )
        for m in selected
    ]
    note = f"Found {len(entries)} event(s)." if entries else "No events found."
    return RaceControlSummary(
        status_note=note,
        count=len(entries),
        filter_applied=_describe_filters(driver_token, lap_number, keyword),
        messages=entries,
    )


@INSIGHTS.register("race_control_summary")
@log_service_call
async def race_control_summary(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> RaceControlSummary:
    return await summarize_race_control(
        ctx, session_key, request.driver_token, request.lap_number, request.filter,
    )


@INSIGHTS.register("flag_summary")
@log_service_call
async def flag_summary(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> RaceControlSummary:
    """Race control summary restricted to flag messages."""
    return await summarize_race_control(
        ctx, session_key, request.driver_token, request.lap_number, "flag",
    )
