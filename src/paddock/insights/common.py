"""Helpers shared by the insight handlers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from paddock.context import RequestContext
from paddock.errors import DataNotFoundError, InvalidRequestError, ResolutionError
from paddock.openf1.models import Driver, Lap
from paddock.resolution.dates import as_utc, sort_key

# Stand-in lap time (seconds) for laps without a recorded duration.
MISSING_LAP_SECONDS = 100.0


@dataclass(frozen=True)
class LapWindow:
    lap_number: int
    start: datetime
    end: datetime | None

    def contains(self, moment: datetime | None) -> bool:
        """True if ``moment`` falls in ``[start, end]``; open-ended windows contain nothing."""
        moment = as_utc(moment)
        if moment is None or self.end is None:
            return False
        return self.start <= moment <= self.end


def valid_laps(laps: Iterable[Lap]) -> list[Lap]:
    """Return laps with a recorded lap_duration."""
    return [lap for lap in laps if lap.lap_duration]


def lap_order(laps: Iterable[Lap], lap_number: int) -> list[int]:
    """Car numbers ordered by the moment they completed ``lap_number``."""
    finished = [
        lap for lap in laps
        if lap.lap_number == lap_number and lap.driver_number is not None and lap.date_end
    ]
    finished.sort(key=lambda lap: sort_key(lap.date_end))
    return [lap.driver_number for lap in finished]


def require_lap_number(lap_number: int | None, *, minimum: int = 1) -> int:
    if lap_number is None:
        raise InvalidRequestError("lap_number is required for this insight")
    if lap_number < minimum:
        raise InvalidRequestError(f"lap_number must be at least {minimum}")
    return lap_number


async def require_driver(ctx: RequestContext, session_key: int, token: str | None) -> Driver:
    """Roster entry for ``token``; an unknown driver is a resolution failure."""
    driver = await ctx.drivers.lookup(session_key, token)
    if driver is None or driver.driver_number is None:
        raise ResolutionError(f"Driver {token!r} not found in session {session_key}")
    return driver


async def optional_driver(
    ctx: RequestContext, session_key: int, token: str | None,
) -> Driver | None:
    if token is None:
        return None
    return await require_driver(ctx, session_key, token)


def session_leader(roster: list[Driver]) -> Driver:
    """Roster entry in position 1, else the first roster entry."""
    if not roster:
        raise DataNotFoundError("No drivers listed for this session")
    return next((d for d in roster if d.position == 1), roster[0])


async def lap_window(
    ctx: RequestContext,
    session_key: int,
    lap_number: int,
    driver: Driver | None = None,
) -> LapWindow | None:
    """Time span of ``lap_number`` for ``driver`` (default: the session leader).

    Returns None when the reference driver has no such lap.
    """
    if driver is None:
        driver = session_leader(await ctx.drivers.roster(session_key))
    laps = await ctx.client.laps(
        session_key=session_key,
        driver_number=driver.driver_number,
        lap_number=lap_number,
    )
    if not laps or laps[0].date_start is None:
        return None
    lap = laps[0]
    return LapWindow(lap_number=lap_number, start=as_utc(lap.date_start), end=as_utc(lap.date_end))


def label_for(labels: dict[int, str], driver_number: int | None) -> str:
    if driver_number is None:
        return "Unknown"
    return labels.get(driver_number, f"#{driver_number}")
