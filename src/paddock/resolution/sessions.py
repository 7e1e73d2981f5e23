"""Resolve (year, location, session type, month) to a single OpenF1 session."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from paddock.api_logging import log_service_call
from paddock.errors import ResolutionError
from paddock.openf1 import AsyncOpenF1Client
from paddock.openf1.models import Session
from paddock.resolution.dates import filter_by_month, parse_month, sort_key
from paddock.resolution.locations import LocationResolver
from paddock.resolution.normalize import normalize_location

logger = logging.getLogger(__name__)

DEFAULT_SESSION_NAME = "Race"
CURRENT_WINDOW_DAYS = 5

SESSION_TYPE_NAMES: dict[str, str] = {
    "R": "Race",
    "RACE": "Race",
    "Q": "Qualifying",
    "QUALI": "Qualifying",
    "QUALIFYING": "Qualifying",
    "FP1": "Practice 1",
    "FP2": "Practice 2",
    "FP3": "Practice 3",
    "PRACTICE 1": "Practice 1",
    "PRACTICE 2": "Practice 2",
    "PRACTICE 3": "Practice 3",
    "S": "Sprint",
    "SPRINT": "Sprint",
    "SQ": "Sprint Qualifying",
    "SPRINT QUALIFYING": "Sprint Qualifying",
    "SPRINT SHOOTOUT": "Sprint Shootout",
}

# Resolution tiers, strictest first. ``current`` is the answer when no venue was given.
TIER_EXACT = "exact"
TIER_CURRENT = "current"
TIER_GLOBAL = "global"
TIER_LATEST = "latest"


def session_type_label(code: str | None) -> str:
    """Map a short code (``R``, ``FP2``) or a canonical name to OpenF1's ``session_name``."""
    if not code:
        return DEFAULT_SESSION_NAME
    return SESSION_TYPE_NAMES.get(" ".join(code.upper().split()), DEFAULT_SESSION_NAME)


def is_recency_location(location: str | None) -> bool:
    """True when no venue was given and the newest matching session is wanted."""
    key = normalize_location(location)
    return not key or key == "CURRENT"


def select_latest(sessions: list[Session]) -> Session | None:
    """Newest session by ``date_start``; among equal timestamps the last one wins."""
    if not sessions:
        return None
    return sorted(sessions, key=lambda s: sort_key(s.date_start))[-1]


def select_current(
    sessions: list[Session],
    target_name: str,
    window_days: int = CURRENT_WINDOW_DAYS,
) -> Session | None:
    """Prefer the newest ``target_name`` session if it belongs to the newest weekend.

    A named session further than ``window_days`` before the absolute newest
    session is stale; the newest session is returned instead.
    """
    if not sessions:
        return None
    ordered = sorted(sessions, key=lambda s: sort_key(s.date_start), reverse=True)
    newest = ordered[0]
    wanted = target_name.lower()
    match = next((s for s in ordered if (s.session_name or "").lower() == wanted), None)
    if match is None:
        return newest
    if sort_key(newest.date_start) - sort_key(match.date_start) <= timedelta(days=window_days):
        return match
    return newest


@dataclass(frozen=True)
class ResolvedSession:
    session: Session
    country_name: str | None
    session_name: str
    tier: str

    @property
    def session_key(self) -> int:
        return self.session.session_key

    @property
    def is_fallback(self) -> bool:
        return self.tier not in (TIER_EXACT, TIER_CURRENT)


class SessionResolver:
    """Turn loose user input into one OpenF1 session.

    The strict query is ``sessions(year, country_name, session_name)``. When
    it yields nothing the resolver widens to the whole season and then to the
    ``latest`` session; the tier that produced the answer is reported on the
    result. Without a venue the whole season is searched for the current
    weekend instead (see :func:`select_current`).
    """

    def __init__(self, client: AsyncOpenF1Client, locations: LocationResolver) -> None:
        self._client = client
        self._locations = locations

    async def resolve_country(self, year: int, location: str | None) -> str | None:
        """Canonical country for ``location``; unknown names pass through as typed."""
        if is_recency_location(location):
            return None
        country = await self._locations.resolve(year, location)
        if country is None:
            country = await self._locations.resolve_recent(location)
        if country is None:
            logger.info("Location %r not in alias map, querying it literally", location)
            return location.strip()
        return country

    @log_service_call
    async def resolve(
        self,
        year: int,
        location: str | None,
        session_type: str | None = None,
        month: str | int | None = None,
    ) -> ResolvedSession:
        session_name = session_type_label(session_type)
        month_number = _month_filter(month)
        country = await self.resolve_country(year, location)
        if country is None:
            return await self._resolve_current(year, session_name, month, month_number)

        candidates = await self._client.sessions(
            year=year, country_name=country, session_name=session_name,
        )
        if candidates:
            if month_number is not None:
                narrowed = filter_by_month(candidates, month_number, lambda s: s.date_start)
                if not narrowed:
                    raise ResolutionError(
                        f"No {session_name} in {country} "
                        f"for month {month} of {year}"
                    )
                candidates = narrowed
            chosen = select_latest(candidates)
            if chosen is not None and chosen.session_key is not None:
                return ResolvedSession(chosen, country, session_name, TIER_EXACT)

        logger.warning(
            "No exact session for %s %s %s, widening to the whole season",
            year, country, session_name,
        )
        season = await self._client.sessions(year=year)
        if month_number is not None:
            season = filter_by_month(season, month_number, lambda s: s.date_start)
        chosen = select_current(season, session_name)
        if chosen is not None and chosen.session_key is not None:
            return ResolvedSession(chosen, chosen.country_name, session_name, TIER_GLOBAL)

        logger.warning("Season %s has no sessions, falling back to the latest session", year)
        latest = await self._latest(session_name)
        if latest is not None:
            return latest
        raise ResolutionError(f"No {session_name} session found for {country} in {year}")

    async def _resolve_current(
        self, year: int, session_name: str, month: str | int | None, month_number: int | None,
    ) -> ResolvedSession:
        """No venue given: the newest session of the season, preferring
        ``session_name`` when it belongs to the newest weekend."""
        season = await self._client.sessions(year=year)
        if season and month_number is not None:
            narrowed = filter_by_month(season, month_number, lambda s: s.date_start)
            if not narrowed:
                raise ResolutionError(f"No sessions in month {month} of {year}")
            season = narrowed
        chosen = select_current(season, session_name)
        if chosen is not None and chosen.session_key is not None:
            return ResolvedSession(chosen, chosen.country_name, session_name, TIER_CURRENT)

        logger.warning("Season %s has no sessions, falling back to the latest session", year)
        latest = await self._latest(session_name)
        if latest is not None:
            return latest
        raise ResolutionError(f"No sessions found for {year}")

    async def _latest(self, session_name: str) -> ResolvedSession | None:
        chosen = select_current(await self._client.sessions(session_key="latest"), session_name)
        if chosen is None or chosen.session_key is None:
            return None
        return ResolvedSession(chosen, chosen.country_name, session_name, TIER_LATEST)


def _month_filter(month: str | int | None) -> int | None:
    if month is None or not str(month).strip():
        return None
    number = parse_month(month)
    if number is None:
        logger.warning("Ignoring unrecognised month %r", month)
    return number
