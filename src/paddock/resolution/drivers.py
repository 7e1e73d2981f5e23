"""Driver lookup by acronym, car number or name within one session."""

from __future__ import annotations

import asyncio
from typing import Callable

from paddock.openf1 import AsyncOpenF1Client
from paddock.openf1.models import Driver


def _acronym_equals(driver: Driver, token: str) -> bool:
    return (driver.name_acronym or "").lower() == token


def _number_equals(driver: Driver, token: str) -> bool:
    return driver.driver_number is not None and str(driver.driver_number) == token


def _surname_contains(driver: Driver, token: str) -> bool:
    return token in (driver.last_name or "").lower()


def _full_name_contains(driver: Driver, token: str) -> bool:
    return token in (driver.full_name or "").lower()


# Ranked: an earlier predicate matching anyone beats a later one matching
# someone earlier in the roster.
MATCH_PREDICATES: tuple[Callable[[Driver, str], bool], ...] = (
    _acronym_equals,
    _number_equals,
    _surname_contains,
    _full_name_contains,
)


def match_driver(roster: list[Driver], token: str | int | None) -> Driver | None:
    """Find the driver ``token`` refers to, or None.

    "ver", "1", "verstappen" and "Max Verstappen" all pick car 1 from a 2024
    roster.
    """
    if token is None:
        return None
    needle = str(token).strip().lower()
    if not needle:
        return None
    for predicate in MATCH_PREDICATES:
        for driver in roster:
            if predicate(driver, needle):
                return driver
    return None


class DriverResolver:
    """Session roster lookups; the roster is fetched once per resolver.

    Concurrent callers share the in-flight fetch.
    """

    def __init__(self, client: AsyncOpenF1Client) -> None:
        self._client = client
        self._rosters: dict[int | str, asyncio.Future[list[Driver]]] = {}

    async def roster(self, session_key: int | str) -> list[Driver]:
        pending = self._rosters.get(session_key)
        if pending is None:
            pending = asyncio.ensure_future(self._client.drivers(session_key=session_key))
            self._rosters[session_key] = pending
        return await pending

    async def lookup(self, session_key: int | str, token: str | int | None) -> Driver | None:
        return match_driver(await self.roster(session_key), token)

    async def resolve(self, session_key: int | str, token: str | int | None) -> int | None:
        """Car number for ``token`` in the session, or None if nobody matches."""
        driver = await self.lookup(session_key, token)
        return driver.driver_number if driver else None

    async def labels(self, session_key: int | str) -> dict[int, str]:
        """Car number -> short display label for everyone on the roster."""
        return {
            d.driver_number: d.label
            for d in await self.roster(session_key)
            if d.driver_number is not None
        }
