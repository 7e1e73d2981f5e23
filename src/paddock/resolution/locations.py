"""Free-text venue names -> OpenF1 ``country_name``, cached per season."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from paddock.openf1 import AsyncOpenF1Client, OpenF1Error
from paddock.openf1.models import Meeting
from paddock.resolution.normalize import first_token, normalize_location

logger = logging.getLogger(__name__)

ENRICHMENT_TIMEOUT = 3.0
LOOKBACK_YEARS = 3

# Keys are already in normalize_location() form.
DEFAULT_LOCATION_ALIASES: dict[str, str] = {
    # Bahrain
    "BAHRAIN": "Bahrain", "SAKHIR": "Bahrain",
    # Saudi Arabia
    "SAUDI": "Saudi Arabia", "SAUDI ARABIA": "Saudi Arabia", "JEDDAH": "Saudi Arabia",
    # Australia
    "AUSTRALIA": "Australia", "MELBOURNE": "Australia", "ALBERT PARK": "Australia",
    # Japan
    "JAPAN": "Japan", "SUZUKA": "Japan",
    # China
    "CHINA": "China", "SHANGHAI": "China",
    # United States
    "USA": "United States", "US": "United States", "UNITED STATES": "United States",
    "COTA": "United States", "AUSTIN": "United States", "MIAMI": "United States",
    "LAS VEGAS": "United States", "LASVEGAS": "United States", "VEGAS": "United States",
    # Italy
    "ITALY": "Italy", "MONZA": "Italy", "IMOLA": "Italy", "EMILIA ROMAGNA": "Italy",
    # Monaco
    "MONACO": "Monaco", "MONTE CARLO": "Monaco",
    # Canada
    "CANADA": "Canada", "MONTREAL": "Canada", "GILLES VILLENEUVE": "Canada",
    # Spain
    "SPAIN": "Spain", "BARCELONA": "Spain", "CATALUNYA": "Spain", "MADRID": "Spain",
    # Austria
    "AUSTRIA": "Austria", "SPIELBERG": "Austria",
    "RED BULL RING": "Austria", "REDBULLRING": "Austria",
    # Great Britain
    "UK": "United Kingdom", "BRITAIN": "United Kingdom", "BRITISH": "United Kingdom",
    "GREAT BRITAIN": "United Kingdom", "UNITED KINGDOM": "United Kingdom",
    "SILVERSTONE": "United Kingdom",
    # Hungary
    "HUNGARY": "Hungary", "HUNGARORING": "Hungary", "BUDAPEST": "Hungary",
    # Belgium
    "BELGIUM": "Belgium", "SPA": "Belgium", "SPA FRANCORCHAMPS": "Belgium",
    # Netherlands
    "NETHERLANDS": "Netherlands", "DUTCH": "Netherlands", "ZANDVOORT": "Netherlands",
    # Azerbaijan
    "AZERBAIJAN": "Azerbaijan", "BAKU": "Azerbaijan",
    # Singapore
    "SINGAPORE": "Singapore", "MARINA BAY": "Singapore", "MARINABAY": "Singapore",
    # Mexico
    "MEXICO": "Mexico", "MEXICO CITY": "Mexico", "MEXICOCITY": "Mexico",
    "HERMANOS RODRIGUEZ": "Mexico",
    # Brazil
    "BRAZIL": "Brazil", "INTERLAGOS": "Brazil", "SAO PAULO": "Brazil", "SAOPAULO": "Brazil",
    # Qatar
    "QATAR": "Qatar", "LUSAIL": "Qatar", "LOSAIL": "Qatar",
    # Abu Dhabi
    "ABU DHABI": "United Arab Emirates", "ABUDHABI": "United Arab Emirates",
    "YAS MARINA": "United Arab Emirates", "YASMARINA": "United Arab Emirates",
    "UAE": "United Arab Emirates", "UNITED ARAB EMIRATES": "United Arab Emirates",
}


def register_meetings(aliases: dict[str, str], meetings: Iterable[Meeting]) -> None:
    """Map each meeting's place names, plus the first word of its name, to its country."""
    for meeting in meetings:
        country = meeting.country_name
        if not country:
            continue
        names = meeting.place_names
        if meeting.meeting_name:
            names.append(first_token(meeting.meeting_name))
        for name in names:
            key = normalize_location(name)
            if key:
                aliases[key] = country


def lookup_alias(aliases: dict[str, str], fuzzy: str | None) -> str | None:
    """Exact key lookup, then a retry with only the first token."""
    key = normalize_location(fuzzy)
    if not key:
        return None
    return aliases.get(key) or aliases.get(first_token(key))


class LocationMapCache:
    """Per-season alias maps for the life of the process.

    Maps are populated on first use and never evicted. Concurrent misses for
    the same year may each build a map; the last write wins and the maps are
    equivalent.
    """

    def __init__(self) -> None:
        self._maps: dict[int, dict[str, str]] = {}

    def get(self, year: int) -> dict[str, str] | None:
        return self._maps.get(year)

    def store(self, year: int, aliases: dict[str, str]) -> None:
        self._maps[year] = aliases

    @property
    def years(self) -> list[int]:
        return sorted(self._maps)


class LocationResolver:
    """Resolve fuzzy venue names against the season's meeting list."""

    def __init__(
        self,
        client: AsyncOpenF1Client,
        cache: LocationMapCache,
        enrichment_timeout: float = ENRICHMENT_TIMEOUT,
    ) -> None:
        self._client = client
        self._cache = cache
        self._enrichment_timeout = enrichment_timeout

    async def location_map(self, year: int) -> dict[str, str]:
        """Return the alias map for ``year``, building it on first use.

        The map starts from DEFAULT_LOCATION_ALIASES and is enriched from the
        season's meetings. If that fetch fails the defaults alone are cached.
        """
        cached = self._cache.get(year)
        if cached is not None:
            return cached

        aliases = dict(DEFAULT_LOCATION_ALIASES)
        try:
            meetings = await self._client.meetings(year=year, timeout=self._enrichment_timeout)
        except OpenF1Error as exc:
            logger.warning("Meeting list for %s unavailable, using default aliases: %s", year, exc)
        else:
            register_meetings(aliases, meetings)
        self._cache.store(year, aliases)
        return aliases

    async def resolve(self, year: int, fuzzy: str | None) -> str | None:
        """Return the OpenF1 country name for ``fuzzy`` in ``year``, or None."""
        if not normalize_location(fuzzy):
            return None
        return lookup_alias(await self.location_map(year), fuzzy)

    async def resolve_recent(self, fuzzy: str | None, current_year: int | None = None) -> str | None:
        """Scan this season and the previous three, newest first."""
        if not normalize_location(fuzzy):
            return None
        year = current_year or datetime.now(timezone.utc).year
        for candidate in range(year, year - LOOKBACK_YEARS - 1, -1):
            country = lookup_alias(await self.location_map(candidate), fuzzy)
            if country:
                return country
        return None
