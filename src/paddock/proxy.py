"""Raw OpenF1 passthrough with friendly parameter names and local post-filters.

``GET /raw_data_proxy?resource=meetings&gp=vegas&month=nov`` becomes
``GET /v1/meetings?...`` with the venue resolved to its country, then the rows
are filtered, sorted newest first and capped.
"""

from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import unquote_plus

from paddock.context import RequestContext
from paddock.errors import InvalidRequestError
from paddock.resolution.dates import filter_by_month, parse_month, sort_key

logger = logging.getLogger(__name__)

PROXY_RESOURCES = frozenset({
    "car_data",
    "drivers",
    "intervals",
    "laps",
    "location",
    "meetings",
    "overtakes",
    "pit",
    "position",
    "race_control",
    "session_result",
    "sessions",
    "starting_grid",
    "stints",
    "team_radio",
    "weather",
})

PARAM_ALIASES = {
    "circuit_id": "circuit_key",
    "meeting_id": "meeting_key",
    "session_id": "session_key",
    "driver_id": "driver_number",
}

LOCATION_PARAMS = ("country_name", "location", "gp")
DRIVER_NAME_PARAMS = ("driver_full_name", "driver", "driver_name")

# Rows returned when the caller gave nothing that narrows the result.
DEFAULT_ROW_CAP = 20

_PAIR_RE = re.compile(r"^([^<>=]+)(>=|<=|>|<|=)(.*)$", re.DOTALL)


def split_query(raw: str) -> list[tuple[str, str]]:
    """Split a raw query string, keeping comparison operators on the key.

    ``lap_number>=5&session_key=9558`` gives
    ``[("lap_number>=", "5"), ("session_key", "9558")]``; a generic parser
    would read the first pair as ``lap_number>`` = ``5``.
    """
    pairs = []
    for part in raw.split("&"):
        match = _PAIR_RE.match(unquote_plus(part))
        if match is None:
            continue
        key, op, value = match.groups()
        pairs.append((key + ("" if op == "=" else op), value))
    return pairs


def collect_params(raw_query: str) -> dict[str, str]:
    """Flatten the incoming query, expanding ``extra_query`` in place."""
    params: dict[str, str] = {}
    for key, value in split_query(raw_query):
        if key == "resource":
            continue
        if key == "extra_query":
            params.update(split_query(value))
            continue
        params[key] = value
    return params


def pop_month(params: dict[str, str]) -> int | None:
    """Remove and parse the month filter (``month``, or a ``date`` that is not ISO)."""
    raw = params.pop("month", None)
    date = params.get("date")
    if date is not None and "-" not in date:
        params.pop("date")
        raw = raw or date
    if not raw:
        return None
    month = parse_month(raw)
    if month is None:
        logger.warning("Ignoring unrecognised month filter %r", raw)
    return month


def apply_aliases(params: dict[str, str]) -> None:
    for alias, canonical in PARAM_ALIASES.items():
        if alias in params:
            value = params.pop(alias)
            params.setdefault(canonical, value)


def _contains(value: Any, needle: str) -> bool:
    return isinstance(value, str) and needle in value.lower()


def filter_rows(
    rows: list[dict[str, Any]],
    *,
    country: str | None = None,
    team: str | None = None,
    month: int | None = None,
) -> list[dict[str, Any]]:
    if country:
        needle = country.lower()
        rows = [
            r for r in rows
            if any(_contains(r.get(f), needle) for f in ("country_name", "location", "circuit_short_name"))
        ]
    if team:
        needle = team.lower()
        rows = [r for r in rows if _contains(r.get("team_name"), needle)]
    if month is not None:
        rows = filter_by_month(rows, month, lambda r: r.get("date_start"))
    return rows


async def proxy_request(
    ctx: RequestContext, resource: str | None, raw_query: str,
) -> Any:
    """Fetch ``resource`` from OpenF1 after translating ``query``.

    Non-list payloads are returned untouched; list payloads go through the
    local country/team/month filters, a newest-first sort when rows carry
    ``date_start``, and a cap of 20 rows when nothing narrowed the query.
    """
    if not resource:
        raise InvalidRequestError("Missing resource")
    if resource not in PROXY_RESOURCES:
        raise InvalidRequestError(
            f"Unknown resource {resource!r}; expected one of {', '.join(sorted(PROXY_RESOURCES))}"
        )

    params = collect_params(raw_query)
    month = pop_month(params)
    apply_aliases(params)

    fuzzy = next((params[k] for k in LOCATION_PARAMS if params.get(k)), None)
    if fuzzy:
        country = await ctx.locations.resolve_recent(fuzzy)
        if country:
            params["country_name"] = country
            params.pop("location", None)
            params.pop("gp", None)

    driver_name = next((params[k] for k in DRIVER_NAME_PARAMS if params.get(k)), None)
    if driver_name and params.get("session_key"):
        if "driver_number" not in params:
            number = await ctx.drivers.resolve(params["session_key"], driver_name)
            if number is None:
                logger.warning("Could not resolve driver %r in session %s", driver_name, params["session_key"])
            else:
                params["driver_number"] = str(number)
        for key in DRIVER_NAME_PARAMS:
            params.pop(key, None)

    country_filter = params.pop("country_name", None) if resource == "meetings" else None
    team_filter = params.pop("team_name", None) if resource == "drivers" else None

    data = await ctx.client.fetch_raw(resource, list(params.items()))
    if not isinstance(data, list):
        return data

    rows = filter_rows(data, country=country_filter, team=team_filter, month=month)
    if rows and isinstance(rows[0], dict) and rows[0].get("date_start"):
        rows.sort(key=lambda r: sort_key(r.get("date_start")), reverse=True)
    narrowed = country_filter or team_filter or month is not None or "driver_number" in params
    if not narrowed:
        rows = rows[:DEFAULT_ROW_CAP]
    return rows
