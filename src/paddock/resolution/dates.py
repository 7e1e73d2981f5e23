"""Month filters and timezone helpers for OpenF1 timestamps."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, TypeVar

T = TypeVar("T")

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

MONTHS: dict[str, int] = {}
for _number, _name in enumerate(_MONTH_NAMES, start=1):
    MONTHS[_name] = _number
    MONTHS[_name[:3]] = _number
    MONTHS[str(_number)] = _number
    MONTHS[f"{_number:02d}"] = _number


def parse_month(value: str | int | None) -> int | None:
    """Return 1-12 for a month name, abbreviation or 1-/2-digit number."""
    if value is None:
        return None
    return MONTHS.get(str(value).strip().lower())


def as_utc(value: datetime | str | None) -> datetime | None:
    """Coerce an ISO string or datetime to an aware UTC datetime.

    OpenF1 timestamps are UTC; naive values are taken as UTC.
    """
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def sort_key(value: datetime | str | None) -> datetime:
    """Sort key that puts missing timestamps first."""
    return as_utc(value) or EPOCH


def filter_by_month(
    items: list[T],
    month: int,
    date_of: Callable[[T], Any],
) -> list[T]:
    """Keep items whose start date falls in calendar ``month`` (UTC)."""
    kept: list[T] = []
    for item in items:
        start = as_utc(date_of(item))
        if start is not None and start.month == month:
            kept.append(item)
    return kept
