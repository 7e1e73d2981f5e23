"""Query filter builder for OpenF1 API comparison operators."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

FilterValue = int | float | str | datetime | None


def format_param(value: Any) -> str:
    """Render a query value the way OpenF1 expects it.

    Datetimes become UTC ISO-8601 strings with millisecond precision and a
    trailing ``Z``; everything else is passed through ``str``.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.isoformat(timespec="milliseconds") + "Z"
    return str(value)


@dataclass(frozen=True)
class Filter:
    """Represents a comparison filter for API query parameters.

    Usage:
        # Lap time window on car telemetry
        Filter(gte=lap_start, lte=lap_end)  # produces: date>=...&date<=...

        # Everything after a point in time
        Filter(gt=cutoff)  # produces: date>...
    """

    gt: FilterValue = None
    gte: FilterValue = None
    lt: FilterValue = None
    lte: FilterValue = None

    def to_params(self, key: str) -> list[tuple[str, str]]:
        """Convert this filter to a list of (key_with_operator, value) pairs."""
        params: list[tuple[str, str]] = []
        for op, bound in ((">", self.gt), (">=", self.gte), ("<", self.lt), ("<=", self.lte)):
            if bound is not None:
                params.append((f"{key}{op}", format_param(bound)))
        return params


def build_query_params(**kwargs: Any) -> list[tuple[str, str]]:
    """Build a list of query parameter tuples from keyword arguments.

    Plain values become equality filters. Filter instances become comparison
    operators. ``None`` values are dropped so callers can pass optional filters
    straight through.
    """
    params: list[tuple[str, str]] = []
    for key, value in kwargs.items():
        if value is None:
            continue
        if isinstance(value, Filter):
            params.extend(value.to_params(key))
        else:
            params.append((key, format_param(value)))
    return params
