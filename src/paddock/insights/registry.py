"""Insight dispatch table: loose user spellings -> registered handler."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Awaitable, Callable

if TYPE_CHECKING:
    from paddock.context import RequestContext
    from paddock.insights.request import InsightRequest

InsightHandler = Callable[["RequestContext", int, "InsightRequest"], Awaitable[Any]]

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_insight_key(value: str | None) -> str:
    """``"Race Control Summary"`` and ``"race_control_summary"`` -> ``"racecontrolsummary"``."""
    if not value:
        return ""
    return _NON_ALNUM.sub("", value.lower())


class InsightRegistry:
    """Handlers keyed by canonical name, with a precomputed normalized lookup."""

    def __init__(self) -> None:
        self._handlers: dict[str, InsightHandler] = {}
        self._by_normalized: dict[str, str] = {}

    def register(self, key: str) -> Callable[[InsightHandler], InsightHandler]:
        normalized = normalize_insight_key(key)
        if normalized in self._by_normalized:
            raise ValueError(f"Insight {key!r} clashes with {self._by_normalized[normalized]!r}")

        def decorator(fn: InsightHandler) -> InsightHandler:
            self._handlers[key] = fn
            self._by_normalized[normalized] = key
            return fn

        return decorator

    def resolve(self, user_input: str | None) -> str | None:
        """Canonical key for ``user_input``, or None if nothing matches exactly."""
        return self._by_normalized.get(normalize_insight_key(user_input))

    def get(self, key: str) -> InsightHandler:
        return self._handlers[key]

    @property
    def keys(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, key: object) -> bool:
        return key in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


INSIGHTS = InsightRegistry()
