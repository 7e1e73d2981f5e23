"""Insight handlers, registered in :data:`INSIGHTS` on import."""

from paddock.insights import (  # noqa: F401  (registration side effects)
    laps,
    overtakes,
    pits,
    positions,
    race_control,
    radio,
    results,
    telemetry,
)
from paddock.insights.registry import INSIGHTS, InsightRegistry, normalize_insight_key
from paddock.insights.request import InsightRequest

__all__ = ["INSIGHTS", "InsightRegistry", "InsightRequest", "normalize_insight_key"]
