"""Tests for the insight dispatch table and request body."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from paddock.insights import INSIGHTS, InsightRegistry, InsightRequest, normalize_insight_key

EXPECTED_KEYS = {
    "fastest_lap_summary",
    "flag_summary",
    "gap_chart",
    "lap_analysis",
    "leaderboard_at_lap",
    "overtake_analysis",
    "pitstops_chart",
    "pitstops_summary",
    "position_change_summary",
    "race_control_summary",
    "race_results",
    "starting_grid",
    "team_radio_summary",
    "telemetry_chart",
    "telemetry_summary",
    "weather_chart",
}


class TestNormalizeInsightKey:
    @pytest.mark.parametrize(
        "raw", ["race_control_summary", "Race Control Summary", "RACE-CONTROL-SUMMARY", " raceControlSummary "]
    )
    def test_spellings_collapse(self, raw: str) -> None:
        assert normalize_insight_key(raw) == "racecontrolsummary"

    def test_empty(self) -> None:
        assert normalize_insight_key(None) == ""


class TestRegistry:
    def test_all_handlers_registered(self) -> None:
        assert set(INSIGHTS.keys) == EXPECTED_KEYS
        assert len(INSIGHTS) == 16

    def test_resolve_loose_spelling(self) -> None:
        assert INSIGHTS.resolve("Fastest Lap Summary") == "fastest_lap_summary"
        assert INSIGHTS.resolve("pitstops-chart") == "pitstops_chart"

    def test_resolve_unknown(self) -> None:
        assert INSIGHTS.resolve("fastest") is None
        assert INSIGHTS.resolve("") is None

    def test_get_returns_handler(self) -> None:
        assert callable(INSIGHTS.get("race_results"))
        assert "race_results" in INSIGHTS

    def test_clashing_registration_rejected(self) -> None:
        registry = InsightRegistry()

        @registry.register("lap_chart")
        async def first(ctx, session_key, request):
            return None

        with pytest.raises(ValueError, match="clashes"):
            registry.register("Lap Chart")


class TestInsightRequest:
    def test_aliases(self) -> None:
        request = InsightRequest.model_validate({"type": "gap_chart", "gp": "Monza", "lap": 12})
        assert request.location == "Monza"
        assert request.lap_number == 12

    def test_field_names_accepted(self) -> None:
        request = InsightRequest(type="gap_chart", location="Monza", lap_number=3)
        assert request.location == "Monza"
        assert request.lap_number == 3

    def test_extra_fields_kept(self) -> None:
        request = InsightRequest.model_validate({"type": "race_results", "note": "hi"})
        assert request.model_extra == {"note": "hi"}

    @pytest.mark.parametrize("top_n", [0, 21])
    def test_top_n_bounds(self, top_n: int) -> None:
        with pytest.raises(ValidationError):
            InsightRequest(type="gap_chart", top_n=top_n)

    @pytest.mark.parametrize(
        "driver, token", [(None, None), ("  ", None), (" ver ", "ver"), (44, "44")]
    )
    def test_driver_token(self, driver, token) -> None:
        assert InsightRequest(type="race_results", driver=driver).driver_token == token
