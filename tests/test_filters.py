"""Tests for the filter builder."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from paddock.openf1._filters import Filter, build_query_params, format_param


class TestFilter:
    def test_gt(self) -> None:
        f = Filter(gt=5)
        assert f.to_params("speed") == [("speed>", "5")]

    def test_gte(self) -> None:
        f = Filter(gte=10)
        assert f.to_params("lap_number") == [("lap_number>=", "10")]

    def test_lt(self) -> None:
        f = Filter(lt=100)
        assert f.to_params("speed") == [("speed<", "100")]

    def test_lte(self) -> None:
        f = Filter(lte=50)
        assert f.to_params("lap_number") == [("lap_number<=", "50")]

    def test_range(self) -> None:
        f = Filter(gte=5, lte=10)
        params = f.to_params("lap_number")
        assert ("lap_number>=", "5") in params
        assert ("lap_number<=", "10") in params
        assert len(params) == 2

    def test_no_operators(self) -> None:
        assert Filter().to_params("key") == []

    def test_datetime_window(self) -> None:
        start = datetime(2024, 7, 7, 14, 10, tzinfo=timezone.utc)
        f = Filter(gte=start, lte=start + timedelta(seconds=93.8))
        assert f.to_params("date") == [
            ("date>=", "2024-07-07T14:10:00.000Z"),
            ("date<=", "2024-07-07T14:11:33.800Z"),
        ]

    def test_frozen(self) -> None:
        f = Filter(gte=5)
        with pytest.raises(AttributeError):
            f.gte = 10  # type: ignore[misc]


class TestFormatParam:
    def test_aware_datetime_converted_to_utc(self) -> None:
        cest = timezone(timedelta(hours=2))
        value = datetime(2024, 7, 7, 16, 0, tzinfo=cest)
        assert format_param(value) == "2024-07-07T14:00:00.000Z"

    def test_naive_datetime_taken_as_utc(self) -> None:
        assert format_param(datetime(2024, 7, 7, 14, 0)) == "2024-07-07T14:00:00.000Z"

    def test_plain_values(self) -> None:
        assert format_param(9558) == "9558"
        assert format_param("latest") == "latest"


class TestBuildQueryParams:
    def test_simple_equality(self) -> None:
        params = build_query_params(session_key=9161, driver_number=1)
        assert ("session_key", "9161") in params
        assert ("driver_number", "1") in params

    def test_filter_value(self) -> None:
        params = build_query_params(
            session_key=9161,
            lap_number=Filter(gte=5, lte=10),
        )
        assert ("session_key", "9161") in params
        assert ("lap_number>=", "5") in params
        assert ("lap_number<=", "10") in params

    def test_none_values_skipped(self) -> None:
        params = build_query_params(session_key=9161, driver_number=None)
        assert params == [("session_key", "9161")]

    def test_empty_params(self) -> None:
        assert build_query_params() == []
