"""Tests for the async OpenF1 client."""

from __future__ import annotations

import httpx
import pytest
import respx

from paddock.openf1 import AsyncOpenF1Client, Filter, OpenF1APIError, OpenF1ValidationError
from paddock.openf1.models import Driver, Lap, Meeting, Session, Weather
from tests.conftest import (
    BASE_URL,
    SAMPLE_DRIVER,
    SAMPLE_LAP,
    SAMPLE_MEETING,
    SAMPLE_SESSION,
    SAMPLE_WEATHER,
)


class TestAsyncOpenF1Client:
    @respx.mock
    @pytest.mark.asyncio
    async def test_drivers(self) -> None:
        respx.get(f"{BASE_URL}/drivers").mock(
            return_value=httpx.Response(200, json=[SAMPLE_DRIVER])
        )
        async with AsyncOpenF1Client() as f1:
            drivers = await f1.drivers(session_key=9558)
        assert len(drivers) == 1
        assert isinstance(drivers[0], Driver)
        assert drivers[0].driver_number == 1

    @respx.mock
    @pytest.mark.asyncio
    async def test_sessions(self) -> None:
        route = respx.get(f"{BASE_URL}/sessions").mock(
            return_value=httpx.Response(200, json=[SAMPLE_SESSION])
        )
        async with AsyncOpenF1Client() as f1:
            sessions = await f1.sessions(year=2024, country_name="United Kingdom", session_name=None)
        assert isinstance(sessions[0], Session)
        assert sessions[0].session_key == 9558
        params = route.calls.last.request.url.params
        assert params["country_name"] == "United Kingdom"
        assert "session_name" not in params

    @respx.mock
    @pytest.mark.asyncio
    async def test_laps_with_filter(self) -> None:
        route = respx.get(f"{BASE_URL}/laps").mock(
            return_value=httpx.Response(200, json=[SAMPLE_LAP])
        )
        async with AsyncOpenF1Client() as f1:
            laps = await f1.laps(session_key=9558, lap_number=Filter(gte=5, lte=10))
        assert isinstance(laps[0], Lap)
        params = route.calls.last.request.url.params
        assert params["lap_number>="] == "5"
        assert params["lap_number<="] == "10"

    @respx.mock
    @pytest.mark.asyncio
    async def test_weather(self) -> None:
        respx.get(f"{BASE_URL}/weather").mock(
            return_value=httpx.Response(200, json=[SAMPLE_WEATHER])
        )
        async with AsyncOpenF1Client() as f1:
            weather = await f1.weather(session_key=9558)
        assert isinstance(weather[0], Weather)
        assert weather[0].track_temperature == 32.2

    @respx.mock
    @pytest.mark.asyncio
    async def test_meetings(self) -> None:
        respx.get(f"{BASE_URL}/meetings").mock(
            return_value=httpx.Response(200, json=[SAMPLE_MEETING])
        )
        async with AsyncOpenF1Client() as f1:
            meetings = await f1.meetings(year=2024, timeout=3.0)
        assert isinstance(meetings[0], Meeting)
        assert meetings[0].meeting_name == "British Grand Prix"

    @respx.mock
    @pytest.mark.asyncio
    async def test_empty_response(self) -> None:
        respx.get(f"{BASE_URL}/drivers").mock(
            return_value=httpx.Response(200, json=[])
        )
        async with AsyncOpenF1Client() as f1:
            assert await f1.drivers(session_key=99999) == []

    @respx.mock
    @pytest.mark.asyncio
    async def test_not_found_is_empty(self) -> None:
        respx.get(f"{BASE_URL}/session_result").mock(
            return_value=httpx.Response(404, json={"detail": "No results found."})
        )
        async with AsyncOpenF1Client() as f1:
            assert await f1.session_result(session_key=9558) == []

    @respx.mock
    @pytest.mark.asyncio
    async def test_server_error_raises(self) -> None:
        respx.get(f"{BASE_URL}/laps").mock(
            return_value=httpx.Response(500, text="boom")
        )
        async with AsyncOpenF1Client() as f1:
            with pytest.raises(OpenF1APIError) as exc_info:
                await f1.laps(session_key=9558)
        assert exc_info.value.status_code == 500

    @respx.mock
    @pytest.mark.asyncio
    async def test_validation_error(self) -> None:
        respx.get(f"{BASE_URL}/drivers").mock(
            return_value=httpx.Response(200, json=[{"driver_number": "not-a-number"}])
        )
        async with AsyncOpenF1Client() as f1:
            with pytest.raises(OpenF1ValidationError, match="Driver"):
                await f1.drivers(session_key=9558)

    @respx.mock
    @pytest.mark.asyncio
    async def test_with_token_shares_transport(self) -> None:
        route = respx.get(f"{BASE_URL}/overtakes").mock(
            return_value=httpx.Response(200, json=[])
        )
        async with AsyncOpenF1Client() as f1:
            authed = f1.with_token("tok")
            await authed.overtakes(session_key=9558)
            assert authed.token == "tok"
            assert f1.token is None
            assert authed._transport is f1._transport
        assert route.calls.last.request.headers["Authorization"] == "Bearer tok"

    @respx.mock
    @pytest.mark.asyncio
    async def test_fetch_raw_returns_json_untouched(self) -> None:
        payload = [{"date": "2024-07-07T14:00:00", "x": 1, "y": 2, "z": 3}]
        respx.get(f"{BASE_URL}/location").mock(
            return_value=httpx.Response(200, json=payload)
        )
        async with AsyncOpenF1Client() as f1:
            data = await f1.fetch_raw("location", [("session_key", "9558")])
        assert data == payload

    def test_all_endpoint_methods_exist(self) -> None:
        f1 = AsyncOpenF1Client()
        for name in (
            "car_data", "drivers", "laps", "meetings", "overtakes", "pit",
            "position", "race_control", "session_result", "sessions",
            "starting_grid", "stints", "team_radio", "weather", "fetch_raw",
        ):
            assert callable(getattr(f1, name)), name
