"""Shared test fixtures and sample API responses."""

from __future__ import annotations

import httpx
import pytest
import respx

from paddock.context import RequestContext
from paddock.openf1 import AsyncOpenF1Client
from paddock.openf1.models import Driver, Lap
from paddock.resolution import LocationMapCache

BASE_URL = "https://api.openf1.org/v1"
TOKEN_URL = "https://api.openf1.org/token"


SAMPLE_DRIVER = {
    "broadcast_name": "M VERSTAPPEN",
    "country_code": "NED",
    "driver_number": 1,
    "first_name": "Max",
    "full_name": "Max VERSTAPPEN",
    "headshot_url": "https://example.com/ver.png",
    "last_name": "Verstappen",
    "meeting_key": 1240,
    "name_acronym": "VER",
    "session_key": 9558,
    "team_colour": "3671C6",
    "team_name": "Red Bull Racing",
}

ROSTER = [
    SAMPLE_DRIVER,
    {
        "driver_number": 44,
        "first_name": "Lewis",
        "full_name": "Lewis HAMILTON",
        "last_name": "Hamilton",
        "name_acronym": "HAM",
        "session_key": 9558,
        "team_colour": "27F4D2",
        "team_name": "Mercedes",
    },
    {
        "driver_number": 4,
        "first_name": "Lando",
        "full_name": "Lando NORRIS",
        "last_name": "Norris",
        "name_acronym": "NOR",
        "session_key": 9558,
        "team_colour": "FF8000",
        "team_name": "McLaren",
    },
    {
        "driver_number": 18,
        "first_name": "Lance",
        "full_name": "Lance STROLL",
        "last_name": "Stroll",
        "name_acronym": "STR",
        "session_key": 9558,
        "team_colour": "229971",
        "team_name": "Aston Martin",
    },
]

SAMPLE_SESSION = {
    "circuit_key": 2,
    "circuit_short_name": "Silverstone",
    "country_code": "GBR",
    "country_key": 2,
    "country_name": "United Kingdom",
    "date_end": "2024-07-07T16:00:00+00:00",
    "date_start": "2024-07-07T14:00:00+00:00",
    "gmt_offset": "01:00:00",
    "location": "Silverstone",
    "meeting_key": 1240,
    "session_key": 9558,
    "session_name": "Race",
    "session_type": "Race",
    "year": 2024,
}

SAMPLE_MEETING = {
    "circuit_key": 2,
    "circuit_short_name": "Silverstone",
    "country_code": "GBR",
    "country_key": 2,
    "country_name": "United Kingdom",
    "date_start": "2024-07-05T11:30:00+00:00",
    "gmt_offset": "01:00:00",
    "location": "Silverstone",
    "meeting_key": 1240,
    "meeting_name": "British Grand Prix",
    "meeting_official_name": "FORMULA 1 QATAR AIRWAYS BRITISH GRAND PRIX 2024",
    "year": 2024,
}

SAMPLE_LAP = {
    "date_start": "2024-07-07T14:10:00+00:00",
    "driver_number": 1,
    "duration_sector_1": 28.5,
    "duration_sector_2": 35.2,
    "duration_sector_3": 30.1,
    "i1_speed": 305.0,
    "i2_speed": 280.0,
    "is_pit_out_lap": False,
    "lap_duration": 93.8,
    "lap_number": 5,
    "meeting_key": 1240,
    "segments_sector_1": [2048, 2049, 2051],
    "segments_sector_2": [2048, 2049],
    "segments_sector_3": [2048, 2049, 2050],
    "session_key": 9558,
    "st_speed": 310.0,
}

SAMPLE_WEATHER = {
    "air_temperature": 18.5,
    "date": "2024-07-07T14:00:00+00:00",
    "humidity": 65.0,
    "meeting_key": 1240,
    "pressure": 1008.0,
    "rainfall": 0,
    "session_key": 9558,
    "track_temperature": 32.2,
    "wind_direction": 180,
    "wind_speed": 3.5,
}

SAMPLE_PIT = {
    "date": "2024-07-07T14:30:00+00:00",
    "driver_number": 1,
    "lap_number": 15,
    "meeting_key": 1240,
    "pit_duration": 23.5,
    "session_key": 9558,
}

SAMPLE_CAR_DATA = {
    "brake": 0,
    "date": "2024-07-07T14:10:00.100000+00:00",
    "driver_number": 1,
    "drs": 12,
    "meeting_key": 1240,
    "n_gear": 7,
    "rpm": 10500,
    "session_key": 9558,
    "speed": 305,
    "throttle": 100,
}

SAMPLE_STINT = {
    "compound": "SOFT",
    "driver_number": 1,
    "lap_end": 20,
    "lap_start": 1,
    "meeting_key": 1240,
    "session_key": 9558,
    "stint_number": 1,
    "tyre_age_at_start": 0,
}

SAMPLE_RACE_CONTROL = {
    "category": "Other",
    "date": "2024-07-07T14:12:00+00:00",
    "driver_number": None,
    "flag": None,
    "lap_number": 5,
    "meeting_key": 1240,
    "message": "TRACK LIMITS AT TURN 9",
    "scope": None,
    "sector": None,
    "session_key": 9558,
}

SAMPLE_RESULT = {
    "dnf": False,
    "dns": False,
    "dsq": False,
    "driver_number": 44,
    "duration": 5261.019,
    "gap_to_leader": 0,
    "grid_position": 2,
    "meeting_key": 1240,
    "number_of_laps": 52,
    "points": 25,
    "position": 1,
    "session_key": 9558,
}


def make_lap(**overrides) -> dict:
    return {**SAMPLE_LAP, **overrides}


def make_message(**overrides) -> dict:
    return {**SAMPLE_RACE_CONTROL, **overrides}


def json_response(payload) -> httpx.Response:
    return httpx.Response(200, json=payload)


class FakeCharts:
    """Records published figures instead of rasterising and uploading them."""

    def __init__(self) -> None:
        self.published: list[tuple[str, object]] = []

    async def publish(self, fig, public_id: str) -> str:
        self.published.append((public_id, fig))
        return f"https://img.example.com/{public_id}.png"


class FakeUploader:
    def __init__(self) -> None:
        self.uploads: list[str] = []

    async def upload(self, image: bytes, public_id: str) -> str:
        self.uploads.append(public_id)
        return f"https://img.example.com/{public_id}.png"


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
def roster() -> list[Driver]:
    return [Driver(**d) for d in ROSTER]


@pytest.fixture
def sample_lap() -> Lap:
    return Lap(**SAMPLE_LAP)


@pytest.fixture
def charts() -> FakeCharts:
    return FakeCharts()


@pytest.fixture
def make_context():
    """Factory for a RequestContext over a real client; mock HTTP with respx."""

    def _make(*, token: str | None = None, charts=None, cache: LocationMapCache | None = None):
        client = AsyncOpenF1Client(token=token)
        return RequestContext.create(client, cache or LocationMapCache(), charts)

    return _make


@pytest.fixture
def mock_roster():
    """Register the sample roster on an active respx router."""

    def _register(payload: list[dict] | None = None) -> respx.Route:
        return respx.get(f"{BASE_URL}/drivers").mock(
            return_value=json_response(ROSTER if payload is None else payload)
        )

    return _register
