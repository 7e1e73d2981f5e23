"""Async client for the OpenF1 API."""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter

from paddock.api_logging import log_api_call
from paddock.openf1._filters import build_query_params
from paddock.openf1._http import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, AsyncTransport
from paddock.openf1.exceptions import OpenF1APIError, OpenF1ValidationError
from paddock.openf1.models.car_data import CarData
from paddock.openf1.models.driver import Driver
from paddock.openf1.models.lap import Lap
from paddock.openf1.models.meeting import Meeting
from paddock.openf1.models.overtake import Overtake
from paddock.openf1.models.pit import Pit
from paddock.openf1.models.position import Position
from paddock.openf1.models.race_control import RaceControl
from paddock.openf1.models.session import Session
from paddock.openf1.models.session_result import SessionResult
from paddock.openf1.models.starting_grid import StartingGrid
from paddock.openf1.models.stint import Stint
from paddock.openf1.models.team_radio import TeamRadio
from paddock.openf1.models.weather import Weather


def _validate_list[T](model_type: type[T], data: Any) -> list[T]:
    """Validate a list of dicts against a Pydantic model."""
    try:
        adapter = TypeAdapter(list[model_type])
        return adapter.validate_python(data)
    except Exception as exc:
        raise OpenF1ValidationError(
            f"Failed to validate {model_type.__name__} response: {exc}"
        ) from exc


class AsyncOpenF1Client:
    """Asynchronous client for the OpenF1 API.

    Usage:
        async with AsyncOpenF1Client() as f1:
            drivers = await f1.drivers(session_key=9161)

        # Elevated-tier resources need a bearer token:
        authed = f1.with_token(token)
        overtakes = await authed.overtakes(session_key=9161)

    OpenF1 answers ``404`` when a filter matches nothing; list endpoints
    return ``[]`` in that case.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        token: str | None = None,
        transport: AsyncTransport | None = None,
    ) -> None:
        self._transport = transport or AsyncTransport(base_url=base_url, timeout=timeout)
        self._token = token

    async def __aenter__(self) -> AsyncOpenF1Client:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    @property
    def token(self) -> str | None:
        return self._token

    def with_token(self, token: str | None) -> AsyncOpenF1Client:
        """Return a client bound to ``token`` that shares this connection pool."""
        return AsyncOpenF1Client(token=token, transport=self._transport)

    async def close(self) -> None:
        """Close the underlying HTTP connection."""
        await self._transport.close()

    async def _fetch(
        self, endpoint: str, params: list[tuple[str, str]], timeout: float | None = None,
    ) -> Any:
        try:
            return await self._transport.get(
                endpoint, params, token=self._token, timeout=timeout,
            )
        except OpenF1APIError as exc:
            if exc.status_code == 404:
                return []
            raise

    async def _get[T](
        self, endpoint: str, model: type[T], *, timeout: float | None = None, **kwargs: Any,
    ) -> list[T]:
        params = build_query_params(**kwargs)
        data = await self._fetch(endpoint, params, timeout)
        return _validate_list(model, data)

    @log_api_call
    async def fetch_raw(self, resource: str, params: list[tuple[str, str]]) -> Any:
        """Fetch ``/{resource}`` with pre-built params and return the JSON as-is."""
        return await self._fetch(f"/{resource}", params)

    # ── Endpoints ──────────────────────────────────────────────

    @log_api_call
    async def car_data(self, **kwargs: Any) -> list[CarData]:
        """Get car telemetry data (speed, throttle, brake, RPM, gear, DRS)."""
        return await self._get("/car_data", CarData, **kwargs)

    @log_api_call
    async def drivers(self, **kwargs: Any) -> list[Driver]:
        """Get driver information for a session."""
        return await self._get("/drivers", Driver, **kwargs)

    @log_api_call
    async def laps(self, **kwargs: Any) -> list[Lap]:
        """Get lap data with sector times and speeds."""
        return await self._get("/laps", Lap, **kwargs)

    @log_api_call
    async def meetings(self, *, timeout: float | None = None, **kwargs: Any) -> list[Meeting]:
        """Get Grand Prix weekends and test events."""
        return await self._get("/meetings", Meeting, timeout=timeout, **kwargs)

    @log_api_call
    async def overtakes(self, **kwargs: Any) -> list[Overtake]:
        """Get position change events (authenticated tier)."""
        return await self._get("/overtakes", Overtake, **kwargs)

    @log_api_call
    async def pit(self, **kwargs: Any) -> list[Pit]:
        """Get pit stop information."""
        return await self._get("/pit", Pit, **kwargs)

    @log_api_call
    async def position(self, **kwargs: Any) -> list[Position]:
        """Get driver position changes throughout a session."""
        return await self._get("/position", Position, **kwargs)

    @log_api_call
    async def race_control(self, **kwargs: Any) -> list[RaceControl]:
        """Get race control messages (flags, safety cars, incidents)."""
        return await self._get("/race_control", RaceControl, **kwargs)

    @log_api_call
    async def sessions(self, **kwargs: Any) -> list[Session]:
        """Get session information (practice, qualifying, sprint, race)."""
        return await self._get("/sessions", Session, **kwargs)

    @log_api_call
    async def session_result(self, **kwargs: Any) -> list[SessionResult]:
        """Get final standings after a session."""
        return await self._get("/session_result", SessionResult, **kwargs)

    @log_api_call
    async def starting_grid(self, **kwargs: Any) -> list[StartingGrid]:
        """Get race starting grid positions."""
        return await self._get("/starting_grid", StartingGrid, **kwargs)

    @log_api_call
    async def stints(self, **kwargs: Any) -> list[Stint]:
        """Get tire stint information."""
        return await self._get("/stints", Stint, **kwargs)

    @log_api_call
    async def team_radio(self, **kwargs: Any) -> list[TeamRadio]:
        """Get driver-team radio communications."""
        return await self._get("/team_radio", TeamRadio, **kwargs)

    @log_api_call
    async def weather(self, **kwargs: Any) -> list[Weather]:
        """Get track weather conditions."""
        return await self._get("/weather", Weather, **kwargs)
