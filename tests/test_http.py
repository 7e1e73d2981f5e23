"""Tests for the HTTP transport layer."""

from __future__ import annotations

import httpx
import pytest
import respx

from paddock.openf1._http import AsyncTransport
from paddock.openf1.exceptions import (
    OpenF1APIError,
    OpenF1ConnectionError,
    OpenF1TimeoutError,
    OpenF1ValidationError,
)

BASE_URL = "https://api.openf1.org/v1"


class TestAsyncTransport:
    @respx.mock
    @pytest.mark.asyncio
    async def test_get_success(self) -> None:
        respx.get(f"{BASE_URL}/drivers").mock(
            return_value=httpx.Response(200, json=[{"driver_number": 1}])
        )
        transport = AsyncTransport()
        result = await transport.get("/drivers", [("session_key", "9161")])
        assert result == [{"driver_number": 1}]
        await transport.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_with_params(self) -> None:
        route = respx.get(f"{BASE_URL}/laps").mock(
            return_value=httpx.Response(200, json=[])
        )
        transport = AsyncTransport()
        await transport.get("/laps", [("session_key", "9161"), ("driver_number", "1")])
        assert route.called
        params = route.calls.last.request.url.params
        assert params["session_key"] == "9161"
        assert params["driver_number"] == "1"
        await transport.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_bearer_token_header(self) -> None:
        route = respx.get(f"{BASE_URL}/overtakes").mock(
            return_value=httpx.Response(200, json=[])
        )
        transport = AsyncTransport()
        await transport.get("/overtakes", [], token="abc123")
        assert route.calls.last.request.headers["Authorization"] == "Bearer abc123"
        await transport.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_no_auth_header_without_token(self) -> None:
        route = respx.get(f"{BASE_URL}/drivers").mock(
            return_value=httpx.Response(200, json=[])
        )
        transport = AsyncTransport()
        await transport.get("/drivers", [])
        assert "Authorization" not in route.calls.last.request.headers
        await transport.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_404(self) -> None:
        respx.get(f"{BASE_URL}/drivers").mock(
            return_value=httpx.Response(404, text="Not Found")
        )
        transport = AsyncTransport()
        with pytest.raises(OpenF1APIError) as exc_info:
            await transport.get("/drivers", [])
        assert exc_info.value.status_code == 404
        await transport.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_500(self) -> None:
        respx.get(f"{BASE_URL}/drivers").mock(
            return_value=httpx.Response(500, text="Internal Server Error")
        )
        transport = AsyncTransport()
        with pytest.raises(OpenF1APIError) as exc_info:
            await transport.get("/drivers", [])
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Internal Server Error"
        await transport.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        respx.get(f"{BASE_URL}/drivers").mock(side_effect=httpx.ConnectError("fail"))
        transport = AsyncTransport()
        with pytest.raises(OpenF1ConnectionError):
            await transport.get("/drivers", [])
        await transport.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_timeout_error(self) -> None:
        respx.get(f"{BASE_URL}/drivers").mock(side_effect=httpx.ReadTimeout("timeout"))
        transport = AsyncTransport()
        with pytest.raises(OpenF1TimeoutError):
            await transport.get("/drivers", [])
        await transport.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_read_error(self) -> None:
        respx.get(f"{BASE_URL}/drivers").mock(side_effect=httpx.ReadError("reset"))
        transport = AsyncTransport()
        with pytest.raises(OpenF1ConnectionError, match="reset"):
            await transport.get("/drivers", [])
        await transport.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_protocol_error(self) -> None:
        respx.get(f"{BASE_URL}/drivers").mock(
            side_effect=httpx.RemoteProtocolError("peer closed connection")
        )
        transport = AsyncTransport()
        with pytest.raises(OpenF1ConnectionError):
            await transport.get("/drivers", [])
        await transport.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_non_json_body(self) -> None:
        respx.get(f"{BASE_URL}/drivers").mock(
            return_value=httpx.Response(200, text="<html>maintenance</html>")
        )
        transport = AsyncTransport()
        with pytest.raises(OpenF1ValidationError, match="not JSON"):
            await transport.get("/drivers", [])
        await transport.close()
