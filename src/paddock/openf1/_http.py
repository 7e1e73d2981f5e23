"""Low-level HTTP transport layer wrapping httpx."""

from __future__ import annotations

from typing import Any

import httpx

from paddock.openf1.exceptions import (
    OpenF1APIError,
    OpenF1ConnectionError,
    OpenF1TimeoutError,
    OpenF1ValidationError,
)

DEFAULT_BASE_URL = "https://api.openf1.org/v1"
DEFAULT_TIMEOUT = 30.0


def _handle_response(response: httpx.Response) -> Any:
    """Validate response status and return parsed JSON."""
    if response.status_code >= 400:
        raise OpenF1APIError(
            status_code=response.status_code,
            message=response.text,
        )
    try:
        return response.json()
    except ValueError as exc:
        raise OpenF1ValidationError(
            f"Response from {response.url.path} is not JSON: {response.text[:200]!r}"
        ) from exc


def _auth_headers(token: str | None) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"} if token else {}


class AsyncTransport:
    """Asynchronous HTTP transport using httpx.AsyncClient.

    One transport (and its connection pool) is shared by every request the
    service handles; the bearer token is supplied per call.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def get(
        self,
        endpoint: str,
        params: list[tuple[str, str]],
        *,
        token: str | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Perform an async GET request and return parsed JSON."""
        extra: dict[str, Any] = {}
        if timeout is not None:
            extra["timeout"] = timeout
        try:
            response = await self._client.get(
                endpoint, params=params, headers=_auth_headers(token), **extra,
            )
        except httpx.TimeoutException as exc:
            raise OpenF1TimeoutError(str(exc)) from exc
        except httpx.HTTPError as exc:
            raise OpenF1ConnectionError(str(exc)) from exc
        return _handle_response(response)

    async def close(self) -> None:
        await self._client.aclose()
