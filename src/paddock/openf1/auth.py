"""Bearer token acquisition for the authenticated OpenF1 tier."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

import httpx

from paddock.openf1.exceptions import OpenF1AuthError

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_URL = "https://api.openf1.org/token"
REFRESH_MARGIN_SECONDS = 60.0


@dataclass(frozen=True)
class CachedToken:
    token: str
    expires_at: float  # absolute, seconds since the epoch

    def is_fresh(self, now: float) -> bool:
        return self.expires_at > now + REFRESH_MARGIN_SECONDS


class TokenCache:
    """Process-wide tokens keyed by username.

    Entries are replaced on refresh and never evicted.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CachedToken] = {}

    def get(self, username: str) -> CachedToken | None:
        return self._entries.get(username)

    def store(self, username: str, entry: CachedToken) -> None:
        self._entries[username] = entry

    def __len__(self) -> int:
        return len(self._entries)


class TokenProvider:
    """Exchange a username/password for a bearer token, with caching.

    Usage:
        provider = TokenProvider(http_client, TokenCache())
        token = await provider.get_token("me@example.com", "secret")
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        cache: TokenCache,
        token_url: str = DEFAULT_TOKEN_URL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._http = http
        self._cache = cache
        self._token_url = token_url
        self._clock = clock

    async def get_token(self, username: str | None, password: str | None) -> str | None:
        """Return a fresh token, or ``None`` when no credentials are supplied
        or the exchange fails. A missing token only locks out elevated-tier
        resources, so failures are logged rather than raised."""
        if not username or not password:
            return None
        now = self._clock()
        cached = self._cache.get(username)
        if cached is not None and cached.is_fresh(now):
            return cached.token
        try:
            entry = await self._exchange(username, password, now)
        except OpenF1AuthError as exc:
            logger.error("Token exchange failed for %s: %s", username, exc)
            return None
        self._cache.store(username, entry)
        logger.info("Fetched new OpenF1 token for %s", username)
        return entry.token

    async def _exchange(self, username: str, password: str, now: float) -> CachedToken:
        try:
            response = await self._http.post(
                self._token_url,
                data={"username": username, "password": password},
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as exc:
            raise OpenF1AuthError(str(exc)) from exc
        if response.status_code >= 400:
            raise OpenF1AuthError(f"HTTP {response.status_code}: {response.text}")
        try:
            payload = response.json()
            token = payload["access_token"]
            expires_in = float(payload["expires_in"])
        except (KeyError, TypeError, ValueError) as exc:
            raise OpenF1AuthError(f"Malformed token response: {response.text!r}") from exc
        return CachedToken(token=token, expires_at=now + expires_in)
