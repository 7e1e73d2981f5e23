"""Typed async client for the OpenF1 API."""

from paddock.openf1._filters import Filter
from paddock.openf1.auth import TokenCache, TokenProvider
from paddock.openf1.client import AsyncOpenF1Client
from paddock.openf1.exceptions import (
    OpenF1APIError,
    OpenF1AuthError,
    OpenF1ConnectionError,
    OpenF1Error,
    OpenF1TimeoutError,
    OpenF1ValidationError,
)

__all__ = [
    "AsyncOpenF1Client",
    "Filter",
    "OpenF1APIError",
    "OpenF1AuthError",
    "OpenF1ConnectionError",
    "OpenF1Error",
    "OpenF1TimeoutError",
    "OpenF1ValidationError",
    "TokenCache",
    "TokenProvider",
]
