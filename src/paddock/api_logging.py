"""Call logging for the OpenF1 client and the insight service layer."""

from __future__ import annotations

import functools
import logging
import os
import threading
import time
from typing import Any, Awaitable, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

_LOG_DIR = os.environ.get("PADDOCK_LOG_DIR") or os.path.join(os.getcwd(), "logs")
_LOG_FILE = os.path.join(_LOG_DIR, "api_calls.log")

_logger: logging.Logger | None = None
_logger_lock = threading.Lock()


def _has_file_handler(logger: logging.Logger, path: str) -> bool:
    target = os.path.abspath(path)
    return any(
        isinstance(h, logging.FileHandler) and h.baseFilename == target
        for h in logger.handlers
    )


def _get_logger() -> logging.Logger:
    """Return the file logger, creating log dir and handler on first use."""
    global _logger
    if _logger is not None:
        return _logger

    with _logger_lock:
        if _logger is not None:
            return _logger

        os.makedirs(_LOG_DIR, exist_ok=True)

        _logger = logging.getLogger("paddock.api")
        _logger.setLevel(logging.DEBUG)
        _logger.propagate = False

        if not _has_file_handler(_logger, _LOG_FILE):
            handler = logging.FileHandler(_LOG_FILE, encoding="utf-8")
            handler.setFormatter(
                logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"),
            )
            _logger.addHandler(handler)

    return _logger


def _describe_args(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    # Skip 'self'
    arg_parts = [repr(a) for a in args[1:]]
    arg_parts += [f"{k}={v!r}" for k, v in kwargs.items()]
    return ", ".join(arg_parts)


def log_api_call(fn: F) -> F:
    """Decorator that logs OpenF1 client coroutine calls to the API log file."""

    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = _get_logger()
        arg_str = _describe_args(args, kwargs)
        logger.info("CALL: %s(%s)", fn.__qualname__, arg_str)

        start = time.monotonic()
        try:
            result = await fn(*args, **kwargs)
        except Exception as exc:
            elapsed = time.monotonic() - start
            logger.error(
                "FAIL: %s(%s) -> %s: %s (%.3fs)",
                fn.__qualname__, arg_str, type(exc).__name__, exc, elapsed,
            )
            raise
        elapsed = time.monotonic() - start
        count = len(result) if isinstance(result, list) else 1
        logger.info(
            "OK: %s(%s) -> %d items (%.3fs)",
            fn.__qualname__, arg_str, count, elapsed,
        )
        return result

    return wrapper  # type: ignore[return-value]


def log_service_call(fn: F) -> F:
    """Decorator that logs resolver and insight coroutine calls to the API log file."""

    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = _get_logger()
        arg_str = _describe_args(args, kwargs)
        logger.info("SERVICE CALL: %s(%s)", fn.__qualname__, arg_str)

        start = time.monotonic()
        try:
            result = await fn(*args, **kwargs)
        except Exception as exc:
            elapsed = time.monotonic() - start
            logger.error(
                "SERVICE FAIL: %s -> %s: %s (%.3fs)",
                fn.__qualname__, type(exc).__name__, exc, elapsed,
            )
            raise
        elapsed = time.monotonic() - start
        logger.info("SERVICE OK: %s -> %.3fs", fn.__qualname__, elapsed)
        return result

    return wrapper  # type: ignore[return-value]
