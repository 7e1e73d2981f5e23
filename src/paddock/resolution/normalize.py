"""Canonical comparison keys for free-text venue and country names."""

from __future__ import annotations

import re

_SEPARATORS = re.compile(r"[_\-]")
_NON_KEY_CHARS = re.compile(r"[^A-Z\s]")


def normalize_location(value: str | None) -> str:
    """Return the comparison key for ``value``.

    Underscores and hyphens become spaces, the text is upper-cased, every
    character other than ``A-Z`` and whitespace is dropped, and the result is
    trimmed. ``"abu-dhabi"``, ``"ABU_DHABI"`` and ``"Abu Dhabi!"`` all give
    ``"ABU DHABI"``. Idempotent; ``None`` or ``""`` give ``""``.
    """
    if not value:
        return ""
    spaced = _SEPARATORS.sub(" ", value)
    return _NON_KEY_CHARS.sub("", spaced.upper()).strip()


def first_token(key: str) -> str:
    """First whitespace-delimited token of a normalized key, or ``""``."""
    parts = key.split()
    return parts[0] if parts else ""
