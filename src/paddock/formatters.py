"""Formatting helpers for insight payloads."""

from __future__ import annotations


def format_lap_time(seconds: float | None) -> str:
    """Format seconds as m:ss.fff or 'N/A' if missing."""
    if not seconds:
        return "N/A"
    mins, secs = divmod(seconds, 60)
    return f"{int(mins)}:{secs:06.3f}"


def format_gap(gap: float | str | None) -> str | None:
    """Format a gap to the leader as +s.fffs; text gaps ("+1 LAP") pass through."""
    if gap is None:
        return None
    if isinstance(gap, str):
        return gap
    return f"+{gap:.3f}s"


def movement_status(positions_gained: int) -> str:
    if positions_gained > 0:
        return "GAINED"
    if positions_gained < 0:
        return "LOST"
    return "SAME"
