"""Resolve loose user input (venue names, session codes, driver names) to OpenF1 keys."""

from paddock.resolution.drivers import DriverResolver, match_driver
from paddock.resolution.locations import (
    DEFAULT_LOCATION_ALIASES,
    LocationMapCache,
    LocationResolver,
)
from paddock.resolution.normalize import normalize_location
from paddock.resolution.sessions import (
    ResolvedSession,
    SessionResolver,
    select_current,
    select_latest,
    session_type_label,
)

__all__ = [
    "DEFAULT_LOCATION_ALIASES",
    "DriverResolver",
    "LocationMapCache",
    "LocationResolver",
    "ResolvedSession",
    "SessionResolver",
    "match_driver",
    "normalize_location",
    "select_current",
    "select_latest",
    "session_type_label",
]
