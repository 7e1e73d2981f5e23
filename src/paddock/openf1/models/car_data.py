"""Car telemetry sample (~3.7 Hz per car)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

# OpenF1 reports the flap as open with these codes; 8 means eligible but closed.
DRS_OPEN_CODES = frozenset({10, 12, 14})


class CarData(BaseModel):
    """One telemetry sample; speed in km/h, throttle and brake in percent."""

    model_config = ConfigDict(frozen=True)

    date: datetime | None = None
    driver_number: int | None = None
    session_key: int | None = None
    meeting_key: int | None = None
    speed: int | None = None
    throttle: int | None = None
    brake: int | None = None
    rpm: int | None = None
    n_gear: int | None = None
    drs: int | None = None

    @property
    def drs_open(self) -> bool:
        return self.drs in DRS_OPEN_CODES
