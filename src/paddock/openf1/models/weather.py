"""Track weather reading (about one per minute)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Weather(BaseModel):
    """Temperatures in degrees Celsius, wind speed in m/s, humidity in percent."""

    model_config = ConfigDict(frozen=True)

    date: datetime | None = None
    session_key: int | None = None
    air_temperature: float | None = None
    track_temperature: float | None = None
    humidity: float | None = None
    pressure: float | None = None
    rainfall: int | None = None
    wind_direction: int | None = None
    wind_speed: float | None = None

    @property
    def is_raining(self) -> bool:
        return bool(self.rainfall)
