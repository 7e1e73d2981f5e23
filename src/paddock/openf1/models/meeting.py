"""Meeting (Grand Prix weekend) model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Meeting(BaseModel):
    """A race weekend; its names feed the location alias map."""

    model_config = ConfigDict(frozen=True)

    meeting_key: int | None = None
    meeting_name: str | None = None
    meeting_official_name: str | None = None
    year: int | None = None
    date_start: datetime | None = None
    country_name: str | None = None
    country_code: str | None = None
    location: str | None = None
    circuit_key: int | None = None
    circuit_short_name: str | None = None

    @property
    def place_names(self) -> list[str]:
        """Country, city, event and circuit names that users may type for this meeting."""
        names = (self.country_name, self.location, self.meeting_name, self.circuit_short_name)
        return [name for name in names if name]
