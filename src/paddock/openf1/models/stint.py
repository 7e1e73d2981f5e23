"""Stint model (continuous driving period on one set of tyres)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Stint(BaseModel):
    """Continuous driving stint on one compound."""

    model_config = ConfigDict(frozen=True)

    compound: str | None = None
    driver_number: int | None = None
    lap_end: int | None = None
    lap_start: int | None = None
    meeting_key: int | None = None
    session_key: int | None = None
    stint_number: int | None = None
    tyre_age_at_start: int | None = None

    def covers(self, lap_number: int) -> bool:
        """True if ``lap_number`` falls inside this stint's lap range."""
        if self.lap_start is None or self.lap_end is None:
            return False
        return self.lap_start <= lap_number <= self.lap_end
