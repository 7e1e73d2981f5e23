"""Session result model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SessionResult(BaseModel):
    """Final standing after a session."""

    model_config = ConfigDict(frozen=True)

    broadcast_name: str | None = None
    dnf: bool | None = None
    dns: bool | None = None
    dsq: bool | None = None
    driver_number: int | None = None
    duration: float | list[float | None] | None = None
    full_name: str | None = None
    gap_to_leader: float | str | list[float | str | None] | None = None
    grid_position: int | None = None
    laps_completed: int | None = None
    meeting_key: int | None = None
    name_acronym: str | None = None
    number_of_laps: int | None = None
    points: float | None = None
    position: int | None = None
    session_key: int | None = None
    team_name: str | None = None

    @property
    def classification_status(self) -> str:
        if self.dsq:
            return "DSQ"
        if self.dns:
            return "DNS"
        if self.dnf:
            return "DNF"
        return "Finished"
