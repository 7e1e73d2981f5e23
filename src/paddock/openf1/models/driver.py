"""Driver information model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Driver(BaseModel):
    """Driver info for a specific session.

    ``position`` is not part of the standard roster payload; some feeds carry
    it and it is then used to pick the session leader.
    """

    model_config = ConfigDict(frozen=True)

    broadcast_name: str | None = None
    country_code: str | None = None
    driver_number: int | None = None
    first_name: str | None = None
    full_name: str | None = None
    headshot_url: str | None = None
    last_name: str | None = None
    meeting_key: int | None = None
    name_acronym: str | None = None
    position: int | None = None
    session_key: int | None = None
    team_colour: str | None = None
    team_name: str | None = None

    @property
    def label(self) -> str:
        """Short display name: acronym, else surname, else ``#<number>``."""
        return self.name_acronym or self.last_name or f"#{self.driver_number}"
