"""Starting grid model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class StartingGrid(BaseModel):
    """Race starting grid slot; ``lap_duration`` is the qualifying lap."""

    model_config = ConfigDict(frozen=True)

    driver_number: int | None = None
    lap_duration: float | None = None
    meeting_key: int | None = None
    position: int | None = None
    session_key: int | None = None
