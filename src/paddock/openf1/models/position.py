"""Running position sample."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Position(BaseModel):
    """Emitted whenever a car's running position changes, not at a fixed rate."""

    model_config = ConfigDict(frozen=True)

    date: datetime | None = None
    driver_number: int | None = None
    session_key: int | None = None
    position: int | None = None
