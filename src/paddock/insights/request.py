"""Request body for ``POST /generate_insight``."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class InsightRequest(BaseModel):
    """Which insight to run and the loose session coordinates to run it on.

    ``gp`` is accepted for ``location`` and ``lap`` for ``lap_number``. When
    ``session_key`` is given the session is not resolved at all.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str
    year: int | None = None
    location: str | None = Field(
        default=None, validation_alias=AliasChoices("location", "gp"),
    )
    session_type: str | None = None
    session_key: int | None = None
    month: str | int | None = None
    driver: str | int | None = None
    lap_number: int | None = Field(
        default=None, validation_alias=AliasChoices("lap_number", "lap"),
    )
    filter: str | None = None
    top_n: int = Field(default=5, ge=1, le=20)

    @property
    def driver_token(self) -> str | None:
        if self.driver is None:
            return None
        token = str(self.driver).strip()
        return token or None
