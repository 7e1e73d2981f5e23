"""Runtime settings, read from the environment (and a local ``.env``)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone

from dotenv import load_dotenv

from paddock.openf1._http import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from paddock.openf1.auth import DEFAULT_TOKEN_URL


def _current_year() -> int:
    return datetime.now(timezone.utc).year


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw else default


@dataclass(frozen=True)
class Settings:
    openf1_base_url: str = DEFAULT_BASE_URL
    openf1_token_url: str = DEFAULT_TOKEN_URL
    openf1_timeout: float = DEFAULT_TIMEOUT
    openf1_username: str | None = None
    openf1_password: str | None = None
    cloudinary_cloud_name: str | None = None
    cloudinary_api_key: str | None = None
    cloudinary_api_secret: str | None = None
    chart_folder: str = "f1_charts"
    default_year: int = field(default_factory=_current_year)
    default_session_type: str = "Race"
    port: int = 3000

    @property
    def has_image_host(self) -> bool:
        return bool(
            self.cloudinary_cloud_name and self.cloudinary_api_key and self.cloudinary_api_secret
        )

    @classmethod
    def from_env(cls, dotenv: bool = True) -> Settings:
        """Build settings from ``os.environ``, loading ``.env`` first if asked."""
        if dotenv:
            load_dotenv()
        return cls(
            openf1_base_url=os.getenv("OPENF1_BASE_URL", DEFAULT_BASE_URL),
            openf1_token_url=os.getenv("OPENF1_TOKEN_URL", DEFAULT_TOKEN_URL),
            openf1_timeout=_env_float("OPENF1_TIMEOUT", DEFAULT_TIMEOUT),
            openf1_username=os.getenv("OPENF1_USERNAME") or None,
            openf1_password=os.getenv("OPENF1_PASSWORD") or None,
            cloudinary_cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME") or None,
            cloudinary_api_key=os.getenv("CLOUDINARY_API_KEY") or None,
            cloudinary_api_secret=os.getenv("CLOUDINARY_API_SECRET") or None,
            chart_folder=os.getenv("PADDOCK_CHART_FOLDER", "f1_charts"),
            default_year=_env_int("PADDOCK_DEFAULT_YEAR", _current_year()),
            port=_env_int("PORT", 3000),
        )
