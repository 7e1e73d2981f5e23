"""Tests for environment-driven settings."""

from __future__ import annotations

from paddock.config import Settings
from paddock.openf1._http import DEFAULT_BASE_URL

ENV_VARS = (
    "OPENF1_BASE_URL", "OPENF1_TOKEN_URL", "OPENF1_TIMEOUT", "OPENF1_USERNAME",
    "OPENF1_PASSWORD", "CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY",
    "CLOUDINARY_API_SECRET", "PADDOCK_CHART_FOLDER", "PADDOCK_DEFAULT_YEAR", "PORT",
)


def _clear(monkeypatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self, monkeypatch) -> None:
        _clear(monkeypatch)
        settings = Settings.from_env(dotenv=False)
        assert settings.openf1_base_url == DEFAULT_BASE_URL
        assert settings.openf1_username is None
        assert settings.port == 3000
        assert settings.default_session_type == "Race"
        assert not settings.has_image_host

    def test_from_environment(self, monkeypatch) -> None:
        _clear(monkeypatch)
        monkeypatch.setenv("OPENF1_USERNAME", "me@example.com")
        monkeypatch.setenv("OPENF1_PASSWORD", "secret")
        monkeypatch.setenv("OPENF1_TIMEOUT", "5")
        monkeypatch.setenv("PADDOCK_DEFAULT_YEAR", "2024")
        monkeypatch.setenv("PORT", "8080")
        settings = Settings.from_env(dotenv=False)
        assert settings.openf1_username == "me@example.com"
        assert settings.openf1_timeout == 5.0
        assert settings.default_year == 2024
        assert settings.port == 8080

    def test_blank_credentials_are_none(self, monkeypatch) -> None:
        _clear(monkeypatch)
        monkeypatch.setenv("OPENF1_USERNAME", "")
        assert Settings.from_env(dotenv=False).openf1_username is None

    def test_image_host_needs_all_three(self, monkeypatch) -> None:
        _clear(monkeypatch)
        monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")
        monkeypatch.setenv("CLOUDINARY_API_KEY", "key")
        assert not Settings.from_env(dotenv=False).has_image_host
        monkeypatch.setenv("CLOUDINARY_API_SECRET", "secret")
        assert Settings.from_env(dotenv=False).has_image_host
