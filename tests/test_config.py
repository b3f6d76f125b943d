"""Tests for settings loading."""

import pytest

from price_sniper.config import ConfigurationError, Settings, load_settings
from price_sniper.db.session import build_database_url


def test_database_url_is_required(monkeypatch):
    monkeypatch.delenv("SNIPER_DATABASE_URL", raising=False)

    with pytest.raises(ConfigurationError) as exc:
        load_settings(_env_file=None)

    assert "database_url" in str(exc.value)


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("SNIPER_DATABASE_URL", "postgresql+asyncpg://sniper@db:5432/sniper")
    monkeypatch.setenv("SNIPER_TARGET_SPACING_SECONDS", "7.5")

    settings = load_settings(_env_file=None)

    assert settings.database_url == "postgresql+asyncpg://sniper@db:5432/sniper"
    assert settings.target_spacing_seconds == 7.5
    assert settings.navigation_timeout_ms == 30000
    assert settings.drilldown_timeout_ms == 10000
    assert settings.price_wait_timeout_ms == 10000


def test_inverted_reading_window_is_invalid():
    with pytest.raises(ConfigurationError):
        load_settings(
            database_url="sqlite+aiosqlite://",
            reading_delay_min_ms=4000,
            reading_delay_max_ms=2000,
            _env_file=None,
        )


def test_negative_spacing_is_invalid():
    with pytest.raises(ConfigurationError):
        load_settings(database_url="sqlite+aiosqlite://", target_spacing_seconds=-1, _env_file=None)


def test_access_key_becomes_url_password():
    settings = Settings(
        database_url="postgresql+asyncpg://sniper@db:5432/sniper",
        database_key="s3cret",
        _env_file=None,
    )

    url = build_database_url(settings)

    assert url.password == "s3cret"
    assert url.username == "sniper"
    assert "s3cret" not in repr(settings)
