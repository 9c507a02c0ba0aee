"""Tests for application settings validation."""

import warnings
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from app.config import Settings


def _settings(**overrides) -> Settings:
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        return Settings(_env_file=None, **overrides)


class TestTimezone:
    def test_default_zone(self):
        settings = _settings()
        assert settings.timezone == "America/Sao_Paulo"
        assert settings.tzinfo == ZoneInfo("America/Sao_Paulo")

    def test_custom_zone(self):
        assert _settings(timezone="Europe/Lisbon").tzinfo == ZoneInfo("Europe/Lisbon")

    @pytest.mark.parametrize("name", ["Mars/Olympus_Mons", "not a zone"])
    def test_unknown_zone_rejected(self, name):
        with pytest.raises(ValidationError, match="timezone"):
            _settings(timezone=name)


class TestJwtSecret:
    def test_default_secret_rejected_in_production(self):
        with pytest.raises(ValidationError, match="JWT_SECRET_KEY"):
            _settings(environment="production")

    def test_default_secret_warns_in_development(self):
        with pytest.warns(UserWarning, match="default JWT secret"):
            Settings(_env_file=None, environment="development")

    def test_strong_secret_accepted_in_production(self):
        settings = _settings(environment="production", jwt_secret_key="x" * 64)
        assert settings.environment == "production"


class TestUrls:
    def test_frontend_url_added_to_cors(self):
        settings = _settings(frontend_url="https://app.example.com")
        assert "https://app.example.com" in settings.cors_origins

    def test_frontend_url_not_duplicated(self):
        settings = _settings(frontend_url="http://localhost:3000")
        assert settings.cors_origins.count("http://localhost:3000") == 1

    def test_plain_postgres_url_gets_asyncpg_driver(self):
        settings = _settings(database_url="postgresql://u:p@db:5432/rentals")
        assert settings.async_database_url == "postgresql+asyncpg://u:p@db:5432/rentals"

    def test_asyncpg_url_unchanged(self):
        url = "postgresql+asyncpg://u:p@db:5432/rentals"
        assert _settings(database_url=url).async_database_url == url
