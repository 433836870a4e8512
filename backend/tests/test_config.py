"""
Notebook API - Configuration Tests
==================================

What:  Tests for Settings validation and the CLI's handling of bad config.

What we test:
    ✅ DATABASE_URL is required and stripped
    ✅ Defaults (port 5000, CORS "*", HS256)
    ✅ Log level normalization and rejection
    ✅ Comma-separated list properties
    ✅ Startup validation flags missing signing material
    ✅ `main()` exits with status 1 when DATABASE_URL is missing
"""

import sys

import pytest
from pydantic import ValidationError

from notebook_api.config import Settings


class TestSettings:

    def test_database_url_is_required(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_blank_database_url_is_rejected(self):
        with pytest.raises(ValidationError):
            Settings(database_url="   ", _env_file=None)

    def test_database_url_is_stripped(self):
        settings = Settings(database_url="  sqlite+aiosqlite:///x.db  ", _env_file=None)
        assert settings.database_url == "sqlite+aiosqlite:///x.db"

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        settings = Settings(database_url="sqlite+aiosqlite:///x.db", _env_file=None)

        assert settings.port == 5000
        assert settings.host == "0.0.0.0"
        assert settings.cors_origins_list == ["*"]
        assert settings.jwt_algorithms_list == ["HS256"]
        assert settings.log_level == "INFO"
        assert settings.db_auto_create_schema is False

    def test_log_level_is_upper_cased(self):
        settings = Settings(database_url="sqlite+aiosqlite:///x.db", log_level="debug", _env_file=None)
        assert settings.log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(database_url="sqlite+aiosqlite:///x.db", log_level="LOUD", _env_file=None)

    def test_list_properties(self):
        settings = Settings(
            database_url="sqlite+aiosqlite:///x.db",
            cors_origins="https://a.example, https://b.example",
            jwt_algorithms="RS256, ,ES256",
            _env_file=None,
        )

        assert settings.cors_origins_list == ["https://a.example", "https://b.example"]
        assert settings.jwt_algorithms_list == ["RS256", "ES256"]


class TestProductionValidation:

    def test_missing_signing_material(self):
        settings = Settings(
            database_url="sqlite+aiosqlite:///x.db", jwt_secret="", jwt_public_key="", _env_file=None
        )

        with pytest.raises(ValueError, match="JWT_SECRET"):
            settings.validate_required_for_production()

    def test_empty_algorithms(self):
        settings = Settings(
            database_url="sqlite+aiosqlite:///x.db", jwt_secret="s", jwt_algorithms=" , ", _env_file=None
        )

        with pytest.raises(ValueError, match="JWT_ALGORITHMS"):
            settings.validate_required_for_production()

    def test_public_key_is_enough(self):
        settings = Settings(
            database_url="sqlite+aiosqlite:///x.db",
            jwt_secret="",
            jwt_public_key="-----BEGIN PUBLIC KEY-----\n...",
            _env_file=None,
        )

        settings.validate_required_for_production()


class TestEntryPoint:

    def test_main_exits_1_without_database_url(self, monkeypatch):
        from notebook_api.__main__ import main

        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.chdir("/")
        monkeypatch.delitem(sys.modules, "notebook_api.config")

        assert main() == 1
