"""Settings loading from the environment."""

import pytest

from ideascore.config import load_settings

_VARS = [
    "DATABASE_URL", "STORAGE_BACKEND", "SESSION_SECRET", "SESSION_TTL_HOURS",
    "SESSION_COOKIE_NAME", "ENVIRONMENT", "BCRYPT_ROUNDS", "CORS_ORIGINS",
    "DEBUG", "LOG_LEVEL", "HOST", "PORT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings()
        assert settings.database_url == "sqlite:///./ideascore.db"
        assert settings.storage_backend == "sql"
        assert settings.session_cookie_name == "sid"
        assert settings.session_ttl_seconds == 24 * 3600
        assert settings.bcrypt_rounds == 12
        assert settings.is_production is False
        assert "http://localhost:3000" in settings.cors_origins
        assert settings.session_secret  # dev fallback

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "Memory")
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("SESSION_SECRET", "s3cret")
        monkeypatch.setenv("SESSION_TTL_HOURS", "2")
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example ,")
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        settings = load_settings()
        assert settings.storage_backend == "memory"
        assert settings.is_production is True
        assert settings.session_secret == "s3cret"
        assert settings.session_ttl_seconds == 7200
        assert settings.cors_origins == ("https://a.example", "https://b.example")
        assert settings.debug is True
        assert settings.log_level == "DEBUG"

    def test_unknown_backend_rejected(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "mongo")
        with pytest.raises(ValueError, match="STORAGE_BACKEND"):
            load_settings()

    def test_bcrypt_rounds_floor(self, monkeypatch):
        monkeypatch.setenv("BCRYPT_ROUNDS", "4")
        assert load_settings().bcrypt_rounds == 10

    def test_bad_integer_falls_back(self, monkeypatch):
        monkeypatch.setenv("PORT", "eighty")
        assert load_settings().port == 8000
