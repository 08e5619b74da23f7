import pytest

from charmemo.core.config import DEFAULT_JWT_SECRET, Settings, validate_settings


def test_development_defaults_are_accepted():
    assert validate_settings(Settings(ENVIRONMENT="development"))


def test_production_requires_a_real_secret():
    settings = Settings(ENVIRONMENT="production", JWT_SECRET_KEY=DEFAULT_JWT_SECRET, DATABASE_URL="postgresql://db/memo")
    with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
        validate_settings(settings)


def test_production_rejects_sqlite():
    settings = Settings(ENVIRONMENT="production", JWT_SECRET_KEY="s3cret", DATABASE_URL="sqlite:///./data/x.db")
    with pytest.raises(ValueError, match="SQLite"):
        validate_settings(settings)


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://db/memo")
    monkeypatch.setenv("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", "5")
    settings = Settings()
    assert settings.DATABASE_URL == "postgresql://db/memo"
    assert settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES == 5
