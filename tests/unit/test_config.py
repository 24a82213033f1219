"""Unit tests for settings loading"""

import pytest
from pydantic import ValidationError
from finance_tracker.config import Settings


def test_missing_secret_and_database_url_is_fatal(monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)

    with pytest.raises(ValidationError) as exc:
        Settings(_env_file=None)

    missing = {error["loc"][0] for error in exc.value.errors()}
    assert missing == {"database_url", "jwt_secret"}


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("JWT_SECRET", "from-env")
    monkeypatch.setenv("TOKEN_TTL_DAYS", "7")

    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite://"
    assert settings.jwt_secret == "from-env"
    assert settings.token_ttl_days == 7
    assert settings.bcrypt_rounds == 10
