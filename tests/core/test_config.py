from __future__ import annotations

import pytest

from request_logger.core.config import ConfigError, load_settings

_ENV_VARS = (
    "DB_HOST",
    "DB_PORT",
    "DB_USER",
    "DB_PASSWORD",
    "DB_NAME",
    "DB_SSLMODE",
    "PORT",
    "ENVIRONMENT",
    "HOSTNAME",
    "LOG_LEVEL",
    "LOG_JSON",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DB_PASSWORD", "s3cret")


# ---- defaults ----


def test_load_settings_defaults() -> None:
    settings = load_settings()
    assert settings.db_host == "api-gateway-postgres.default.svc.cluster.local"
    assert settings.db_port == 5432
    assert settings.db_user == "api_gateway_app"
    assert settings.db_name == "api_gateway_db"
    assert settings.db_sslmode == "disable"
    assert settings.port == 3000
    assert settings.environment == "development"
    assert settings.hostname == "unknown"
    assert settings.log_level == "info"
    assert settings.log_json is False


def test_load_settings_respects_env_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DB_HOST", "db.internal")
    monkeypatch.setenv("DB_PORT", "6543")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("HOSTNAME", "backend-7f9c")
    monkeypatch.setenv("LOG_JSON", "true")
    settings = load_settings()
    assert settings.db_host == "db.internal"
    assert settings.db_port == 6543
    assert settings.port == 8080
    assert settings.environment == "production"
    assert settings.hostname == "backend-7f9c"
    assert settings.log_json is True


def test_empty_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DB_HOST", "")
    monkeypatch.setenv("PORT", "   ")
    settings = load_settings()
    assert settings.db_host == "api-gateway-postgres.default.svc.cluster.local"
    assert settings.port == 3000


# ---- required / invalid ----


def test_missing_password_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DB_PASSWORD")
    with pytest.raises(ConfigError, match="DB_PASSWORD"):
        load_settings()


def test_empty_password_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DB_PASSWORD", "")
    with pytest.raises(ConfigError, match="DB_PASSWORD"):
        load_settings()


def test_non_integer_port_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "http")
    with pytest.raises(ConfigError, match="PORT must be an integer"):
        load_settings()


def test_invalid_log_level_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    with pytest.raises(ConfigError, match="LOG_LEVEL"):
        load_settings()


# ---- derived values ----


def test_password_not_in_repr() -> None:
    settings = load_settings()
    assert "s3cret" not in repr(settings)


def test_database_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DB_HOST", "db.internal")
    monkeypatch.setenv("DB_PASSWORD", "p@ss/word")
    url = load_settings().database_url
    assert url.drivername == "postgresql+asyncpg"
    assert url.host == "db.internal"
    assert url.port == 5432
    assert url.database == "api_gateway_db"
    assert url.password == "p@ss/word"
    assert "p@ss/word" not in str(url)


def test_connect_args_carry_sslmode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DB_SSLMODE", "require")
    assert load_settings().connect_args == {"ssl": "require"}


def test_is_dev(monkeypatch: pytest.MonkeyPatch) -> None:
    assert load_settings().is_dev is True
    monkeypatch.setenv("ENVIRONMENT", "production")
    assert load_settings().is_dev is False


def test_settings_is_frozen() -> None:
    s = load_settings()
    with pytest.raises(AttributeError):
        s.port = 1  # type: ignore[misc]
