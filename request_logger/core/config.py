from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Literal

from sqlalchemy.engine import URL

LogLevel = Literal["debug", "info", "warning", "error"]

SERVICE_NAME = "request-logger"
SERVICE_VERSION = "1.0.0"


class ConfigError(ValueError):
    """Raised when the environment cannot produce a usable Settings."""


def _getenv(name: str, default: str) -> str:
    # Empty (or whitespace-only) values count as unset
    return os.environ.get(name, "").strip() or default


def _getint(name: str, default: str) -> int:
    raw = _getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer (got {raw!r})") from None


@dataclass(frozen=True)
class Settings:
    db_host: str
    db_port: int
    db_user: str
    db_password: str = field(repr=False)
    db_name: str
    db_sslmode: str
    port: int
    environment: str
    hostname: str
    log_level: LogLevel = "info"
    log_json: bool = False

    @property
    def is_dev(self) -> bool:
        return self.environment in ("development", "dev")

    @property
    def database_url(self) -> URL:
        # URL.create escapes credentials; str() of the URL masks the password.
        return URL.create(
            "postgresql+asyncpg",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )

    @property
    def connect_args(self) -> dict[str, str]:
        # asyncpg understands libpq sslmode names for its `ssl` argument
        return {"ssl": self.db_sslmode}


def load_settings() -> Settings:
    db_password = _getenv("DB_PASSWORD", "")
    if not db_password:
        raise ConfigError("DB_PASSWORD environment variable is required")

    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ConfigError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    return Settings(  # type: ignore[arg-type]
        db_host=_getenv("DB_HOST", "api-gateway-postgres.default.svc.cluster.local"),
        db_port=_getint("DB_PORT", "5432"),
        db_user=_getenv("DB_USER", "api_gateway_app"),
        db_password=db_password,
        db_name=_getenv("DB_NAME", "api_gateway_db"),
        db_sslmode=_getenv("DB_SSLMODE", "disable"),
        port=_getint("PORT", "3000"),
        environment=_getenv("ENVIRONMENT", "development"),
        hostname=_getenv("HOSTNAME", "unknown"),
        log_level=log_level_raw,
        log_json=_getenv("LOG_JSON", "false").lower() in ("1", "true", "yes"),
    )
