"""Async SQLAlchemy engine construction.

The engine wraps an asyncpg connection pool using SQLAlchemy's defaults
for pool size and overflow.  One engine is built per application by
PgRequestLogRepo.from_settings and disposed in the lifespan shutdown.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from request_logger.core.config import Settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all table models."""


def build_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(
        settings.database_url,
        echo=False,
        connect_args=settings.connect_args,
    )
