"""PostgreSQL implementation of RequestLogRepo."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import Row, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from request_logger.core.clock import utcnow
from request_logger.core.config import Settings
from request_logger.db.engine import Base, build_engine
from request_logger.db.tables import RequestLogRow
from request_logger.models.request_log import LoggedRequest
from request_logger.repos.request_log_repo import StartupError, StorageError

logger = logging.getLogger(__name__)

# asyncpg raises OSError subclasses (refused, unreachable) straight from connect
_DB_ERRORS = (SQLAlchemyError, OSError)


class PgRequestLogRepo:
    """Satisfies the RequestLogRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> PgRequestLogRepo:
        return cls(build_engine(settings))

    async def connect(self) -> None:
        try:
            await self.ping()
        except StorageError as e:
            raise StartupError(f"Error pinging database: {e}") from e

    async def ensure_schema(self) -> None:
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except _DB_ERRORS as e:
            raise StartupError(f"Error creating table: {e}") from e
        logger.info("Database table %s ready", RequestLogRow.__tablename__)

    async def insert(
        self, client_ip: str, user_agent: str, timestamp: datetime | None = None
    ) -> int:
        row = RequestLogRow(
            client_ip=client_ip,
            user_agent=user_agent,
            timestamp=_to_db_time(timestamp or utcnow()),
        )
        try:
            async with self._session_factory() as session:
                session.add(row)
                await session.commit()
        except _DB_ERRORS as e:
            raise StorageError(f"Error inserting request: {e}") from e
        return row.id

    async def list_recent(self, limit: int) -> list[LoggedRequest]:
        stmt = (
            select(
                RequestLogRow.id,
                RequestLogRow.client_ip,
                RequestLogRow.user_agent,
                RequestLogRow.timestamp,
            )
            .order_by(RequestLogRow.timestamp.desc(), RequestLogRow.id.desc())
            .limit(limit)
        )
        try:
            async with self._session_factory() as session:
                rows = (await session.execute(stmt)).all()
        except _DB_ERRORS as e:
            raise StorageError(f"Error querying requests: {e}") from e

        requests: list[LoggedRequest] = []
        for row in rows:
            try:
                requests.append(_row_to_request(row))
            except ValueError as e:
                logger.warning("Skipping undecodable row id=%s: %s", row[0], e)
        return requests

    async def ping(self) -> None:
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except _DB_ERRORS as e:
            raise StorageError(str(e)) from e

    def active_connections(self) -> int:
        checkedout = getattr(self._engine.pool, "checkedout", None)
        return checkedout() if checkedout is not None else 0

    async def close(self) -> None:
        await self._engine.dispose()


def _to_db_time(value: datetime) -> datetime:
    # Column is TIMESTAMP WITHOUT TIME ZONE; store UTC wall time
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value


def _row_to_request(row: Row) -> LoggedRequest:
    id_, client_ip, user_agent, timestamp = row
    if not isinstance(id_, int):
        raise ValueError(f"id is not an integer: {id_!r}")
    if not isinstance(client_ip, str):
        raise ValueError(f"client_ip is not a string: {client_ip!r}")
    if not isinstance(timestamp, datetime):
        raise ValueError(f"timestamp is not a datetime: {timestamp!r}")
    return LoggedRequest(
        id=id_,
        client_ip=client_ip,
        user_agent=user_agent or "",
        timestamp=timestamp.replace(tzinfo=UTC) if timestamp.tzinfo is None else timestamp,
    )
