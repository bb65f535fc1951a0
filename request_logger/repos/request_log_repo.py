from __future__ import annotations

import itertools
from datetime import datetime
from typing import Protocol

from request_logger.core.clock import utcnow
from request_logger.models.request_log import LoggedRequest


class StorageError(Exception):
    """A storage operation failed. The message is safe to log, not to return."""


class StartupError(Exception):
    """The store could not be reached or prepared during startup."""


class RequestLogRepo(Protocol):
    async def connect(self) -> None: ...
    async def ensure_schema(self) -> None: ...
    async def insert(
        self, client_ip: str, user_agent: str, timestamp: datetime | None = None
    ) -> int: ...
    async def list_recent(self, limit: int) -> list[LoggedRequest]: ...
    async def ping(self) -> None: ...
    def active_connections(self) -> int: ...
    async def close(self) -> None: ...


class InMemoryRequestLogRepo:
    """Process-local store for tests and running without PostgreSQL.

    `fail_with` makes every storage call raise StorageError, which is how
    tests simulate an unreachable database.
    """

    def __init__(self) -> None:
        self._rows: list[LoggedRequest] = []
        self._ids = itertools.count(1)
        self.fail_with: str | None = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise StorageError(self.fail_with)

    async def connect(self) -> None:
        if self.fail_with is not None:
            raise StartupError(self.fail_with)

    async def ensure_schema(self) -> None:
        return None

    async def insert(
        self, client_ip: str, user_agent: str, timestamp: datetime | None = None
    ) -> int:
        self._check()
        row = LoggedRequest(
            id=next(self._ids),
            client_ip=client_ip,
            user_agent=user_agent,
            timestamp=timestamp or utcnow(),
        )
        self._rows.append(row)
        return row.id

    async def list_recent(self, limit: int) -> list[LoggedRequest]:
        self._check()
        ordered = sorted(
            self._rows, key=lambda r: (r.timestamp, r.id), reverse=True
        )
        return ordered[:limit]

    async def ping(self) -> None:
        self._check()

    def active_connections(self) -> int:
        return 0

    async def close(self) -> None:
        return None
