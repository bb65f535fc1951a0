from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from request_logger.core.clock import utcnow
from request_logger.models.request_log import LoggedRequest


class Envelope(BaseModel):
    """Uniform response body for every JSON endpoint except /health."""

    message: str
    timestamp: datetime = Field(default_factory=utcnow)
    data: dict[str, Any] | None = None


class LoggedRequestOut(BaseModel):
    id: int
    client_ip: str
    timestamp: datetime
    user_agent: str | None = None

    @classmethod
    def from_domain(cls, req: LoggedRequest) -> LoggedRequestOut:
        return cls(
            id=req.id,
            client_ip=req.client_ip,
            timestamp=req.timestamp,
            user_agent=req.user_agent or None,
        )
