"""SQLAlchemy table definitions.

RequestLogRow maps to the LoggedRequest dataclass in
request_logger/models/request_log.py; the repo converts between the two.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from request_logger.db.engine import Base
from request_logger.models.request_log import CLIENT_IP_MAX_LENGTH


class RequestLogRow(Base):
    __tablename__ = "api_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_ip: Mapped[str] = mapped_column(String(CLIENT_IP_MAX_LENGTH), nullable=False)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime | None] = mapped_column(
        DateTime, server_default=func.current_timestamp()
    )


# Newest-first listing reads this index
Index("idx_api_requests_timestamp", RequestLogRow.timestamp.desc())
