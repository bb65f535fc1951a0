"""Log inbound API submissions and list the most recent ones.

  POST /api          -> record caller IP + user agent, 201 with the new id
  GET  /api?limit=N  -> newest-first listing, N in [1, 100], default 20

Storage failures are logged with full detail and answered with an
opaque 500; the client never sees driver messages.
"""

from __future__ import annotations

import logging
import re

from fastapi import APIRouter, HTTPException, Request, status

from request_logger.api.dependencies import RepoDep
from request_logger.api.schemas import Envelope, LoggedRequestOut
from request_logger.models.request_log import CLIENT_IP_MAX_LENGTH
from request_logger.repos.request_log_repo import StorageError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["requests"])

DEFAULT_LIMIT = 20
MAX_LIMIT = 100

# Optional sign followed by ASCII digits; no spaces, underscores or other scripts
_LIMIT_RE = re.compile(r"[+-]?[0-9]+")


def client_ip_from(request: Request) -> str:
    """Proxy-reported address first, then the peer address.

    Header values are cut to CLIENT_IP_MAX_LENGTH so they fit the column.
    """
    return _client_ip(request)[:CLIENT_IP_MAX_LENGTH]


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded.strip():
        # "client, proxy1, proxy2": the left-most entry is the caller
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip", "").strip()
    if real_ip:
        return real_ip
    if request.client is not None:
        return request.client.host
    return "unknown"


def parse_limit(raw: str | None) -> int:
    """Anything missing, non-numeric or outside [1, MAX_LIMIT] means the default."""
    if raw is None:
        return DEFAULT_LIMIT
    if _LIMIT_RE.fullmatch(raw) is None:
        return DEFAULT_LIMIT
    value = int(raw)
    if 1 <= value <= MAX_LIMIT:
        return value
    return DEFAULT_LIMIT


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=Envelope,
    response_model_exclude_none=True,
)
async def log_request(request: Request, repo: RepoDep) -> Envelope:
    client_ip = client_ip_from(request)
    user_agent = request.headers.get("user-agent", "")

    try:
        request_id = await repo.insert(client_ip, user_agent)
    except StorageError:
        logger.exception("Failed to log request from %s", client_ip)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database error",
        ) from None

    logger.debug("Logged request id=%d client_ip=%s", request_id, client_ip)
    return Envelope(
        message="Request logged successfully",
        data={
            "id": request_id,
            "client_ip": client_ip,
            "user_agent": user_agent,
        },
    )


@router.get("", response_model=Envelope, response_model_exclude_none=True)
async def list_requests(request: Request, repo: RepoDep) -> Envelope:
    # Read the raw query value so bad input is normalized, not rejected with 422
    limit = parse_limit(request.query_params.get("limit"))

    try:
        rows = await repo.list_recent(limit)
    except StorageError:
        logger.exception("Failed to list requests (limit=%d)", limit)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database error",
        ) from None

    items = [
        LoggedRequestOut.from_domain(r).model_dump(exclude_none=True) for r in rows
    ]
    return Envelope(
        message=f"Retrieved {len(items)} API requests",
        data={
            "requests": items,
            "count": len(items),
            "limit": limit,
        },
    )
