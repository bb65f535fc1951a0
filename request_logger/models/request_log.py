from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# Longest textual IPv6 address (IPv4-mapped form); width of the client_ip column
CLIENT_IP_MAX_LENGTH = 45


@dataclass(frozen=True, slots=True)
class LoggedRequest:
    id: int
    client_ip: str
    timestamp: datetime
    user_agent: str = ""
