"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class LogType(str, Enum):
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


@dataclass(frozen=True)
class Asset:
    """Amount of one token, independent of the collection it came from."""

    currency_symbol: str
    token_name: str
    amount: int


@dataclass(frozen=True)
class ContractInstance:
    """A running contract instance and the wallet it belongs to."""

    wallet_id: str
    contract_instance_id: str


@dataclass(frozen=True)
class LogEntry:
    """Single activity log entry shown to the user."""

    type: LogType
    message: str
    time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class Loadings:
    """Loading flags per UI module."""

    actions: bool = False
    assets: bool = True


@dataclass(frozen=True)
class ResponseInfo:
    """What a response hook gets to see about one HTTP exchange."""

    method: str
    url: str
    request_body: str | None = None
    status: int = 0
    body: str = ""
