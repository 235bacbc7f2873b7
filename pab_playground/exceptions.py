"""Exception hierarchy for the PAB playground store."""
from __future__ import annotations

from typing import Any


class PabError(Exception):
    """Base exception for all PAB playground errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PabRequestError(PabError):
    """Raised when the PAB answers an HTTP request with an error status."""

    def __init__(self, status: int, method: str, url: str, body: str = "") -> None:
        super().__init__(
            f"Request failed with status {status}: {method.upper()} {url}",
            {"status": status, "method": method, "url": url, "body": body},
        )
        self.status = status
        self.method = method
        self.url = url
        self.body = body


class StateDecodeError(PabError):
    """Raised when an observable state does not have the expected shape."""

    pass


class UnknownWalletError(PabError):
    """Raised when a wallet has no contract instance in the registry."""

    def __init__(self, wallet_id: str) -> None:
        super().__init__(f"No contract instance for wallet '{wallet_id}'")
        self.wallet_id = wallet_id


class InitializationError(PabError):
    """Raised when the store cannot finish initialization."""

    pass


class ActionEncodingError(PabError):
    """Raised when an action request body cannot be built."""

    pass
