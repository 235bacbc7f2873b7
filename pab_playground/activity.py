"""Activity log messages for requests going through the PAB transport."""
from __future__ import annotations

import logging
from typing import Callable

from .interfaces.transport import PabTransport
from .models import LogEntry, LogType, ResponseInfo

logger = logging.getLogger(__name__)


def success_message(info: ResponseInfo) -> str:
    message = f"{info.method.upper()} {info.url}"
    if info.request_body:
        message += f"\n\ndata: {info.request_body}"
    return message


def failure_message(info: ResponseInfo) -> str:
    return f"Error {info.status} {info.method.upper()} {info.url}\n\n{info.body}"


def install_request_logging(
    transport: PabTransport, add_log: Callable[[LogEntry], None]
) -> None:
    """Log every PAB response as INFO and every failed one as WARNING."""

    def on_success(info: ResponseInfo) -> None:
        add_log(LogEntry(type=LogType.INFO, message=success_message(info)))

    def on_failure(info: ResponseInfo) -> None:
        add_log(LogEntry(type=LogType.WARNING, message=failure_message(info)))

    transport.add_response_hook(on_success, on_failure)
    logger.debug("Request logging installed")
