"""Logging configuration for the service.

Questions and generated answers carry patient data, so log lines refer to
them only through ``text_fingerprint``.
"""

from __future__ import annotations

import contextvars
import hashlib
import logging

from trustgate.config import settings

LOGGER_NAME = "trustgate"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s request_id=%(request_id)s"

request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id",
    default=None,
)


def _current_request_id() -> str:
    return request_id_var.get() or "-"


class RequestIdFilter(logging.Filter):
    """Attach request_id from contextvars to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = getattr(record, "request_id", None) or _current_request_id()
        return True


def text_fingerprint(text: str | None, length: int = 16) -> str:
    """Return a short sha256 prefix identifying ``text`` without revealing it."""
    digest = hashlib.sha256((text or "").encode("utf-8")).hexdigest()
    return digest[:length]


def configure_logging() -> None:
    """Configure structured logging for the service."""
    factory = logging.getLogRecordFactory()

    def record_factory(*args, **kwargs):
        record = factory(*args, **kwargs)
        if not hasattr(record, "request_id"):
            record.request_id = _current_request_id()
        return record

    logging.setLogRecordFactory(record_factory)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    request_filter = RequestIdFilter()
    root_logger = logging.getLogger()
    root_logger.addFilter(request_filter)
    for handler in root_logger.handlers:
        handler.addFilter(request_filter)
    logging.getLogger(LOGGER_NAME).setLevel(
        getattr(logging, settings.log_level.upper(), logging.INFO)
    )
