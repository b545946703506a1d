"""JSON logging for the FitFX services.

Every record is written as one JSON object carrying the active correlation id.
Anything passed through :func:`log_event` is scrubbed first: user ids, garment
photos, free-text notes and payment references never reach the log stream.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import uuid
from typing import Any, Dict, Iterator, Mapping

SERVICE_NAME = "fitfx"
CORRELATION_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "fitfx_correlation_id", default=None
)

# Attributes every LogRecord has; only the extras a caller adds are emitted.
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

SENSITIVE_KEYS = frozenset(
    {
        "user_id",
        "email",
        "image",
        "image_url",
        "imageUrl",
        "notes",
        "payment_id",
        "order_id",
        "razorpayPaymentId",
        "razorpayOrderId",
        "gemini_api_key",
    }
)
MAX_FIELD_LENGTH = 200
_EMAIL = re.compile(r"[\w.\-+]+@[\w\-]+(\.[\w\-]+)+")


def _scrub_text(value: str) -> str:
    if value.startswith("data:image"):
        return "[redacted-image]"
    value = _EMAIL.sub("[redacted-email]", value)
    if len(value) > MAX_FIELD_LENGTH:
        return f"{value[:MAX_FIELD_LENGTH]}..."
    return value


def redact_for_log(payload: Any) -> Any:
    """Return a copy of ``payload`` that is safe to log."""

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _scrub_text(payload)
    if isinstance(payload, Mapping):
        return {
            key: "[redacted]" if key in SENSITIVE_KEYS else redact_for_log(value)
            for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple, set)):
        return [redact_for_log(item) for item in payload]
    return _scrub_text(str(payload))


class JsonFormatter(logging.Formatter):
    """Render records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "service": SERVICE_NAME,
            "logger": record.name,
            "event": getattr(record, "event", message),
            "message": message,
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES and key not in entry
        }
        entry.update(redact_for_log(extras))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Route the root logger through a single JSON handler.

    ``LOG_LEVEL`` picks the level when none is given.
    """

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=level or os.getenv("LOG_LEVEL", "INFO"), handlers=[handler], force=True)


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Adopt ``correlation_id``, reuse the current one, or mint a new one."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    minted = uuid.uuid4().hex
    CORRELATION_ID.set(minted)
    return minted


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Scope a correlation id to a block, restoring the previous one afterwards."""

    token = CORRELATION_ID.set(correlation_id or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log a named event with redacted structured fields.

    ``exc_info`` and ``correlation_id`` are taken out of ``fields`` and handled
    by the logging call itself.
    """

    exc_info = fields.pop("exc_info", None)
    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    extra = {key: value for key, value in redact_for_log(fields).items() if key not in _RECORD_ATTRIBUTES}
    logger.log(level, event, exc_info=exc_info, extra={**extra, "event": event, "correlation_id": correlation_id})


__all__ = [
    "CORRELATION_ID",
    "JsonFormatter",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "redact_for_log",
]
