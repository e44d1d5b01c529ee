"""JSON logging for the ledger service.

Every line carries the service name, environment and the request id bound by
``CorrelationIdMiddleware``. Session ids are partition keys that a client can
replay, so they are never written verbatim: the formatter replaces them with a
short ``session_ref`` fingerprint that still lets lines from one session be
grouped.
"""

from __future__ import annotations

import hashlib
import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

from .config import Settings
from .context import get_request_id

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "request_id",
}


def session_ref(session_id: str) -> str:
    """Return a stable, non-reversible short reference for a session id."""

    return hashlib.sha256(session_id.encode("utf-8")).hexdigest()[:12]


class JsonLogFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    def __init__(self, *, service: str, environment: str) -> None:
        super().__init__()
        self._service = service
        self._environment = environment

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self._service,
            "environment": self._environment,
            "request_id": getattr(record, "request_id", "-"),
        }

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS:
                continue
            if key == "session_id":
                payload["session_ref"] = session_ref(str(value)) if value is not None else None
                continue
            payload.setdefault(key, value if _is_json_safe(value) else str(value))

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


def _is_json_safe(value: Any) -> bool:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return False
    return True


class RequestContextFilter(logging.Filter):
    """Stamp records with the request id of the current context."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.request_id = get_request_id()
        return True


def configure_logging(settings: Settings) -> None:
    """Route the root and uvicorn loggers through the JSON formatter.

    ``uvicorn.access`` is held at WARNING: ``CorrelationIdMiddleware`` already
    writes one line per request with the request id attached.
    """

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.captureWarnings(True)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": JsonLogFormatter,
                    "service": settings.project_name,
                    "environment": settings.environment,
                }
            },
            "filters": {
                "request_context": {"()": RequestContextFilter},
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "json",
                    "filters": ["request_context"],
                }
            },
            "root": {"handlers": ["stdout"], "level": level},
            "loggers": {
                "uvicorn": {"handlers": ["stdout"], "level": level, "propagate": False},
                "uvicorn.access": {
                    "handlers": ["stdout"],
                    "level": max(level, logging.WARNING),
                    "propagate": False,
                },
            },
        }
    )


__all__ = ["JsonLogFormatter", "RequestContextFilter", "configure_logging", "session_ref"]
