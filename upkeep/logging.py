"""Log formatters and the per-request/per-job log context."""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

# Attributes every LogRecord carries; anything else on a record came from extra={...}
RESERVED_LOG_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}

_log_context: contextvars.ContextVar[Mapping[str, Any] | None] = contextvars.ContextVar(
    "upkeep_log_context", default=None
)


def bind_log_context(**context: Any) -> contextvars.Token:
    """Bind fields such as ``request_id`` or ``machine_type`` to later log records.

    Blank values are dropped. Pass the returned token to ``reset_log_context``.
    """
    return _log_context.set({k: v for k, v in context.items() if v not in (None, "")})


def reset_log_context(token: contextvars.Token) -> None:
    # A token from another context (e.g. a worker thread) cannot be reset
    with contextlib.suppress(ValueError):
        _log_context.reset(token)


def current_log_context() -> dict[str, Any]:
    """Snapshot of the bound fields, to hand to a queued sync job."""
    return dict(_log_context.get() or {})


class RequestContextFilter(logging.Filter):
    """Copy the bound log context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in (_log_context.get() or {}).items():
            setattr(record, key, value)
        return True


def extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in RESERVED_LOG_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Extra fields become top-level keys so synchronization counts and request
    ids can be searched directly in the log aggregator. Values JSON cannot
    encode are written as their ``str()``.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **extra_fields(record),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class DevFormatter(logging.Formatter):
    """Console output for local runs: ``time LEVEL logger message | key=value ...``."""

    def format(self, record: logging.LogRecord) -> str:
        line = "{} {:8} {} {}".format(
            self.formatTime(record, "%H:%M:%S"),
            record.levelname,
            record.name,
            record.getMessage(),
        )
        extras = extra_fields(record)
        if extras:
            line += " | " + " ".join(f"{key}={value!r}" for key, value in extras.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line
