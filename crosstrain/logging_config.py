"""Structured JSON logging for the engine.

Services attach decision context to records as ``ctx_*`` attributes via
``log_context``; the formatter groups them under ``context`` with the
prefix removed. The root level follows the APP_ENV profile unless given.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from crosstrain.config import Settings, get_settings

CONTEXT_PREFIX = "ctx_"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        context = {
            key[len(CONTEXT_PREFIX):]: value
            for key, value in vars(record).items()
            if key.startswith(CONTEXT_PREFIX)
        }
        if context:
            entry["context"] = context
        if record.exc_info and record.exc_info[1]:
            exc = record.exc_info[1]
            entry["exception"] = {"type": type(exc).__name__, "message": str(exc)}
        return json.dumps(entry, default=str)


def log_context(**fields: Any) -> dict[str, Any]:
    """Build the ``extra=`` mapping for a log call: log_context(sport="padel")."""
    return {f"{CONTEXT_PREFIX}{name}": value for name, value in fields.items()}


def setup_logging(level: str | None = None, settings: Settings | None = None) -> None:
    """Route logs to stdout as JSON.

    ``level`` defaults to the environment profile's log level. Safe to call
    repeatedly: the level is re-applied, the handler is installed once.
    """
    settings = settings or get_settings()
    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))

    if any(isinstance(h.formatter, JSONFormatter) for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
