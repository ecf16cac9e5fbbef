"""Structured logging for the scraper and the API.

Features:
- single stdout handler
- JSON logs in production (easy ingestion), text logs elsewhere
- context fields (channel/title/stage) passed through ``extra=``
"""

from __future__ import annotations

import json
import logging
import sys
import time
from typing import Any

CONTEXT_FIELDS = ("channel", "title", "stage", "query", "cycle")

# ---------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------


class JsonFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        base: dict[str, Any] = {
            "ts": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k in CONTEXT_FIELDS:
            if hasattr(record, k):
                base[k] = getattr(record, k)

        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(base, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Format log records as human-readable text."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(record.created)),
            record.levelname,
            record.name,
        ]

        ctx = [
            f"{k}={getattr(record, k)}"
            for k in CONTEXT_FIELDS
            if getattr(record, k, None) not in (None, "")
        ]
        if ctx:
            parts.append("[" + " ".join(ctx) + "]")

        parts.append(record.getMessage())
        s = " ".join(parts)

        if record.exc_info:
            s += "\n" + self.formatException(record.exc_info)

        return s


# ---------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------


def setup_logging(env: str = "development", level: str | None = None) -> logging.Logger:
    """
    Configure the root logger for the process.

    Production environments ("production"/"prod") get JSON lines at INFO,
    everything else gets text at DEBUG. ``level`` overrides the default.
    """
    production = env.lower() in ("production", "prod")
    default_level = "INFO" if production else "DEBUG"

    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or default_level).upper(), logging.INFO))

    # Prevent duplicate handlers in repeated calls
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if production else TextFormatter())
    root.addHandler(handler)

    # Third-party clients are chatty at DEBUG
    for noisy in ("urllib3", "httpx", "httpcore", "grpc"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return root
