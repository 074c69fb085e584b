# src/rentcore/adapters/logging_utils.py
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .config import config


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line; ``extra={"context": {...}}`` is merged in."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
            "env": config.ENV,
        }
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict):
            payload.update(ctx)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        # dates and Decimals end up in context dicts
        return json.dumps(payload, default=str)


def log_context(**fields: Any) -> dict[str, Any]:
    """Build the ``extra`` mapping for a structured log call."""
    return {"context": fields}


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        logger.setLevel(config.LOG_LEVEL.upper())
        logger.propagate = False
    return logger
