"""JSON line logging for the engine and app services.

Callers attach structured fields with ``extra={"context": {...}}``; they are
merged into the top level of the emitted record.
"""

import json
import logging
import sys
from datetime import datetime, timezone

from loanquote.config import config

RESERVED_FIELDS = ("ts", "level", "logger", "message", "env")


class JsonLogFormatter(logging.Formatter):
    def format(self, record):
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "env": config.ENV,
        }
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict):
            # context never overwrites the envelope
            payload.update({k: v for k, v in ctx.items() if k not in RESERVED_FIELDS})
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def get_logger(name: str) -> logging.Logger:
    """Return ``name``'s logger, attaching the stdout JSON handler once."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        logger.setLevel(config.LOG_LEVEL.upper())
        logger.propagate = False
    return logger
