"""Structured logging configuration for voicenav.

One stream handler on the "voicenav" logger, JSON by default. Level and
format come from VOICENAV_LOG_LEVEL and VOICENAV_LOG_FORMAT.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional

# Keys redacted from log context
SENSITIVE_KEYS = {
    "password", "token", "secret", "apikey", "api_key",
    "authorization", "credential", "auth", "key", "bearer",
}

_STANDARD_FIELDS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "exc_info",
    "exc_text",
    "stack_info",
    "taskName",
}


class StructuredFormatter(logging.Formatter):
    """JSON log formatter.

    One JSON object per record: UTC timestamp, level, logger name, the
    event name as message, and any ``extra=`` fields under "context".

    Sensitive keys (api_key, token, ...) are redacted.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = {
            k: ("[REDACTED]" if k.lower() in SENSITIVE_KEYS else v)
            for k, v in record.__dict__.items()
            if k not in _STANDARD_FIELDS and not k.startswith("_")
        }
        if extras:
            log_data["context"] = extras

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter, used when VOICENAV_LOG_FORMAT=text."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure logging for all voicenav loggers.

    Args:
        level: Optional log level override. Defaults to VOICENAV_LOG_LEVEL (INFO).
        log_format: Optional format override. Defaults to VOICENAV_LOG_FORMAT (json).
    """
    if level is None:
        level = os.getenv("VOICENAV_LOG_LEVEL", "INFO")
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_format is None:
        log_format = os.getenv("VOICENAV_LOG_FORMAT", "json")
    formatter = TextFormatter() if log_format.lower() == "text" else StructuredFormatter()

    logger = logging.getLogger("voicenav")
    logger.setLevel(log_level)

    # Idempotent: one owned handler, reformatted on reconfigure
    handler = next(
        (h for h in logger.handlers if getattr(h, "_voicenav_handler", False)), None
    )
    if handler is None:
        handler = logging.StreamHandler()
        handler._voicenav_handler = True
        logger.addHandler(handler)
    handler.setFormatter(formatter)

    logger.propagate = False
