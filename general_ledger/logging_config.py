"""
Logging configuration.

Console output for development, JSON lines for log aggregation.
Every module logs through logging.getLogger(__name__); this module
only decides where those records go.

Environment variables:
- LOG_FORMAT: "json" or "console" (default: console)
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
"""

import json
import logging
import logging.config
from datetime import datetime, timezone

from general_ledger.config import get_settings


class JsonFormatter(logging.Formatter):
    """Render a log record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def get_logging_config(level: str, log_format: str) -> dict:
    """Build a dictConfig for the package loggers."""
    if log_format == "json":
        formatter = {"()": "general_ledger.logging_config.JsonFormatter"}
    else:
        formatter = {
            "format": "[{asctime}] {levelname} {name} {message}",
            "style": "{",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "general_ledger": {
                "handlers": ["console"],
                "level": level.upper(),
                "propagate": False,
            },
        },
    }


def configure_logging() -> None:
    settings = get_settings()
    logging.config.dictConfig(
        get_logging_config(settings.LOG_LEVEL, settings.LOG_FORMAT)
    )
