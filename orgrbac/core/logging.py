"""
Logging configuration.

Production emits one JSON object per line so records can be shipped to a log
collector; every other environment gets a readable single-line format. Both
include the id of the request being handled, when there is one.
"""

import json
import logging
import logging.config
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict

from orgrbac.core.settings import Settings

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    """Copies the current request id onto every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "requestId": getattr(record, "request_id", "-"),
        }
        if record.exc_info:
            log["error"] = {
                "name": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]),
            }
        return json.dumps(log)


def get_logging_config(settings: Settings) -> Dict[str, Any]:
    formatter = "json" if settings.is_production else "simple"
    log_level = settings.LOG_LEVEL.upper()

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "request_id": {"()": "orgrbac.core.logging.RequestIdFilter"},
        },
        "formatters": {
            "json": {"()": "orgrbac.core.logging.JSONFormatter"},
            "simple": {
                "format": "{asctime} {levelname} [{request_id}] {name} {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "filters": ["request_id"],
                "level": log_level,
            },
        },
        "loggers": {
            "orgrbac": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": False,
            },
            "uvicorn.error": {"level": "INFO"},
        },
    }


def configure_logging(settings: Settings) -> None:
    logging.config.dictConfig(get_logging_config(settings))
