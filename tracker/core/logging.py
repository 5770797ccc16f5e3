"""
Structured logging configuration using python-json-logger.
Development runs get readable lines; everything else gets one JSON object per record.
"""

import logging
import sys
from typing import Any

from pythonjsonlogger import jsonlogger

from tracker.core.config import settings

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FIELDS = "%(asctime)s %(level)s %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Library loggers that drown out request handling at INFO
QUIET_LOGGERS = {"uvicorn.access": logging.WARNING, "passlib": logging.ERROR}


class TrackerJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that stamps every record with service metadata."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["service"] = settings.PROJECT_NAME
        log_record["version"] = settings.VERSION
        log_record["level"] = record.levelname


def build_formatter(debug: bool) -> logging.Formatter:
    if debug:
        return logging.Formatter(PLAIN_FORMAT, datefmt=DATE_FORMAT)
    return TrackerJsonFormatter(JSON_FIELDS, datefmt=DATE_FORMAT)


def setup_logging() -> None:
    """Attach a stdout handler to the root logger, formatted for the current mode."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(settings.DEBUG))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
    root_logger.addHandler(handler)

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
