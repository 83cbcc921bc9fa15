"""Logging setup for treesnap.

All treesnap loggers hang off the ``treesnap`` package logger, which gets a
single stderr handler the first time it is asked for. ``TREESNAP_LOG_LEVEL``
picks the level and ``TREESNAP_LOG_FORMAT=json`` switches to one JSON object
per line.
"""

import json
import logging
import os
from datetime import datetime, timezone

PACKAGE_LOGGER = "treesnap"

# Attributes passed via `extra=` that the JSON output carries
EVENT_FIELDS = ("command", "reference")


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        event = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        event.update({key: getattr(record, key) for key in EVENT_FIELDS if hasattr(record, key)})
        if record.exc_info:
            event["exception"] = self.formatException(record.exc_info)
        return json.dumps(event)


def _level_from_env() -> int:
    level = logging.getLevelName(os.getenv("TREESNAP_LOG_LEVEL", "WARNING").upper())
    return level if isinstance(level, int) else logging.WARNING


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    if os.getenv("TREESNAP_LOG_FORMAT", "plain").lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    logger.addHandler(handler)
    logger.setLevel(_level_from_env())
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger under the configured treesnap package logger
    """
    _package_logger()
    return logging.getLogger(name)


def set_level(level: int | str) -> None:
    """Override the treesnap log level (used by the CLI --verbose flag)."""
    _package_logger().setLevel(level)
