"""
Logging configuration.

stdout carries the MCP stream when serving over stdio, so all log output
goes to stderr.
"""

import json
import logging
import sys
from datetime import datetime, timezone

from .settings import LoggingSettings

LOGGER_NAME = "superdb_mcp"


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for extra in ("tool", "method", "duration_ms", "exit_code"):
            if hasattr(record, extra):
                log_data[extra] = getattr(record, extra)

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(log_data)


def setup_logging(settings: LoggingSettings | None = None) -> logging.Logger:
    """Setup structured logging with JSON or text format."""
    settings = settings or LoggingSettings.from_env()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if settings.log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ))

    logger.addHandler(handler)
    logger.propagate = False
    return logger
