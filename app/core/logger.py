"""
Structured logging for the Catalog Service.

Every entry carries the service name, environment and the correlation ID of
the request (or event handler) it was written from. Output goes to the
console, coloured or as JSON lines, and optionally to a JSON file.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from app.core.config import config
from app.middleware.correlation_id import get_correlation_id

# Attributes every LogRecord carries; anything else came in through `extra`
_RESERVED_RECORD_KEYS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "structured"}


class StructuredLogger:
    """
    Thin wrapper over a standard library logger named after the service.

    Keyword arguments besides `metadata`, `user_id`, `correlation_id` and
    `error` are merged into the entry as top-level fields.
    """

    def __init__(self, name: str = config.service_name):
        self.service_name = name
        self.environment = config.environment
        self.level = getattr(logging, config.log_level.upper(), logging.INFO)
        self._logger = logging.getLogger(name)
        self._configure()

    def _configure(self):
        self._logger.handlers.clear()
        self._logger.setLevel(self.level)
        self._logger.propagate = False

        if config.log_to_console:
            stream = logging.StreamHandler(sys.stdout)
            stream.setFormatter(JSONFormatter() if config.log_format == "json" else ConsoleFormatter())
            self._logger.addHandler(stream)

        if config.log_to_file:
            log_dir = os.path.dirname(config.log_file_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(config.log_file_path)
            file_handler.setFormatter(JSONFormatter())
            self._logger.addHandler(file_handler)

    def _entry(
        self,
        level: int,
        correlation_id: Optional[str],
        user_id: Optional[str],
        metadata: Optional[Dict[str, Any]],
        extra_fields: Dict[str, Any],
    ) -> Dict[str, Any]:
        entry = {
            "level": logging.getLevelName(level),
            "service": self.service_name,
            "environment": self.environment,
            "correlationId": correlation_id or get_correlation_id(),
        }
        if user_id:
            entry["userId"] = user_id
        if metadata:
            entry["metadata"] = metadata
        entry.update(extra_fields)
        return entry

    def log(
        self,
        level: int,
        message: str,
        correlation_id: Optional[str] = None,
        user_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        error: Optional[Union[str, Exception]] = None,
        **kwargs
    ):
        if not self._logger.isEnabledFor(level):
            return
        if error is not None:
            metadata = {**(metadata or {}), "error": _describe_error(error)}
        entry = self._entry(level, correlation_id, user_id, metadata, kwargs)
        self._logger.log(level, message, extra={"structured": entry})

    def debug(self, message: str, **kwargs):
        self.log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self.log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self.log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self.log(logging.ERROR, message, **kwargs)


def _describe_error(error: Union[str, Exception]) -> Dict[str, str]:
    if isinstance(error, Exception):
        return {"type": type(error).__name__, "message": str(error)}
    return {"message": str(error)}


class JSONFormatter(logging.Formatter):
    """One JSON object per line"""

    def format(self, record):
        data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        data.update(getattr(record, "structured", None) or {})
        data.update({k: v for k, v in record.__dict__.items() if k not in _RESERVED_RECORD_KEYS})
        return json.dumps(data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Coloured single-line output for local development"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
    }
    RESET = "\033[0m"

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        line = f"{color}[{timestamp}] {record.levelname}{self.RESET} - {record.getMessage()}"

        structured = getattr(record, "structured", None) or {}
        if structured.get("correlationId"):
            line += f" [cid={structured['correlationId']}]"
        if structured.get("metadata"):
            line += f" {json.dumps(structured['metadata'], default=str)}"
        return line


logger = StructuredLogger()
