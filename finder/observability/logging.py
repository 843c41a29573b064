"""
Structured JSON logging with run ID propagation.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .context import get_run_id

# Attributes every LogRecord carries; anything else arrived via extra={...}
_RESERVED_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {
    "message",
    "asctime",
    "taskName",
}


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Output format:
    {
        "timestamp": "2026-02-07T10:30:00.000Z",
        "level": "INFO",
        "logger": "finder.directory.reconcile",
        "message": "Added 2 team member(s)",
        "run_id": "team-sync-3f9a0c1d",
        ...
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        run_id = get_run_id()
        if run_id:
            log_obj["run_id"] = run_id

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Fields passed via extra={...}
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_obj[key] = value

        return json.dumps(log_obj, default=str)


class HumanFormatter(logging.Formatter):
    """Human-readable formatter for local development."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        run_id = get_run_id()
        rid_str = f"[{run_id}] " if run_id else ""
        line = f"{timestamp} [{record.levelname}] {record.name}: {rid_str}{record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON format. If None, auto-detect based on environment.
    """
    if json_format is None:
        # JSON when not attached to a terminal (e.g. under a process manager)
        json_format = not sys.stderr.isatty()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if json_format else HumanFormatter())
    root_logger.addHandler(handler)

    # googleapiclient logs every discovery-cache miss at WARNING
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)
    logging.getLogger("httpx").setLevel(logging.WARNING)
