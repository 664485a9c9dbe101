"""
logging_config
==============

Logging setup for report generation.

- Interactive runs: human-readable colored format
- Batch runs: JSON format (one object per line)
- Log level: controlled via the ``CONFIGDIFF_LOG_LEVEL`` env variable

Diagnostic context (which report section, which table level) is carried by
:class:`LogContext`, an explicit adapter handed to the code that needs it,
rather than by ambient per-thread state.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, MutableMapping, Optional, Tuple

if TYPE_CHECKING:
    from .settings import ReportSettings

CONTEXT_FIELDS = ("section", "table", "level_index")


class JSONFormatter(logging.Formatter):
    """JSON log formatter for batch runs / log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        for key in CONTEXT_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val
        return json.dumps(log_entry, ensure_ascii=False)


class ReadableFormatter(logging.Formatter):
    """Human-readable colored formatter for interactive runs."""

    COLORS = {
        "DEBUG": "\033[36m",      # cyan
        "INFO": "\033[32m",       # green
        "WARNING": "\033[33m",    # yellow
        "ERROR": "\033[31m",      # red
        "CRITICAL": "\033[35m",   # magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        ts = datetime.now().strftime("%H:%M:%S")
        section = getattr(record, "section", None)
        ctx = f" [{section}]" if section else ""
        msg = record.getMessage()
        base = f"{color}{ts} {record.levelname:<8}{self.RESET} {record.name}{ctx}: {msg}"
        if record.exc_info and record.exc_info[0] is not None:
            base += "\n" + self.formatException(record.exc_info)
        return base


def configure_logging(level: Optional[str] = None, json_format: bool = False) -> None:
    """Set up logging for a report run.

    Reads ``CONFIGDIFF_LOG_LEVEL`` from env when *level* is not given
    (default: INFO).
    Interactive -> ReadableFormatter on stderr
    Batch       -> JSONFormatter on stderr
    """
    level_name = level or os.getenv("CONFIGDIFF_LOG_LEVEL", "INFO")
    numeric_level = getattr(logging, level_name.upper(), logging.INFO)

    formatter: logging.Formatter = JSONFormatter() if json_format else ReadableFormatter()

    # Single stream handler; clearing avoids duplicates when called twice
    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    handler.setLevel(numeric_level)
    root.addHandler(handler)
    root.setLevel(numeric_level)

    logging.getLogger(__name__).debug(
        "Logging configured: level=%s format=%s", level_name, "JSON" if json_format else "readable"
    )


class LogContext(logging.LoggerAdapter):
    """Logger adapter carrying report-section context as record extras.

    Example::

        log = LogContext(logging.getLogger(__name__), section="Run Profiles")
        log.child(table="Steps").warning("row dropped")
    """

    def __init__(self, logger: logging.Logger, **context: Any) -> None:
        super().__init__(logger, dict(context))

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs

    def child(self, **context: Any) -> "LogContext":
        """Return a new adapter with *context* layered over this one's."""
        merged = dict(self.extra or {})
        merged.update(context)
        return LogContext(self.logger, **merged)


def get_context(logger_or_context: Optional[logging.LoggerAdapter], name: str) -> logging.LoggerAdapter:
    """Return *logger_or_context* or a context-free adapter for module *name*."""
    if logger_or_context is not None:
        return logger_or_context
    return LogContext(logging.getLogger(name))


def child_context(log: Optional[logging.LoggerAdapter], name: str, **context: Any) -> LogContext:
    """Layer *context* over *log*, which may be any ``LoggerAdapter`` or None."""
    log = get_context(log, name)
    if isinstance(log, LogContext):
        return log.child(**context)
    merged = dict(log.extra or {})
    merged.update(context)
    return LogContext(log.logger, **merged)


def configure_from_settings(settings: "ReportSettings") -> None:
    """Set up logging from the ``logging:`` block of a loaded config."""
    configure_logging(settings.log_level, json_format=settings.log_format == "json")
