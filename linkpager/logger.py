"""Structured logging utility for linkpager.

Provides plain or JSON-formatted logging with context fields, plus the
exception types shared across the package.
"""
import logging
import json
import os
import sys
import traceback
from typing import Any, Dict, Optional
from datetime import datetime, timezone

# Configure root logger with LOG_LEVEL from environment
_log_level_str = os.environ.get("LOG_LEVEL", "INFO").upper()
_log_level = getattr(logging, _log_level_str, logging.INFO)
logging.basicConfig(
    level=_log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)

_logger_cache: Dict[str, logging.Logger] = {}


def json_logging_enabled() -> bool:
    return os.environ.get("LOG_JSON", "").strip().lower() in {"1", "true", "yes", "on"}


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    __slots__ = ()

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info),
            }

        extra = getattr(record, 'extra_fields', None)
        if extra:
            log_data.update(extra)

        return json.dumps(log_data, default=str)


def get_logger(name: str, json_format: Optional[bool] = None) -> logging.Logger:
    """Get a logger instance with optional JSON formatting.

    Args:
        name: Logger name (typically __name__)
        json_format: If True, use JSON formatter; if None, follow LOG_JSON

    Returns:
        Configured logger instance
    """
    if json_format is None:
        json_format = json_logging_enabled()
    cache_key = f"{name}:{json_format}"
    if cache_key in _logger_cache:
        return _logger_cache[cache_key]

    logger = logging.getLogger(name)
    logger.setLevel(_log_level)

    if json_format and not any(isinstance(h.formatter, JSONFormatter) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.propagate = False

    _logger_cache[cache_key] = logger
    return logger


class ContextLogger:
    """Logger wrapper that attaches fixed context fields (e.g. the watched path)."""

    __slots__ = ("logger", "context")

    def __init__(self, logger: logging.Logger, **context):
        self.logger = logger
        self.context = context

    def _log(self, level: int, msg: str, **extra):
        if not self.logger.isEnabledFor(level):
            return
        record = self.logger.makeRecord(self.logger.name, level, "(unknown file)", 0, msg, (), None)
        record.extra_fields = {**self.context, **extra}
        self.logger.handle(record)

    def info(self, msg: str, **extra):
        self._log(logging.INFO, msg, **extra)


class LinkPagerError(Exception):
    """Base exception for all linkpager errors."""
    pass


class SourceReadError(LinkPagerError):
    """The links file could not be opened or read."""

    def __init__(self, path, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"cannot read links file {path}{detail}")


class WatchError(LinkPagerError):
    """A filesystem watch could not be established."""
    pass


class ConfigurationError(LinkPagerError):
    """Error in configuration or environment setup."""
    pass


class PageNotFound(LinkPagerError):
    """The requested page has no entries."""

    def __init__(self, page: int):
        self.page = page
        super().__init__(f"page {page} is empty")


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def safe_int(value: Any, default: int) -> int:
    """``int(value)``, or ``default`` for blank or non-numeric input."""
    if _blank(value):
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def safe_float(value: Any, default: float, logger: Optional[logging.Logger] = None, context: str = "") -> float:
    if _blank(value):
        return default
    try:
        return float(value)
    except (ValueError, TypeError):
        if logger:
            logger.warning(f"Ignoring {context}={value!r}: not a number")
        return default


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def safe_bool(value: Any, default: bool, logger: Optional[logging.Logger] = None, context: str = "") -> bool:
    if _blank(value):
        return default
    s = str(value).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    if logger:
        logger.warning(f"Ignoring {context}={value!r}: not a boolean")
    return default
