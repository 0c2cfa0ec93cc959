"""
Logging setup for the todo server.

One `todo_app` logger, configured at import:

- console lines for humans, each tagged with the request's correlation ID
- errors additionally written as JSON lines to `LOG_FILE_PATH`, when set

Per-request fields (endpoint, method, status_code) are kept in a context
variable by `LoggingContextMiddleware` and merged into JSON records.
"""

import json
import logging
import sys
from contextvars import ContextVar
from typing import Any

from todo_app.settings import app_settings

log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})

# Attributes every LogRecord has; anything else came in through `extra=`
_RESERVED_RECORD_KEYS = frozenset(logging.makeLogRecord({}).__dict__) | {
    "message",
    "asctime",
    "correlation_id",
}

DATE_FMT = "%Y-%m-%d %H:%M:%S"


def get_correlation_id() -> str:
    # Imported lazily: the middleware package imports this module
    from todo_app.middlewares.correlation_id import (
        get_correlation_id as _current_cid,
    )

    return _current_cid()


def set_log_context(**fields: Any) -> None:
    """
    Merge fields into the current request's log context.

    Example:
        >>> set_log_context(endpoint="/todos", method="POST")
    """
    log_context.set({**log_context.get(), **fields})


def get_log_context() -> dict[str, Any]:
    return log_context.get()


def clear_log_context() -> None:
    log_context.set({})


class StructuredJSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Carries level, logger, message and source location, the correlation
    ID, the request's log context, `extra=` fields and the formatted
    traceback when there is one.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, DATE_FMT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
            "environment": app_settings.ENVIRONMENT,
        }

        if cid := get_correlation_id():
            payload["request_id"] = cid
        payload.update(get_log_context())
        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_KEYS
        )

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class HumanReadableFormatter(logging.Formatter):
    """
    Console formatter.

    INFO lines stay short; every other level also shows where the record
    was logged from.
    """

    SHORT_FMT = "%(asctime)s - [%(correlation_id)s] %(levelname)s: %(message)s"
    LONG_FMT = (
        "%(asctime)s - [%(correlation_id)s] %(levelname)s: "
        "%(module)s.%(funcName)s:%(lineno)d - %(message)s"
    )

    def __init__(self) -> None:
        super().__init__()
        self._short = logging.Formatter(self.SHORT_FMT, datefmt=DATE_FMT)
        self._long = logging.Formatter(self.LONG_FMT, datefmt=DATE_FMT)

    def format(self, record: logging.LogRecord) -> str:
        record.correlation_id = get_correlation_id() or "-"
        if record.levelno == logging.INFO:
            return self._short.format(record)
        return self._long.format(record)


def setup_logging() -> logging.Logger:
    """
    Configure the `todo_app` logger from `app_settings`.

    Safe to call again; existing handlers are replaced.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger("todo_app")
    logger.setLevel(app_settings.LOG_LEVEL.upper())
    logger.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(HumanReadableFormatter())
    logger.addHandler(console)

    if app_settings.LOG_FILE_PATH:
        try:
            errors_file = logging.FileHandler(app_settings.LOG_FILE_PATH)
        except OSError as e:
            logger.warning(f"Could not open log file: {e}")
        else:
            errors_file.setLevel(logging.ERROR)
            errors_file.setFormatter(StructuredJSONFormatter())
            logger.addHandler(errors_file)

    return logger


logger = setup_logging()
