"""
adboard/core/logging.py

Purpose: Logging configuration

- JSON records in production, coloured lines in development
- Per-event context (user_id, state) carried in a ContextVar
- Quiets chatty third-party loggers
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from adboard.core.config import settings

CONTEXT_FIELDS = ("user_id", "state", "event")

_log_context: ContextVar[Optional[Dict[str, Any]]] = ContextVar("adboard_log_context", default=None)


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per record, for log shipping in production.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """
    Short coloured lines with the chat and conversation state appended.
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        message = f"{color}[{timestamp}] {record.levelname:<8}{self.RESET} {record.name}: {record.getMessage()}"

        context_parts = []
        if hasattr(record, "user_id"):
            context_parts.append(f"chat={record.user_id}")
        if hasattr(record, "state"):
            context_parts.append(f"state={record.state}")

        if context_parts:
            message += f" [{' '.join(context_parts)}]"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


def setup_logging():
    """
    Installs a single stdout handler on the root logger.

    The handler carries a ContextFilter, so every record that reaches it
    picks up the active LogContext, whichever logger emitted it.
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if settings.is_production else DevelopmentFormatter())
    handler.addFilter(ContextFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for noisy in ("httpx", "httpcore", "motor", "pymongo", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger = logging.getLogger("adboard")
    logger.info(f"Logging configured ({settings.ENVIRONMENT}, level {settings.LOG_LEVEL})")

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Returns a logger namespaced under "adboard".
    """
    if name.startswith("adboard"):
        return logging.getLogger(name)
    return logging.getLogger(f"adboard.{name}")


class ContextFilter(logging.Filter):
    """
    Copies the active LogContext fields onto each record.

    Fields passed explicitly through `extra=` win over the context.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in current_log_context().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def current_log_context() -> Dict[str, Any]:
    return _log_context.get() or {}


class LogContext:
    """
    Context manager for adding structured context to logs.

    The fields live in a ContextVar, so concurrent events handled in
    separate tasks never see each other's user_id or state. Nested
    contexts extend the outer one.

    Usage:
        with LogContext(user_id=123, state="AWAITING_MEDIA"):
            logger.info("Processing media")
    """

    def __init__(self, **kwargs):
        self.context = kwargs
        self._token = None

    def __enter__(self):
        self._token = _log_context.set({**current_log_context(), **self.context})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _log_context.reset(self._token)
