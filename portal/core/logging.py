"""
Logging utilities shared across the portal.

Request-scoped values (request id, acting principal) live in context
variables so that every log record emitted while handling a request can be
tagged with them, regardless of which module produced the record.
"""

import logging
from contextvars import ContextVar
from typing import Optional

# Context variables for request tracking
request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
user_id: ContextVar[Optional[str]] = ContextVar("user_id", default=None)


class RequestContextFilter(logging.Filter):
    """Copy the current request id and principal onto each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id.get()
        if not hasattr(record, "user_id"):
            record.user_id = user_id.get()
        return True


class LoggingContext:
    """
    Context manager that binds a request id and/or user id for the
    duration of a block.

    Usage:
        with LoggingContext(request="abc", user="jane@example.org"):
            logger.info("tagged")
    """

    def __init__(self, request: Optional[str] = None, user: Optional[str] = None):
        self.request = request
        self.user = user
        self._tokens = []

    def __enter__(self) -> "LoggingContext":
        if self.request is not None:
            self._tokens.append((request_id, request_id.set(self.request)))
        if self.user is not None:
            self._tokens.append((user_id, user_id.set(self.user)))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger for the given name.

    Args:
        name: Logger name (defaults to the ``portal`` root logger)

    Returns:
        Standard library logger, configured by ``setup_logging``
    """
    return logging.getLogger(name or "portal")


__all__ = [
    "get_logger",
    "LoggingContext",
    "RequestContextFilter",
    "request_id",
    "user_id",
]
