"""
Correlation ID context manager.

Manages correlation ID propagation across async boundaries using contextvars.
Each ingestion run and each retrieval call gets its own ID so that the log
lines of concurrent work can be told apart.

Dependencies: contextvars, logging
System role: Run/request tracing across log lines
"""

from contextlib import contextmanager
from contextvars import ContextVar
import logging
from typing import Iterator
import uuid

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set correlation ID in context.

    Args:
        correlation_id: Optional correlation ID (generates new if None)

    Returns:
        str: The correlation ID that was set
    """
    value = correlation_id or uuid.uuid4().hex[:12]
    correlation_id_ctx.set(value)
    return value


def get_correlation_id() -> str:
    """
    Get current correlation ID from context.

    Returns:
        str: Current correlation ID ("" when unset)
    """
    return correlation_id_ctx.get()


def clear_correlation_id() -> None:
    """Clear correlation ID from context."""
    correlation_id_ctx.set("")


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """
    Set a correlation ID for the duration of a block.

    The previous ID is restored on exit.

    Args:
        correlation_id: Optional correlation ID (generates new if None)

    Yields:
        str: The correlation ID in effect inside the block
    """
    value = correlation_id or uuid.uuid4().hex[:12]
    token = correlation_id_ctx.set(value)
    try:
        yield value
    finally:
        correlation_id_ctx.reset(token)


class CorrelationIdFilter(logging.Filter):
    """Attach the current correlation ID to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True
