"""
Observability module.

Provides logging configuration, safe structured-logging helpers and
correlation ID tracking for ingestion runs and retrieval calls.
"""

from persona_rag.observability.correlation import (
    clear_correlation_id,
    correlation_scope,
    get_correlation_id,
    set_correlation_id,
)
from persona_rag.observability.logger import configure_logging

__all__ = [
    "configure_logging",
    "correlation_scope",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
]
