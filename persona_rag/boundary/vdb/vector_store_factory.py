"""
Document store factory for selecting between Postgres (prod) and memory (dev).

Depends on VECTOR_STORE_STORE_TYPE environment variable.
Provides consistent interface regardless of underlying implementation.

Dependencies: persona_rag.boundary.vdb, persona_rag.configs
System role: Document store instantiation and selection
"""

import logging

from persona_rag.boundary.vdb.document_store import DocumentStore
from persona_rag.boundary.vdb.memory_store import InMemoryDocumentStore
from persona_rag.configs import Settings, get_settings
from persona_rag.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def get_document_store(settings: Settings | None = None) -> DocumentStore:
    """
    Factory function to get the document store based on configuration.

    Args:
        settings: Application settings (cached singleton if None)

    Returns:
        PostgresDocumentStore or InMemoryDocumentStore

    Raises:
        ConfigurationError: If the store type is invalid or the connection
            string is missing
    """
    settings = settings or get_settings()
    store_type = settings.vector_store.store_type.lower()
    dimension = settings.embedding.embedding_dimension

    if store_type == "memory":
        logger.info(
            f"{__name__}:get_document_store - Creating in-memory document store (local dev mode)"
        )
        return InMemoryDocumentStore(dimension=dimension)

    elif store_type == "postgres":
        from persona_rag.boundary.db.connection import (
            get_async_engine,
            get_async_session_factory,
        )
        from persona_rag.boundary.vdb.pg_vector_store import PostgresDocumentStore

        logger.info(f"{__name__}:get_document_store - Creating Postgres document store")
        engine = get_async_engine(settings.database)
        return PostgresDocumentStore(
            session_factory=get_async_session_factory(engine),
            dimension=dimension,
            engine=engine,
        )

    else:
        raise ConfigurationError(
            f"Invalid VECTOR_STORE_STORE_TYPE: {store_type}. "
            f"Must be 'postgres' (production) or 'memory' (dev).",
            setting="VECTOR_STORE_STORE_TYPE",
        )
