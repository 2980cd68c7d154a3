"""
Database schema bootstrap.

Creates the pgvector extension, the documents table (with its generated
search vector) and the GIN/HNSW indexes.

Dependencies: sqlalchemy, persona_rag.configs
System role: Database schema initialization

Usage:
    persona-rag-init-db
    python -m persona_rag.boundary.db.create_tables
"""

import logging
import sys

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from persona_rag.boundary.db.base import Base
from persona_rag.boundary.db.connection import get_engine
from persona_rag.core.exceptions import ConfigurationError
from persona_rag.observability.log_utils import log_exception_with_context
from persona_rag.observability.logger import configure_logging

# Import all models to register them with Base.metadata
from persona_rag.boundary.db.document_model import DocumentModel  # noqa: F401

logger = logging.getLogger(__name__)


def create_all_tables(engine: Engine | None = None) -> None:
    """
    Create the vector extension and all tables from registered ORM models.

    Idempotent: uses IF NOT EXISTS / checkfirst, so safe to run multiple
    times. Existing tables and data remain unchanged.

    Args:
        engine: Engine to use (created from settings if None)

    Raises:
        SQLAlchemyError: If the connection fails or the extension is unavailable
    """
    engine = engine or get_engine()

    with engine.begin() as conn:
        conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
        logger.info(f"{__name__}:create_all_tables - vector extension ready")
        Base.metadata.create_all(bind=conn)

    logger.info(
        f"{__name__}:create_all_tables - Tables created",
        extra={"tables": sorted(Base.metadata.tables)},
    )


def drop_all_tables(engine: Engine | None = None) -> None:
    """
    Drop all tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.

    Args:
        engine: Engine to use (created from settings if None)
    """
    engine = engine or get_engine()
    Base.metadata.drop_all(bind=engine)
    logger.warning(f"{__name__}:drop_all_tables - All tables dropped")


def main() -> int:
    """Console entry point for schema creation."""
    configure_logging()
    try:
        create_all_tables()
    except ConfigurationError as e:
        logger.error(f"{__name__}:main - {e}")
        return 1
    except SQLAlchemyError as e:
        log_exception_with_context(logger, f"{__name__}:main - Schema creation failed", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
