"""
Document ORM model.

One row per ingested chunk: deterministic UUID, raw content, embedding
vector, JSONB metadata and a Postgres-generated full-text search vector.

Dependencies: sqlalchemy, pgvector, persona_rag.boundary.db.base
System role: Document store schema
"""

import uuid

from pgvector.sqlalchemy import Vector
from sqlalchemy import Computed, Index, Text
from sqlalchemy.dialects.postgresql import JSONB, TSVECTOR, UUID
from sqlalchemy.orm import Mapped, mapped_column

from persona_rag.boundary.db.base import Base

# Fixed by the embedding model (text-embedding-3-small); a change requires re-ingestion
EMBEDDING_DIMENSION = 1536
TEXT_SEARCH_CONFIG = "english"


class DocumentModel(Base):
    """
    Document chunk ORM model.

    Rows are written only by the ingestion pipeline through an upsert keyed
    on the deterministic chunk id, so re-ingesting unchanged sources rewrites
    rows in place. search_vector is a STORED generated column and always
    reflects the current content; it is never written by the application.

    Attributes:
        id: Deterministic UUID v5 of (source path, persona scope, chunk index)
        content: Chunk text
        embedding: VECTOR(1536) embedding of content
        metadata_: JSONB {"source_file": str, "persona_ids": [str, ...]}
        search_vector: to_tsvector('english', content), generated by Postgres

    Indexes:
        GIN(metadata) for persona scope containment filters
        GIN(search_vector) for ranked full-text search
        HNSW(embedding vector_cosine_ops) for approximate nearest neighbours
    """

    __tablename__ = "documents"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    embedding: Mapped[list[float]] = mapped_column(
        Vector(EMBEDDING_DIMENSION),
        nullable=False,
    )

    # "metadata" is reserved on declarative classes
    metadata_: Mapped[dict | None] = mapped_column(
        "metadata",
        JSONB,
        nullable=True,
    )

    search_vector: Mapped[str | None] = mapped_column(
        TSVECTOR,
        Computed(f"to_tsvector('{TEXT_SEARCH_CONFIG}', content)", persisted=True),
    )


Index(
    "ix_documents_metadata",
    DocumentModel.__table__.c["metadata"],
    postgresql_using="gin",
)
Index(
    "ix_documents_search_vector",
    DocumentModel.__table__.c.search_vector,
    postgresql_using="gin",
)
Index(
    "ix_documents_embedding_hnsw",
    DocumentModel.__table__.c.embedding,
    postgresql_using="hnsw",
    postgresql_ops={"embedding": "vector_cosine_ops"},
)
