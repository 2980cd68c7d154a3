"""
Document store boundary layer.

Provides the store protocol, its two implementations and the factory:
- PostgresDocumentStore: pgvector + full-text search (production)
- InMemoryDocumentStore: dict-backed store for local development and tests

System role: Store adapter for ingestion and hybrid retrieval
"""

from persona_rag.boundary.vdb.document_store import DocumentStore
from persona_rag.boundary.vdb.memory_store import InMemoryDocumentStore
from persona_rag.boundary.vdb.vector_schemas import (
    GLOBAL_SCOPE,
    DocumentMetadata,
    DocumentRecord,
    SearchHit,
)
from persona_rag.boundary.vdb.vector_store_factory import get_document_store

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "GLOBAL_SCOPE",
    "DocumentMetadata",
    "DocumentRecord",
    "SearchHit",
    "get_document_store",
]
