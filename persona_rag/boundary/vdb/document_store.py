"""
Document store capability interface.

The ingestion pipeline and the hybrid retriever depend only on this protocol,
so they run unchanged against Postgres/pgvector or the in-memory store.

Dependencies: typing
System role: Store abstraction between core algorithms and persistence
"""

from typing import Iterable, Protocol, Sequence

from persona_rag.boundary.vdb.vector_schemas import DocumentMetadata, DocumentRecord, SearchHit


class DocumentStore(Protocol):
    """Persistence and ranked retrieval of document rows."""

    dimension: int

    async def upsert(
        self,
        id: str,
        content: str,
        embedding: Sequence[float],
        metadata: DocumentMetadata,
    ) -> None: ...

    async def upsert_many(self, records: Sequence[DocumentRecord]) -> int: ...

    async def delete_by_ids(self, ids: Iterable[str]) -> int: ...

    async def list_all_ids(self) -> set[str]: ...

    async def list_ids_by_source(self, source_files: Iterable[str]) -> set[str]: ...

    async def lexical_search(self, query: str, scope: str, limit: int) -> list[SearchHit]: ...

    async def vector_search(
        self,
        query_embedding: Sequence[float],
        scope: str,
        limit: int,
    ) -> list[SearchHit]: ...

    async def close(self) -> None: ...
