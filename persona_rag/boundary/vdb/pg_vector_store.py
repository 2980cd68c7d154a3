"""
Postgres document store for production retrieval.

Implements the DocumentStore protocol on top of SQLAlchemy's async session
factory. Each call checks a pooled session out, runs its statement(s) and
returns the session; writes run in their own transaction.

Dependencies: sqlalchemy, pgvector, persona_rag.boundary.db
System role: Production document store (Postgres + pgvector)
"""

import logging
from typing import Iterable, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from persona_rag.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from persona_rag.boundary.db.document_model import EMBEDDING_DIMENSION
from persona_rag.boundary.vdb.vector_schemas import (
    DocumentMetadata,
    DocumentRecord,
    SearchHit,
)
from persona_rag.core.exceptions import DimensionMismatchError, VectorStoreError

logger = logging.getLogger(__name__)


class PostgresDocumentStore:
    """
    Postgres/pgvector document store.

    Wraps DocumentCRUD with session lifecycle, dimension validation and
    error translation. Failures are not retried.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        crud: DocumentCRUD | None = None,
        dimension: int = EMBEDDING_DIMENSION,
        engine: AsyncEngine | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            session_factory: Async session factory bound to the shared engine
            crud: Statement builder (module singleton if None)
            dimension: Expected embedding length (must match VECTOR(n))
            engine: Engine owned by this store, disposed on close()
        """
        self._session_factory = session_factory
        self._engine = engine
        self._crud = crud or document_crud
        self.dimension = dimension

    def _check_dimension(self, embedding: Sequence[float], operation: str) -> None:
        if len(embedding) != self.dimension:
            raise DimensionMismatchError(self.dimension, len(embedding), operation)

    async def upsert(
        self,
        id: str,
        content: str,
        embedding: Sequence[float],
        metadata: DocumentMetadata,
    ) -> None:
        """
        Insert or replace a single row.

        Raises:
            DimensionMismatchError: Embedding has the wrong length
            VectorStoreError: Database failure
        """
        await self.upsert_many(
            [DocumentRecord(id=id, content=content, embedding=list(embedding), metadata=metadata)]
        )

    async def upsert_many(self, records: Sequence[DocumentRecord]) -> int:
        """
        Insert or replace a batch of rows in one transaction.

        Args:
            records: Rows to write

        Returns:
            Number of rows written

        Raises:
            DimensionMismatchError: Any embedding has the wrong length
            VectorStoreError: Database failure
        """
        for record in records:
            self._check_dimension(record.embedding, "upsert")
        if not records:
            return 0

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    return await self._crud.upsert_many(session, records)
        except SQLAlchemyError as e:
            raise VectorStoreError(
                message=f"Failed to upsert documents: {e}",
                operation="upsert",
                details={"row_count": len(records)},
            ) from e

    async def delete_by_ids(self, ids: Iterable[str]) -> int:
        """
        Delete rows by id; unknown ids are ignored.

        Returns:
            Number of rows deleted

        Raises:
            VectorStoreError: Database failure
        """
        keys = list(ids)
        if not keys:
            return 0

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    deleted = await self._crud.delete_by_ids(session, keys)
        except SQLAlchemyError as e:
            raise VectorStoreError(
                message=f"Failed to delete documents: {e}",
                operation="delete",
                details={"id_count": len(keys)},
            ) from e

        logger.info(
            f"{__name__}:delete_by_ids - Deleted {deleted} documents",
            extra={"requested": len(keys)},
        )
        return deleted

    async def list_all_ids(self) -> set[str]:
        """
        Full scan of document ids.

        Raises:
            VectorStoreError: Database failure
        """
        try:
            async with self._session_factory() as session:
                return await self._crud.list_ids(session)
        except SQLAlchemyError as e:
            raise VectorStoreError(
                message=f"Failed to list document ids: {e}",
                operation="list_all_ids",
            ) from e

    async def list_ids_by_source(self, source_files: Iterable[str]) -> set[str]:
        """
        Ids of rows produced from any of `source_files`.

        Raises:
            VectorStoreError: Database failure
        """
        try:
            async with self._session_factory() as session:
                return await self._crud.list_ids_by_source(session, source_files)
        except SQLAlchemyError as e:
            raise VectorStoreError(
                message=f"Failed to list document ids by source: {e}",
                operation="list_ids_by_source",
            ) from e

    async def lexical_search(self, query: str, scope: str, limit: int) -> list[SearchHit]:
        """
        Ranked full-text search within a persona scope.

        Raises:
            VectorStoreError: Database failure
        """
        try:
            async with self._session_factory() as session:
                return await self._crud.lexical_search(session, query, scope, limit)
        except SQLAlchemyError as e:
            raise VectorStoreError(
                message=f"Lexical search failed: {e}",
                operation="lexical_search",
                details={"scope": scope, "limit": limit},
            ) from e

    async def vector_search(
        self,
        query_embedding: Sequence[float],
        scope: str,
        limit: int,
    ) -> list[SearchHit]:
        """
        Cosine similarity search within a persona scope.

        Raises:
            DimensionMismatchError: Query vector has the wrong length
            VectorStoreError: Database failure
        """
        self._check_dimension(query_embedding, "vector_search")
        try:
            async with self._session_factory() as session:
                return await self._crud.vector_search(session, query_embedding, scope, limit)
        except SQLAlchemyError as e:
            raise VectorStoreError(
                message=f"Vector search failed: {e}",
                operation="vector_search",
                details={"scope": scope, "limit": limit},
            ) from e

    async def close(self) -> None:
        """Dispose the owned engine's connection pool, if any."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
