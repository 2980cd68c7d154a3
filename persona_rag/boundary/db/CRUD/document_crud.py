"""
Document CRUD operations.

Builds and executes the document store statements: idempotent upsert,
source lookups, and the two ranked searches (full-text and pgvector cosine)
restricted to a persona scope.

Dependencies: sqlalchemy, pgvector, persona_rag.boundary.db
System role: SQL layer of the Postgres document store
"""

from typing import Iterable, Sequence

from sqlalchemy import ColumnElement, Select, Text, any_, bindparam, func, or_, select
from sqlalchemy.dialects.postgresql import ARRAY, Insert, insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from persona_rag.boundary.db.CRUD.base_crud import BaseCRUD, to_uuid
from persona_rag.boundary.db.document_model import DocumentModel, TEXT_SEARCH_CONFIG
from persona_rag.boundary.vdb.vector_schemas import (
    GLOBAL_SCOPE,
    DocumentMetadata,
    DocumentRecord,
    SearchHit,
)

documents = DocumentModel.__table__

# Four bind parameters per row; Postgres caps a statement at 32767
UPSERT_BATCH_SIZE = 1000


def scope_clause(scope: str) -> ColumnElement[bool]:
    """
    Persona scope filter: rows owned by `scope` or by the global wildcard.

    Uses JSONB containment (@>) so the GIN(metadata) index applies.
    """
    metadata = documents.c["metadata"]
    if scope == GLOBAL_SCOPE:
        return metadata.contains({"persona_ids": [GLOBAL_SCOPE]})
    return or_(
        metadata.contains({"persona_ids": [scope]}),
        metadata.contains({"persona_ids": [GLOBAL_SCOPE]}),
    )


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """Statements and queries against the documents table."""

    def __init__(self) -> None:
        super().__init__(DocumentModel)

    def build_upsert(self, records: Sequence[DocumentRecord]) -> Insert:
        """
        Build INSERT ... ON CONFLICT (id) DO UPDATE for a batch of rows.

        search_vector is not part of the statement; Postgres regenerates it
        from the new content.

        Args:
            records: Rows to insert or replace

        Returns:
            Insert: Executable upsert statement
        """
        stmt = pg_insert(documents).values(
            [
                {
                    "id": to_uuid(record.id),
                    "content": record.content,
                    "embedding": list(record.embedding),
                    "metadata": record.metadata.model_dump(mode="json"),
                }
                for record in records
            ]
        )
        return stmt.on_conflict_do_update(
            index_elements=[documents.c.id],
            set_={
                "content": stmt.excluded.content,
                "embedding": stmt.excluded.embedding,
                "metadata": stmt.excluded["metadata"],
            },
        )

    def build_lexical_search(self, query: str, scope: str, limit: int) -> Select:
        """
        Build ranked full-text search restricted to a persona scope.

        Args:
            query: Free-text query (websearch syntax)
            scope: Persona id
            limit: Maximum rows

        Returns:
            Select: Rows (id, content, metadata, score) by descending ts_rank
        """
        tsquery = func.websearch_to_tsquery(TEXT_SEARCH_CONFIG, query)
        score = func.ts_rank(documents.c.search_vector, tsquery).label("score")
        return (
            select(documents.c.id, documents.c.content, documents.c["metadata"], score)
            .where(documents.c.search_vector.bool_op("@@")(tsquery))
            .where(scope_clause(scope))
            .order_by(score.desc())
            .limit(limit)
        )

    def build_vector_search(
        self,
        query_embedding: Sequence[float],
        scope: str,
        limit: int,
    ) -> Select:
        """
        Build cosine nearest-neighbour search restricted to a persona scope.

        Orders by raw distance so the HNSW index can serve the query.

        Args:
            query_embedding: Query vector
            scope: Persona id
            limit: Maximum rows

        Returns:
            Select: Rows (id, content, metadata, score) with score = 1 - distance
        """
        distance = documents.c.embedding.cosine_distance(list(query_embedding))
        return (
            select(
                documents.c.id,
                documents.c.content,
                documents.c["metadata"],
                (1 - distance).label("score"),
            )
            .where(scope_clause(scope))
            .order_by(distance)
            .limit(limit)
        )

    async def upsert_many(
        self,
        session: AsyncSession,
        records: Sequence[DocumentRecord],
        batch_size: int = UPSERT_BATCH_SIZE,
    ) -> int:
        """
        Insert or replace rows, one statement per `batch_size` rows.

        Batches run on the caller's session, so they share its transaction.

        Args:
            session: Async database session
            records: Rows to write
            batch_size: Rows per INSERT statement

        Returns:
            Number of rows written
        """
        for start in range(0, len(records), batch_size):
            await session.execute(self.build_upsert(records[start:start + batch_size]))
        return len(records)

    async def list_ids_by_source(
        self,
        session: AsyncSession,
        source_files: Iterable[str],
    ) -> set[str]:
        """
        Ids of every row whose metadata.source_file is in `source_files`.

        Args:
            session: Async database session
            source_files: Relative source paths

        Returns:
            Set of ids as strings
        """
        sources = sorted(set(source_files))
        if not sources:
            return set()
        stmt = select(documents.c.id).where(
            documents.c["metadata"]["source_file"].astext
            == any_(bindparam("sources", value=sources, type_=ARRAY(Text)))
        )
        result = await session.execute(stmt)
        return {str(row_id) for row_id in result.scalars().all()}

    async def lexical_search(
        self,
        session: AsyncSession,
        query: str,
        scope: str,
        limit: int,
    ) -> list[SearchHit]:
        """Execute the full-text search and map rows to hits."""
        result = await session.execute(self.build_lexical_search(query, scope, limit))
        return [self._to_hit(row) for row in result.all()]

    async def vector_search(
        self,
        session: AsyncSession,
        query_embedding: Sequence[float],
        scope: str,
        limit: int,
    ) -> list[SearchHit]:
        """Execute the vector search and map rows to hits."""
        result = await session.execute(
            self.build_vector_search(query_embedding, scope, limit)
        )
        return [self._to_hit(row) for row in result.all()]

    @staticmethod
    def _to_hit(row) -> SearchHit:
        mapping = row._mapping
        return SearchHit(
            id=str(mapping["id"]),
            content=mapping["content"],
            metadata=DocumentMetadata.model_validate(mapping["metadata"] or {}),
            score=float(mapping["score"]),
        )


document_crud = DocumentCRUD()
