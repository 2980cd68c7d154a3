"""
Document store write task.

Upserts the records of each file and computes and removes the stale rows left
behind by deleted, moved or shortened sources.

Dependencies: persona_rag.boundary.vdb
System role: Final stage of the ingestion pipeline (upsert + garbage collection)
"""

import logging
from dataclasses import dataclass

from persona_rag.boundary.vdb.document_store import DocumentStore
from persona_rag.boundary.vdb.vector_schemas import DocumentRecord

from ..models import IngestionRun

logger = logging.getLogger(__name__)


@dataclass
class StalePlan:
    """Rows to delete, and rows kept because their source failed this run."""

    to_delete: set[str]
    protected: set[str]


class VectorStoreTask:
    """Write records and prune stale rows."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def upsert(self, records: list[DocumentRecord]) -> list[str]:
        """
        Upsert records, replacing rows with the same id.

        Returns:
            list[str]: Ids written, in record order

        Raises:
            VectorStoreError: Store failure
            DimensionMismatchError: Embedding length differs from the column
        """
        if not records:
            return []
        await self._store.upsert_many(records)
        return [record.id for record in records]

    async def plan_stale(self, run: IngestionRun, protect_failed_sources: bool = True) -> StalePlan:
        """
        Compute stored ids not produced by this run.

        When protect_failed_sources is set, rows whose source file was
        enumerated but failed this run are held back.

        Args:
            run: Completed ingestion run
            protect_failed_sources: Keep rows of failed files

        Returns:
            StalePlan: Ids to delete and ids protected
        """
        stale = await self._store.list_all_ids() - run.processed_ids

        protected: set[str] = set()
        if protect_failed_sources and run.failed_sources and stale:
            protected = stale & await self._store.list_ids_by_source(run.failed_sources.keys())

        return StalePlan(to_delete=stale - protected, protected=protected)

    async def delete(self, ids: set[str]) -> int:
        """Delete rows by id; returns the number removed."""
        if not ids:
            return 0
        deleted = await self._store.delete_by_ids(sorted(ids))
        logger.info(f"{__name__}:delete - Removed {deleted} stale rows")
        return deleted
