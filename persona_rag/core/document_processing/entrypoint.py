"""
Ingestion pipeline orchestrator.

Coordinates discovery, parsing, chunking, embedding, upsert and stale-row
garbage collection for every configured source root.

Dependencies: All task modules, configs
System role: Pipeline orchestration (coordinates only)

Usage:
    persona-rag-ingest
    python -m persona_rag.core.document_processing
"""

import asyncio
import logging
import sys
import time

from persona_rag.boundary.embeddings import Embedder
from persona_rag.boundary.vdb.document_store import DocumentStore
from persona_rag.configs import Settings, get_settings
from persona_rag.core.exceptions import (
    ConfigurationError,
    DimensionMismatchError,
    DocumentProcessingError,
    PersonaRagException,
    VectorStoreError,
)
from persona_rag.observability import configure_logging, correlation_scope
from persona_rag.observability.log_utils import log_exception_with_context

from .configs import DocumentPipelineSettings, get_pipeline_settings
from .models import IngestionResult, IngestionRun, SourceFile
from .tasks import (
    ChunkingTask,
    DiscoveryTask,
    EmbeddingTask,
    ParsingTask,
    VectorStoreTask,
)

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Orchestrate ingestion: discover -> parse -> chunk -> embed -> upsert -> prune."""

    def __init__(
        self,
        store: DocumentStore,
        embedder: Embedder,
        settings: DocumentPipelineSettings | None = None,
    ) -> None:
        """
        Initialize pipeline with its store, embedder and configuration.

        Args:
            store: Document store to write to
            embedder: Embedding provider
            settings: Pipeline settings (uses environment if None)
        """
        self._settings = settings or get_pipeline_settings()
        self._store = store

        self._discovery_task = DiscoveryTask(
            base_dir=self._settings.base_dir,
            ignore_patterns=self._settings.ignore_patterns,
        )
        self._parsing_task = ParsingTask()
        self._chunking_task = ChunkingTask(
            chunk_size=self._settings.chunk_size,
            chunk_overlap=self._settings.chunk_overlap,
            strategy=self._settings.chunk_strategy,
            paragraph_max_chars=self._settings.paragraph_max_chars,
        )
        self._embedding_task = EmbeddingTask(embedder)
        self._vector_store_task = VectorStoreTask(store)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        pipeline_settings: DocumentPipelineSettings | None = None,
    ) -> "IngestionPipeline":
        """
        Build the pipeline with the configured store and embedder.

        Raises:
            ConfigurationError: Missing connection string or API key
        """
        from persona_rag.boundary.embeddings import get_embedder
        from persona_rag.boundary.vdb.vector_store_factory import get_document_store

        settings = settings or get_settings()
        embedder = get_embedder(settings)
        return cls(get_document_store(settings), embedder, pipeline_settings)

    async def close(self) -> None:
        """Release the store's connections."""
        await self._store.close()

    async def run(self) -> IngestionResult:
        """
        Ingest every file under the source roots, then remove stale rows.

        Files that fail extraction, embedding or upsert are logged and
        skipped. Garbage collection runs only after every file task finished.
        Extraction runs in worker threads so parsing overlaps with the
        embedding and upsert of other files.

        Returns:
            IngestionResult: Counts for the run

        Raises:
            DimensionMismatchError: Embedder and store dimensions disagree
                (aborts before garbage collection)
            VectorStoreError: Listing or deleting ids failed
        """
        start_time = time.perf_counter()

        with correlation_scope() as run_id:
            run = IngestionRun(run_id=run_id)
            sources = self._discovery_task.discover(self._settings.source_roots)
            run.enumerated_sources.update(source.relative_path for source in sources)

            logger.info(
                f"{__name__}:run - Ingesting {len(sources)} files",
                extra={"run_id": run.run_id, "dry_run": self._settings.dry_run},
            )

            semaphore = asyncio.Semaphore(self._settings.max_concurrent_files)

            async def bounded(source: SourceFile) -> None:
                async with semaphore:
                    await self._process_file(source, run)

            outcomes = await asyncio.gather(
                *(bounded(source) for source in sources),
                return_exceptions=True,
            )
            for outcome in outcomes:
                if isinstance(outcome, BaseException):
                    raise outcome

            if run.fatal_error is not None:
                raise run.fatal_error

            plan = await self._vector_store_task.plan_stale(
                run, protect_failed_sources=self._settings.protect_failed_sources
            )
            if plan.protected:
                logger.warning(
                    f"{__name__}:run - Keeping {len(plan.protected)} rows of files that failed this run",
                    extra={"failed_files": sorted(run.failed_sources)},
                )

            if self._settings.dry_run:
                stale_deleted = 0
                logger.info(
                    f"{__name__}:run - Dry run, {len(plan.to_delete)} stale rows not deleted"
                )
            else:
                stale_deleted = await self._vector_store_task.delete(plan.to_delete)

            elapsed_ms = (time.perf_counter() - start_time) * 1000

            logger.info(
                f"{__name__}:run - Ingestion complete, stale rows deleted: {stale_deleted}",
                extra={
                    "files_processed": len(run.succeeded_sources),
                    "files_failed": len(run.failed_sources),
                    "chunks_upserted": run.chunks_upserted,
                    "elapsed_ms": round(elapsed_ms, 1),
                },
            )

            return IngestionResult(
                run_id=run.run_id,
                files_enumerated=len(run.enumerated_sources),
                files_processed=len(run.succeeded_sources),
                failed_files=dict(run.failed_sources),
                chunks_upserted=run.chunks_upserted,
                stale_found=len(plan.to_delete),
                stale_deleted=stale_deleted,
                protected_ids=len(plan.protected),
                dry_run=self._settings.dry_run,
                processing_time_ms=elapsed_ms,
            )

    async def _process_file(self, source: SourceFile, run: IngestionRun) -> None:
        """
        Parse, chunk, embed and upsert one file, recording the outcome in `run`.

        Per-file errors are recorded as failures; a dimension mismatch is
        recorded as the run's fatal error.
        """
        if run.aborted:
            return

        name = source.relative_path
        try:
            text = await asyncio.to_thread(self._parsing_task.parse, source.path, source_file=name)
            pieces = self._chunking_task.chunk(text)
            chunks = self._embedding_task.build_chunks(source, pieces)
            records = await self._embedding_task.embed(chunks)
            chunk_ids = await self._vector_store_task.upsert(records)
        except DimensionMismatchError as e:
            run.fatal_error = e
            log_exception_with_context(
                logger,
                f"{__name__}:_process_file - Embedding dimension does not match the store, aborting",
                e,
                source_file=name,
            )
            return
        except (DocumentProcessingError, VectorStoreError) as e:
            run.record_failure(name, e)
            logger.error(
                f"{__name__}:_process_file - Skipping {name}: {e.message}",
                extra={"source_file": name, "error_type": type(e).__name__},
            )
            return

        run.record_success(name, chunk_ids)
        logger.info(
            f"{__name__}:_process_file - {name}: {len(chunk_ids)} chunks",
            extra={"persona_ids": ",".join(source.persona_ids)},
        )


async def _ingest(settings: Settings) -> IngestionResult:
    pipeline = IngestionPipeline.from_settings(settings)
    try:
        return await pipeline.run()
    finally:
        await pipeline.close()


def main() -> int:
    """Console entry point for a full ingestion run."""
    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        settings.require_runtime_credentials()
    except ConfigurationError as e:
        logger.error(f"{__name__}:main - {e}")
        return 1

    try:
        result = asyncio.run(_ingest(settings))
    except PersonaRagException as e:
        log_exception_with_context(logger, f"{__name__}:main - Ingestion aborted", e)
        return 1

    logger.info(
        f"{__name__}:main - {result.files_processed}/{result.files_enumerated} files, "
        f"{result.chunks_upserted} chunks, {result.stale_deleted} stale rows deleted"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
