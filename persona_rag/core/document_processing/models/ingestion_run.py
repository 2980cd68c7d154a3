"""
Per-run ingestion accumulator.

Created by IngestionPipeline.run() and passed explicitly through the call
graph; never stored at module level, so independent runs stay isolated.

Dependencies: dataclasses
System role: Tracks produced ids and per-file outcomes for garbage collection
"""

from dataclasses import dataclass, field


@dataclass
class IngestionRun:
    """
    State of one ingestion run.

    Attributes:
        run_id: Correlation id of the run
        processed_ids: Every chunk id upserted during the run
        enumerated_sources: Relative paths of every file discovered
        succeeded_sources: Files fully extracted, embedded and upserted
        failed_sources: File -> error message for files skipped this run
        chunks_upserted: Total rows written
        fatal_error: Error that must abort the run before garbage collection
    """

    run_id: str
    processed_ids: set[str] = field(default_factory=set)
    enumerated_sources: set[str] = field(default_factory=set)
    succeeded_sources: set[str] = field(default_factory=set)
    failed_sources: dict[str, str] = field(default_factory=dict)
    chunks_upserted: int = 0
    fatal_error: BaseException | None = None

    def record_success(self, source_file: str, chunk_ids: list[str]) -> None:
        """Register the ids produced for a file that completed."""
        self.processed_ids.update(chunk_ids)
        self.succeeded_sources.add(source_file)
        self.chunks_upserted += len(chunk_ids)

    def record_failure(self, source_file: str, error: BaseException) -> None:
        """Register a file that was skipped; its ids are not added."""
        self.failed_sources[source_file] = str(error)

    @property
    def aborted(self) -> bool:
        return self.fatal_error is not None
