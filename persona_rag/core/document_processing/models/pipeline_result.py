"""
Ingestion result model.

Dependencies: pydantic
System role: Return type for IngestionPipeline.run()
"""

from pydantic import BaseModel, Field


class IngestionResult(BaseModel):
    """Summary of one ingestion run."""

    run_id: str = Field(description="Correlation id of the run")
    files_enumerated: int = Field(description="Files discovered under the source roots")
    files_processed: int = Field(description="Files upserted successfully")
    failed_files: dict[str, str] = Field(
        default_factory=dict,
        description="Relative path -> error for files skipped this run",
    )
    chunks_upserted: int = Field(description="Rows written")
    stale_found: int = Field(description="Stored rows not produced by this run")
    stale_deleted: int = Field(description="Rows removed by garbage collection")
    protected_ids: int = Field(
        default=0,
        description="Stale rows kept because their source failed this run",
    )
    dry_run: bool = Field(default=False)
    processing_time_ms: float = Field(description="Total processing time in milliseconds")
