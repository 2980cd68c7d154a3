"""
Configuration settings for the ingestion pipeline.

Provides environment-based configuration for discovery, chunking and the
garbage-collection policy.

Dependencies: pydantic, pydantic_settings
System role: Centralized pipeline configuration
"""

import enum
from functools import lru_cache

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from persona_rag.boundary.vdb.vector_schemas import GLOBAL_SCOPE


class ScopeStrategy(str, enum.Enum):
    """
    How the persona scope of a file under a source root is decided.

    FIXED: the root's configured persona_ids (["*"] for global content)
    FILE_STEM: file name without extension (data/personas/<id>.json)
    SUBDIRECTORY: first directory below the root (knowledge/<id>/...)
    """

    FIXED = "fixed"
    FILE_STEM = "file_stem"
    SUBDIRECTORY = "subdirectory"


class ChunkStrategy(str, enum.Enum):
    """Chunking algorithm applied to extracted text."""

    WINDOW = "window"
    PARAGRAPH = "paragraph"


class SourceRoot(BaseModel):
    """One document tree to ingest and the persona scope its files belong to."""

    path: str = Field(description="Directory, relative to base_dir unless absolute")
    strategy: ScopeStrategy = Field(default=ScopeStrategy.FIXED)
    persona_ids: list[str] = Field(
        default_factory=lambda: [GLOBAL_SCOPE],
        description="Scope for FIXED roots; fallback for files directly under a SUBDIRECTORY root",
    )

    @model_validator(mode="after")
    def _require_scope(self) -> "SourceRoot":
        if self.strategy == ScopeStrategy.FIXED and not self.persona_ids:
            raise ValueError(f"Source root {self.path!r} needs at least one persona id")
        return self


def _default_source_roots() -> list[SourceRoot]:
    return [
        SourceRoot(path="data/personas", strategy=ScopeStrategy.FILE_STEM),
        SourceRoot(path="data/knowledge/personas", strategy=ScopeStrategy.SUBDIRECTORY),
        SourceRoot(path="data/knowledge/global", persona_ids=[GLOBAL_SCOPE]),
    ]


class DocumentPipelineSettings(BaseSettings):
    """Settings for the document ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="DOC_PIPELINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Discovery
    base_dir: str = Field(
        default=".",
        description="Directory that source_file paths are made relative to",
    )
    source_roots: list[SourceRoot] = Field(
        default_factory=_default_source_roots,
        description="Document trees to ingest (JSON list in the environment)",
    )
    ignore_patterns: list[str] = Field(
        default=[".*", "*~"],
        description="fnmatch patterns of file names to skip",
    )

    # Chunking settings
    chunk_strategy: ChunkStrategy = Field(default=ChunkStrategy.WINDOW)
    chunk_size: int = Field(default=500, description="Sliding window size in characters")
    chunk_overlap: int = Field(default=50, description="Overlap between consecutive windows")
    paragraph_max_chars: int = Field(
        default=400,
        description="Maximum piece size for the paragraph strategy",
    )

    # Run behaviour
    max_concurrent_files: int = Field(default=4, ge=1, description="Files processed in parallel")
    protect_failed_sources: bool = Field(
        default=True,
        description="Keep stored chunks of files that failed this run instead of pruning them",
    )
    dry_run: bool = Field(default=False, description="Report stale rows without deleting them")

    @model_validator(mode="after")
    def _check_chunking(self) -> "DocumentPipelineSettings":
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if not 0 <= self.chunk_overlap < self.chunk_size:
            raise ValueError("chunk_overlap must be >= 0 and smaller than chunk_size")
        return self


@lru_cache
def get_pipeline_settings() -> DocumentPipelineSettings:
    """
    Get cached pipeline settings instance.

    Returns:
        DocumentPipelineSettings: Singleton settings loaded from environment
    """
    return DocumentPipelineSettings()
