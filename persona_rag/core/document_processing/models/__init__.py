"""
Models for the ingestion pipeline.

Exports: Chunk, SourceFile, IngestionRun, IngestionResult, generate_chunk_id
"""

from .chunk import CHUNK_ID_NAMESPACE, Chunk, SourceFile, generate_chunk_id
from .ingestion_run import IngestionRun
from .pipeline_result import IngestionResult

__all__ = [
    "CHUNK_ID_NAMESPACE",
    "Chunk",
    "SourceFile",
    "generate_chunk_id",
    "IngestionRun",
    "IngestionResult",
]
