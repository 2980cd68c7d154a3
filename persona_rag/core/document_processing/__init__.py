"""
Document ingestion pipeline.

Turns persona profiles and knowledge documents into embedded, persona-scoped
rows in the document store.

Exports: IngestionPipeline, IngestionResult, DocumentPipelineSettings
"""

from .configs import DocumentPipelineSettings, get_pipeline_settings
from .entrypoint import IngestionPipeline
from .models import IngestionResult

__all__ = [
    "IngestionPipeline",
    "IngestionResult",
    "DocumentPipelineSettings",
    "get_pipeline_settings",
]
