"""
Task modules for the ingestion pipeline.

Exports: DiscoveryTask, ParsingTask, ChunkingTask, EmbeddingTask, VectorStoreTask
"""

from .chunking_task import ChunkingTask
from .discovery_task import DiscoveryTask
from .embedding_task import EmbeddingTask
from .parsing_task import ParsingTask
from .vector_store_task import VectorStoreTask

__all__ = [
    "DiscoveryTask",
    "ParsingTask",
    "ChunkingTask",
    "EmbeddingTask",
    "VectorStoreTask",
]
