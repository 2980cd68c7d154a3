"""
Chunk domain model for the ingestion pipeline.

A chunk's id is derived from (source path, persona scope, position) with a
fixed-namespace UUID v5, so re-ingesting the same source reproduces the same
ids and overwrites the previous rows.

Dependencies: pydantic, uuid
System role: Data structures for discovered files and their chunks
"""

import uuid
from pathlib import Path

from pydantic import BaseModel, Field

# Changing this re-keys every stored row
CHUNK_ID_NAMESPACE = uuid.UUID("1b671a64-40d5-491e-99b0-da01ff1f3341")


def generate_chunk_id(source_path: str, scope_ids: list[str], index: int) -> str:
    """
    Deterministic chunk identifier.

    Args:
        source_path: Relative source path (POSIX separators)
        scope_ids: Persona scopes of the chunk, in configured order
        index: Position of the chunk within the source document

    Returns:
        str: UUID v5 string
    """
    name = f"{source_path}::{'-'.join(scope_ids)}::chunk{index}"
    return str(uuid.uuid5(CHUNK_ID_NAMESPACE, name))


class SourceFile(BaseModel):
    """A file found under a source root, with its resolved persona scope."""

    path: Path = Field(description="Absolute path on disk")
    relative_path: str = Field(description="Path relative to base_dir, POSIX separators")
    persona_ids: list[str] = Field(description="Persona scopes of every chunk of this file")


class Chunk(BaseModel):
    """Bounded span of text extracted from one source document."""

    source_path: str = Field(description="Relative source path")
    scope_ids: list[str] = Field(description="Persona scopes (or the global wildcard)")
    index: int = Field(ge=0, description="Position within the source document")
    content: str = Field(description="Chunk text content")

    @property
    def chunk_id(self) -> str:
        """Deterministic identifier of this chunk."""
        return generate_chunk_id(self.source_path, self.scope_ids, self.index)
