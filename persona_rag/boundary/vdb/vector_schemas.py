"""
Document store schemas.

Pydantic models exchanged with the document store (rows to upsert, metadata,
ranked search hits) and the persona scope rules shared by both store
implementations.

Dependencies: pydantic
System role: Type definitions for store operations
"""

from pydantic import BaseModel, ConfigDict, Field

# Scope marker for chunks that apply to every persona
GLOBAL_SCOPE = "*"


class DocumentMetadata(BaseModel):
    """
    Metadata attached to each document row (stored as JSONB).

    persona_ids lists the persona scopes the chunk belongs to, or
    [GLOBAL_SCOPE] for content shared by all personas.
    """

    model_config = ConfigDict(extra="allow")

    source_file: str = Field(default="", description="Source file path relative to the ingestion base dir")
    persona_ids: list[str] = Field(default_factory=list, description="Owning persona scopes")

    def matches_scope(self, scope: str) -> bool:
        """Whether a retrieval scoped to `scope` may return this row."""
        return scope in self.persona_ids or GLOBAL_SCOPE in self.persona_ids


class DocumentRecord(BaseModel):
    """One row to upsert into the document store."""

    id: str = Field(description="Deterministic chunk UUID (string form)")
    content: str = Field(description="Chunk text content")
    embedding: list[float] = Field(description="Embedding vector")
    metadata: DocumentMetadata = Field(description="Row metadata")


class SearchHit(BaseModel):
    """Single ranked result from a lexical or vector search."""

    id: str = Field(description="Chunk identifier")
    content: str = Field(description="Chunk text content")
    metadata: DocumentMetadata = Field(description="Chunk metadata")
    score: float = Field(description="ts_rank for lexical hits, 1 - cosine distance for vector hits")
