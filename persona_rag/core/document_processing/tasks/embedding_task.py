"""
Chunk embedding task.

Turns the chunks of one source file into store records: deterministic ids,
one batched embedding call, and the scope metadata.

Dependencies: persona_rag.boundary.embeddings
System role: Fourth stage of the ingestion pipeline
"""

import logging

from persona_rag.boundary.embeddings import Embedder
from persona_rag.boundary.vdb.vector_schemas import DocumentMetadata, DocumentRecord
from persona_rag.core.exceptions import EmbeddingProviderError

from ..models import Chunk, SourceFile

logger = logging.getLogger(__name__)


class EmbeddingTask:
    """Embed the chunks of one file in a single batch."""

    def __init__(self, embedder: Embedder) -> None:
        self._embedder = embedder

    def build_chunks(self, source: SourceFile, pieces: list[str]) -> list[Chunk]:
        """Attach source path, scope and position to each text piece."""
        return [
            Chunk(
                source_path=source.relative_path,
                scope_ids=source.persona_ids,
                index=index,
                content=piece,
            )
            for index, piece in enumerate(pieces)
        ]

    async def embed(self, chunks: list[Chunk]) -> list[DocumentRecord]:
        """
        Embed chunks and build the rows to upsert.

        Args:
            chunks: Chunks of a single source file

        Returns:
            list[DocumentRecord]: One record per chunk, in chunk order

        Raises:
            EmbeddingProviderError: Provider failure after retries, or a
                vector count that differs from the chunk count
        """
        if not chunks:
            return []

        vectors = await self._embedder.embed_batch([chunk.content for chunk in chunks])
        if len(vectors) != len(chunks):
            raise EmbeddingProviderError(
                "Embedder returned the wrong number of vectors",
                source_file=chunks[0].source_path,
                details={"expected": len(chunks), "actual": len(vectors)},
            )

        logger.debug(
            f"{__name__}:embed - Embedded {len(chunks)} chunks",
            extra={"source_file": chunks[0].source_path},
        )

        return [
            DocumentRecord(
                id=chunk.chunk_id,
                content=chunk.content,
                embedding=list(vector),
                metadata=DocumentMetadata(
                    source_file=chunk.source_path,
                    persona_ids=list(chunk.scope_ids),
                ),
            )
            for chunk, vector in zip(chunks, vectors)
        ]
