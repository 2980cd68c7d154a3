"""
Hybrid retriever combining full-text and vector search.

Embeds the query, runs both store searches concurrently within one persona
scope and fuses the rankings with RRF. Text uploaded with the request is
paragraph-chunked, embedded and ranked in memory as a third list.

Dependencies: asyncio, persona_rag.boundary.vdb, persona_rag.boundary.embeddings
System role: Online retrieval for persona context
"""

import asyncio
import logging
from typing import Any, Awaitable, Sequence

from persona_rag.boundary.embeddings import Embedder
from persona_rag.boundary.vdb.document_store import DocumentStore
from persona_rag.boundary.vdb.memory_store import cosine_similarity
from persona_rag.boundary.vdb.vector_schemas import DocumentMetadata, SearchHit
from persona_rag.core.document_processing.configs import ChunkStrategy
from persona_rag.core.document_processing.tasks.chunking_task import ChunkingTask
from persona_rag.core.exceptions import EmbeddingProviderError, RetrievalError, VectorStoreError
from persona_rag.core.rag_query.fusion import DEFAULT_RRF_K, FusedHit, reciprocal_rank_fusion

logger = logging.getLogger(__name__)

# source_file of hits built from caller-supplied context
UPLOADED_SOURCE = "uploaded_context"


async def gather_or_cancel(*aws: Awaitable[Any]) -> list[Any]:
    """
    Run awaitables as sibling tasks; if one fails, cancel the rest.

    Cancelling the caller also cancels every sibling.

    Returns:
        list: Results in argument order

    Raises:
        The first exception raised by any sibling
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class HybridRetriever:
    """Stateless per call; one instance may serve concurrent requests."""

    def __init__(
        self,
        store: DocumentStore,
        embedder: Embedder,
        top_k: int = 5,
        rrf_k: int = DEFAULT_RRF_K,
    ) -> None:
        """
        Initialize retriever.

        Args:
            store: Document store to search
            embedder: Query embedder (same model as ingestion)
            top_k: Results per sub-query and after fusion
            rrf_k: RRF smoothing constant
        """
        self._store = store
        self._embedder = embedder
        self.top_k = top_k
        self.rrf_k = rrf_k
        self._uploaded_chunker = ChunkingTask(strategy=ChunkStrategy.PARAGRAPH)

    async def search(
        self,
        query: str,
        scope: str,
        top_k: int | None = None,
        uploaded_context: str | None = None,
    ) -> list[FusedHit]:
        """
        Retrieve the best chunks for `query` visible to `scope`.

        Args:
            query: Free-text query
            scope: Persona id; global chunks are always visible
            top_k: Override of the configured result count
            uploaded_context: Caller-supplied text ranked alongside the
                stored chunks for this call only (never persisted)

        Returns:
            list[FusedHit]: Fused results, best first ([] if the query
                cannot be embedded)

        Raises:
            RetrievalError: A store search failed
        """
        limit = top_k or self.top_k

        try:
            query_embedding = await self._embedder.embed_one(query)
        except EmbeddingProviderError as e:
            logger.warning(
                f"{__name__}:search - Query embedding failed, returning no context: {e.message}",
                extra={"persona_scope": scope},
            )
            return []

        pieces = self._uploaded_chunker.chunk(uploaded_context) if uploaded_context else []

        try:
            lexical, vector, uploaded = await gather_or_cancel(
                self._store.lexical_search(query, scope, limit),
                self._store.vector_search(query_embedding, scope, limit),
                self._rank_uploaded(pieces, query_embedding, scope, limit),
            )
        except VectorStoreError as e:
            raise RetrievalError(
                f"Hybrid search failed: {e.message}",
                persona_scope=scope,
                details=dict(e.details),
            ) from e

        results = reciprocal_rank_fusion(
            lexical, vector, k=self.rrf_k, top_k=limit, uploaded=uploaded
        )

        logger.debug(
            f"{__name__}:search - {len(results)} results",
            extra={
                "persona_scope": scope,
                "lexical_hits": len(lexical),
                "vector_hits": len(vector),
                "uploaded_hits": len(uploaded),
            },
        )
        return results

    async def _rank_uploaded(
        self,
        pieces: list[str],
        query_embedding: Sequence[float],
        scope: str,
        limit: int,
    ) -> list[SearchHit]:
        """Embed uploaded pieces in one batch and rank them by cosine similarity."""
        if not pieces:
            return []

        try:
            vectors = await self._embedder.embed_batch(pieces)
        except EmbeddingProviderError as e:
            logger.warning(
                f"{__name__}:_rank_uploaded - Uploaded context not embedded, ignoring it: {e.message}",
                extra={"persona_scope": scope, "pieces": len(pieces)},
            )
            return []

        metadata = DocumentMetadata(source_file=UPLOADED_SOURCE, persona_ids=[scope])
        hits = [
            SearchHit(
                id=f"{UPLOADED_SOURCE}:{index}",
                content=piece,
                metadata=metadata,
                score=cosine_similarity(vector, query_embedding),
            )
            for index, (piece, vector) in enumerate(zip(pieces, vectors))
        ]
        hits.sort(key=lambda hit: hit.score, reverse=True)
        return hits[:limit]

    async def close(self) -> None:
        """Release the store's connections."""
        await self._store.close()
