"""
Persona context retrieval service.

The boundary used by prompt builders: given a persona scope and a query,
returns the assembled context block and the sources it cites. Retrieval
failures degrade to an empty result so one bad query never takes the host
process down.

Dependencies: persona_rag.core.rag_query, persona_rag.configs
System role: Retrieval service orchestration layer
"""

import logging
from typing import Sequence

from pydantic import BaseModel, Field

from persona_rag.boundary.vdb.vector_schemas import GLOBAL_SCOPE, SearchHit
from persona_rag.configs import Settings, get_settings
from persona_rag.core.exceptions import RetrievalError
from persona_rag.core.rag_query.context_assembler import assemble_context
from persona_rag.core.rag_query.fusion import FusedHit
from persona_rag.core.rag_query.hybrid_retriever import HybridRetriever
from persona_rag.observability import correlation_scope
from persona_rag.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


class CitedSource(BaseModel):
    """A source file that contributed to the assembled context."""

    source_file: str
    scope_id: str = Field(description="Requested persona id, or '*' for global content")


class RetrievalResult(BaseModel):
    """Context block and citations for one retrieval call."""

    assembled_context: str = Field(default="")
    cited_sources: list[CitedSource] = Field(default_factory=list)
    chunks: list[FusedHit] = Field(default_factory=list, description="Chunks in the context")

    @property
    def is_empty(self) -> bool:
        return not self.assembled_context


def build_persona_query(name: str, goals: Sequence[str] = (), pains: Sequence[str] = ()) -> str:
    """
    Default ranking query for a persona profile.

    >>> build_persona_query("Nutrióloga", ["Aumentar consultas"], ["No-shows"])
    'persona: Nutrióloga goals: Aumentar consultas pains: No-shows'
    """
    return " ".join(["persona:", name, "goals:", ", ".join(goals), "pains:", ", ".join(pains)])


def cite_sources(hits: Sequence[SearchHit], persona_scope: str) -> list[CitedSource]:
    """Unique (source_file, scope) pairs in rank order."""
    seen: set[tuple[str, str]] = set()
    sources: list[CitedSource] = []
    for hit in hits:
        scope_id = persona_scope if persona_scope in hit.metadata.persona_ids else GLOBAL_SCOPE
        key = (hit.metadata.source_file, scope_id)
        if key in seen:
            continue
        seen.add(key)
        sources.append(CitedSource(source_file=key[0], scope_id=scope_id))
    return sources


class PersonaContextService:
    """Hybrid retrieval plus context assembly for one persona at a time."""

    def __init__(self, retriever: HybridRetriever, max_context_chars: int = 1800) -> None:
        """
        Initialize service.

        Args:
            retriever: Hybrid retriever over the document store
            max_context_chars: Character budget of the assembled context
        """
        self._retriever = retriever
        self.max_context_chars = max_context_chars

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "PersonaContextService":
        """
        Build the service with the configured store and embedder.

        Raises:
            ConfigurationError: Missing connection string or API key
        """
        from persona_rag.boundary.embeddings import get_embedder
        from persona_rag.boundary.vdb.vector_store_factory import get_document_store

        settings = settings or get_settings()
        config = settings.vector_store
        embedder = get_embedder(settings)
        retriever = HybridRetriever(
            store=get_document_store(settings),
            embedder=embedder,
            top_k=config.top_k,
            rrf_k=config.rrf_k,
        )
        return cls(retriever, max_context_chars=config.max_context_chars)

    async def close(self) -> None:
        """Release the store's connections."""
        await self._retriever.close()

    async def retrieve(
        self,
        persona_scope: str,
        query: str,
        uploaded_context: str | None = None,
    ) -> RetrievalResult:
        """
        Retrieve and assemble context for a persona.

        Each call logs under its own correlation ID; the caller's ID, if
        any, is restored afterwards.

        Args:
            persona_scope: Persona id whose private chunks are visible
            query: Free-text query (see build_persona_query)
            uploaded_context: Optional user-supplied text ranked with the
                stored chunks under the same budget

        Returns:
            RetrievalResult: Empty when the query is blank, nothing matched,
                or retrieval failed
        """
        if not query or not query.strip():
            return RetrievalResult()

        with correlation_scope():
            try:
                hits = await self._retriever.search(
                    query, persona_scope, uploaded_context=uploaded_context
                )
            except RetrievalError as e:
                log_exception_with_context(
                    logger,
                    f"{__name__}:retrieve - Retrieval failed, continuing without context",
                    e,
                    persona_scope=persona_scope,
                )
                return RetrievalResult()

            context = assemble_context(hits, self.max_context_chars)
            logger.info(
                f"{__name__}:retrieve - {len(context.included)} chunks in context",
                extra={"persona_scope": persona_scope, "context_chars": len(context.text)},
            )
            return RetrievalResult(
                assembled_context=context.text,
                cited_sources=cite_sources(context.included, persona_scope),
                chunks=list(context.included),
            )
