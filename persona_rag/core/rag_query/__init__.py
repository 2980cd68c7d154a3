"""
Persona context retrieval.

Exports: PersonaContextService, HybridRetriever, reciprocal_rank_fusion,
assemble_context, build_persona_query
"""

from persona_rag.core.rag_query.context_assembler import AssembledContext, assemble_context
from persona_rag.core.rag_query.fusion import FusedHit, reciprocal_rank_fusion
from persona_rag.core.rag_query.hybrid_retriever import HybridRetriever
from persona_rag.core.rag_query.service import (
    CitedSource,
    PersonaContextService,
    RetrievalResult,
    build_persona_query,
)

__all__ = [
    "AssembledContext",
    "assemble_context",
    "FusedHit",
    "reciprocal_rank_fusion",
    "HybridRetriever",
    "CitedSource",
    "PersonaContextService",
    "RetrievalResult",
    "build_persona_query",
]
