"""
Reciprocal Rank Fusion of lexical and vector result lists.

Each hit scores 1 / (k + rank) in the list it came from (rank is 1-indexed).
A chunk found by more than one list keeps the highest of its scores, so
agreement between the lists does not add up. Caller-supplied text ranked
in memory can join as a third list.

Dependencies: pydantic
System role: Rank merging for the hybrid retriever
"""

from typing import Literal, Sequence

from pydantic import Field

from persona_rag.boundary.vdb.vector_schemas import SearchHit

DEFAULT_RRF_K = 60


class FusedHit(SearchHit):
    """Search hit with its fused rank score; `score` stays the raw store score."""

    fused_score: float = Field(description="Reciprocal rank score, 1 / (k + rank)")
    matched_by: Literal["lexical", "vector", "uploaded"] = Field(
        description="List the kept score came from",
    )


def reciprocal_rank_fusion(
    lexical: Sequence[SearchHit],
    vector: Sequence[SearchHit],
    k: int = DEFAULT_RRF_K,
    top_k: int = 5,
    uploaded: Sequence[SearchHit] = (),
) -> list[FusedHit]:
    """
    Merge ranked lists by id, keeping each id's maximum RRF score.

    Lists are visited lexical, vector, uploaded; on equal scores the
    first-seen entry is kept. The output is sorted by fused score (stable
    for ties) and cut to `top_k`.

    Args:
        lexical: Full-text hits, best first
        vector: Similarity hits, best first
        k: RRF smoothing constant
        top_k: Maximum results returned
        uploaded: Uploaded-context pieces ranked by similarity, best first

    Returns:
        list[FusedHit]: Unique hits, best first
    """
    fused: dict[str, FusedHit] = {}

    for origin, hits in (("lexical", lexical), ("vector", vector), ("uploaded", uploaded)):
        for rank, hit in enumerate(hits, start=1):
            score = 1.0 / (k + rank)
            current = fused.get(hit.id)
            if current is None or score > current.fused_score:
                fused[hit.id] = FusedHit(
                    id=hit.id,
                    content=hit.content,
                    metadata=hit.metadata,
                    score=hit.score,
                    fused_score=score,
                    matched_by=origin,
                )

    ranked = sorted(fused.values(), key=lambda h: h.fused_score, reverse=True)
    return ranked[:top_k]
