"""
In-memory document store for development and tests.

Implements the DocumentStore protocol with a dict keyed by chunk id,
brute-force cosine similarity for vector search and an all-terms token match
for lexical search. Nothing is persisted across processes.

Dependencies: math, re
System role: Development document store (local runs and unit tests)
"""

import asyncio
import logging
import math
import re
from collections import Counter
from typing import Iterable, Sequence

from persona_rag.boundary.vdb.vector_schemas import (
    DocumentMetadata,
    DocumentRecord,
    SearchHit,
)
from persona_rag.core.exceptions import DimensionMismatchError

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\w+")

# Minimal stand-in for the 'english' text search stop list
_STOPWORDS = frozenset(
    "a an and are as at be by for from in is it of on or that the this to was with".split()
)


def tokenize(text: str) -> list[str]:
    """Lowercased word tokens."""
    return _TOKEN_RE.findall(text.lower())


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity; 0.0 when either vector has zero norm."""
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


class InMemoryDocumentStore:
    """Dict-backed document store with the same contract as PostgresDocumentStore."""

    def __init__(self, dimension: int = 1536) -> None:
        """
        Initialize an empty store.

        Args:
            dimension: Fixed embedding length enforced on every write and query
        """
        self.dimension = dimension
        self._rows: dict[str, DocumentRecord] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._rows)

    def get(self, id: str) -> DocumentRecord | None:
        """Return the stored row for `id`, if any."""
        return self._rows.get(id)

    def _check_dimension(self, embedding: Sequence[float], operation: str) -> None:
        if len(embedding) != self.dimension:
            raise DimensionMismatchError(self.dimension, len(embedding), operation)

    async def upsert(
        self,
        id: str,
        content: str,
        embedding: Sequence[float],
        metadata: DocumentMetadata,
    ) -> None:
        await self.upsert_many(
            [DocumentRecord(id=id, content=content, embedding=list(embedding), metadata=metadata)]
        )

    async def upsert_many(self, records: Sequence[DocumentRecord]) -> int:
        for record in records:
            self._check_dimension(record.embedding, "upsert")
        async with self._lock:
            for record in records:
                self._rows[record.id] = record.model_copy(deep=True)
        return len(records)

    async def delete_by_ids(self, ids: Iterable[str]) -> int:
        async with self._lock:
            deleted = 0
            for id in set(ids):
                if self._rows.pop(id, None) is not None:
                    deleted += 1
        return deleted

    async def list_all_ids(self) -> set[str]:
        return set(self._rows)

    async def list_ids_by_source(self, source_files: Iterable[str]) -> set[str]:
        sources = set(source_files)
        return {
            id for id, record in self._rows.items()
            if record.metadata.source_file in sources
        }

    async def lexical_search(self, query: str, scope: str, limit: int) -> list[SearchHit]:
        """
        All query terms must occur in the row (websearch_to_tsquery AND
        semantics); rank is matched term frequency over document length.
        """
        terms = [t for t in tokenize(query) if t not in _STOPWORDS]
        if not terms:
            return []

        hits = []
        for record in self._rows.values():
            if not record.metadata.matches_scope(scope):
                continue
            tokens = tokenize(record.content)
            counts = Counter(tokens)
            if not all(counts[t] for t in terms):
                continue
            rank = sum(counts[t] for t in terms) / len(tokens)
            hits.append(self._to_hit(record, rank))

        hits.sort(key=lambda h: h.score, reverse=True)
        return hits[:limit]

    async def vector_search(
        self,
        query_embedding: Sequence[float],
        scope: str,
        limit: int,
    ) -> list[SearchHit]:
        self._check_dimension(query_embedding, "vector_search")
        hits = [
            self._to_hit(record, cosine_similarity(query_embedding, record.embedding))
            for record in self._rows.values()
            if record.metadata.matches_scope(scope)
        ]
        hits.sort(key=lambda h: h.score, reverse=True)
        return hits[:limit]

    @staticmethod
    def _to_hit(record: DocumentRecord, score: float) -> SearchHit:
        return SearchHit(
            id=record.id,
            content=record.content,
            metadata=record.metadata.model_copy(deep=True),
            score=score,
        )

    async def close(self) -> None:
        """Nothing to release."""
