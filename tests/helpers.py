"""
Test doubles and builders shared across the suite.

Dependencies: persona_rag
"""

import hashlib
import re
from pathlib import Path
from typing import Sequence

from persona_rag.core.document_processing.configs import (
    DocumentPipelineSettings,
    ScopeStrategy,
    SourceRoot,
)
from persona_rag.core.exceptions import EmbeddingProviderError

TEST_DIMENSION = 64

_TOKEN_RE = re.compile(r"\w+")


class FakeEmbedder:
    """
    Deterministic hashing bag-of-words embedder.

    Texts sharing words get similar vectors, which is enough to exercise
    ranking without a network call.
    """

    def __init__(self, dimension: int = TEST_DIMENSION, fail_on: str | None = None) -> None:
        self.dimension = dimension
        self.fail_on = fail_on
        self.fail_queries = False
        self.batch_calls: list[list[str]] = []
        self.query_calls: list[str] = []

    def vector(self, text: str) -> list[float]:
        vec = [0.0] * self.dimension
        for token in _TOKEN_RE.findall(text.lower()):
            index = int(hashlib.md5(token.encode("utf-8")).hexdigest(), 16) % self.dimension
            vec[index] += 1.0
        return vec

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        self.batch_calls.append(list(texts))
        if self.fail_on and any(self.fail_on in text for text in texts):
            raise EmbeddingProviderError("provider unavailable")
        return [self.vector(text) for text in texts]

    async def embed_one(self, text: str) -> list[float]:
        self.query_calls.append(text)
        if self.fail_queries:
            raise EmbeddingProviderError("provider unavailable")
        return self.vector(text)


def write_file(base: Path, relative: str, content: str) -> Path:
    """Create a file (and parents) under `base`."""
    path = base / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def make_pipeline_settings(base_dir: Path, **overrides) -> DocumentPipelineSettings:
    """Pipeline settings rooted at `base_dir` with the standard three roots."""
    values = {
        "base_dir": str(base_dir),
        "source_roots": [
            SourceRoot(path="data/personas", strategy=ScopeStrategy.FILE_STEM),
            SourceRoot(path="data/knowledge/personas", strategy=ScopeStrategy.SUBDIRECTORY),
            SourceRoot(path="data/knowledge/global", persona_ids=["*"]),
        ],
        "ignore_patterns": [".*", "*~"],
        "chunk_size": 200,
        "chunk_overlap": 20,
        "max_concurrent_files": 2,
        "dry_run": False,
        "protect_failed_sources": True,
    }
    values.update(overrides)
    return DocumentPipelineSettings(**values)
