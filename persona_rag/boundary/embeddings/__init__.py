"""
Embedding provider boundary.

Hides the embedding model/provider behind the Embedder protocol
(embed_batch / embed_one).
"""

from persona_rag.boundary.embeddings.openai_embedder import (
    Embedder,
    OpenAIEmbedder,
    get_embedder,
)

__all__ = ["Embedder", "OpenAIEmbedder", "get_embedder"]
