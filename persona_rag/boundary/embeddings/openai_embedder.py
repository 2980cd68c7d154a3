"""
OpenAI embeddings wrapper with a fixed output dimensionality.

Wraps LangChain's OpenAIEmbeddings behind two async operations and enforces
the dimension contract of the documents.embedding column: every vector that
leaves this module has exactly `dimension` floats, or an
EmbeddingProviderError is raised. Transient provider failures are retried
with exponential backoff before surfacing.

Dependencies: langchain_openai, langchain_core, openai, tenacity
System role: Embedding provider for ingestion and query-time retrieval
"""

import logging
from typing import Protocol, Sequence

import openai
from langchain_core.embeddings import Embeddings
from langchain_openai import OpenAIEmbeddings
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from persona_rag.configs import Settings, get_settings
from persona_rag.core.exceptions import ConfigurationError, EmbeddingProviderError

logger = logging.getLogger(__name__)

# Failures worth another attempt; auth and request errors are not
TRANSIENT_ERRORS = (
    openai.APIConnectionError,
    openai.APITimeoutError,
    openai.RateLimitError,
    openai.InternalServerError,
)


class Embedder(Protocol):
    """Text to fixed-length vector conversion."""

    dimension: int

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]: ...

    async def embed_one(self, text: str) -> list[float]: ...


class OpenAIEmbedder:
    """
    Embedder backed by the OpenAI embeddings API.

    Holds no state between calls besides the HTTP client, so one instance
    can serve concurrent requests.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "text-embedding-3-small",
        dimension: int = 1536,
        max_retries: int = 3,
        request_timeout: float = 30.0,
        embeddings: Embeddings | None = None,
        retry_wait: float = 1.0,
    ) -> None:
        """
        Initialize the embedder.

        Args:
            api_key: OpenAI API key (falls back to OPENAI_API_KEY in the environment)
            model: OpenAI embedding model ID
            dimension: Required output dimension
            max_retries: Total attempts per call for transient failures
            request_timeout: Per-request timeout in seconds
            embeddings: Pre-built LangChain embeddings (tests, alternative providers)
            retry_wait: Initial backoff in seconds between attempts
        """
        self.model = model
        self.dimension = dimension
        self._max_attempts = max(1, max_retries)
        self._retry_wait = retry_wait

        if embeddings is None:
            kwargs = {}
            # Only the text-embedding-3 family accepts a dimensions override
            if model.startswith("text-embedding-3"):
                kwargs["dimensions"] = dimension
            embeddings = OpenAIEmbeddings(
                model=model,
                api_key=api_key,
                max_retries=0,
                request_timeout=request_timeout,
                **kwargs,
            )
        self._embeddings = embeddings

        logger.info(
            f"{__name__}:__init__ - Initialized with model={model}, dimension={dimension}"
        )

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential_jitter(initial=self._retry_wait, max=20, jitter=2 * self._retry_wait),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:embed - Retry {retry_state.attempt_number}/{self._max_attempts} "
                f"after {type(retry_state.outcome.exception()).__name__}"
            ),
            reraise=True,
        )

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed a batch of texts, preserving order.

        Args:
            texts: Texts to embed

        Returns:
            One vector per input text

        Raises:
            EmbeddingProviderError: Provider failure, or a response with the
                wrong count or dimension
        """
        if not texts:
            return []

        try:
            async for attempt in self._retrying():
                with attempt:
                    vectors = await self._embeddings.aembed_documents(list(texts))
        except Exception as e:
            raise EmbeddingProviderError(
                f"Failed to generate embeddings: {e}",
                details={"model": self.model, "batch_size": len(texts)},
            ) from e

        if len(vectors) != len(texts):
            raise EmbeddingProviderError(
                "Embedding provider returned the wrong number of vectors",
                details={"expected": len(texts), "actual": len(vectors)},
            )
        for vector in vectors:
            self._validate(vector)

        logger.debug(
            f"{__name__}:embed_batch - Generated {len(vectors)} embeddings",
            extra={"model": self.model},
        )
        return [list(v) for v in vectors]

    async def embed_one(self, text: str) -> list[float]:
        """
        Embed a single query string.

        Raises:
            EmbeddingProviderError: Provider failure or wrong dimension
        """
        try:
            async for attempt in self._retrying():
                with attempt:
                    vector = await self._embeddings.aembed_query(text)
        except Exception as e:
            raise EmbeddingProviderError(
                f"Failed to embed query: {e}",
                details={"model": self.model},
            ) from e

        self._validate(vector)
        return list(vector)

    def _validate(self, vector: Sequence[float]) -> None:
        if len(vector) != self.dimension:
            raise EmbeddingProviderError(
                "Embedding dimension does not match the configured dimension",
                details={"expected": self.dimension, "actual": len(vector), "model": self.model},
            )


def get_embedder(settings: Settings | None = None) -> OpenAIEmbedder:
    """
    Build the configured embedder.

    Args:
        settings: Application settings (cached singleton if None)

    Returns:
        OpenAIEmbedder

    Raises:
        ConfigurationError: OPENAI_API_KEY is not set
    """
    settings = settings or get_settings()
    config = settings.embedding
    if config.api_key is None or not config.api_key.get_secret_value():
        raise ConfigurationError("OPENAI_API_KEY is not set", setting="OPENAI_API_KEY")

    return OpenAIEmbedder(
        api_key=config.api_key.get_secret_value(),
        model=config.embedding_model,
        dimension=config.embedding_dimension,
        max_retries=config.max_retries,
        request_timeout=config.request_timeout,
    )
