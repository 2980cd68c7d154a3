"""
Embedding provider configuration settings.

Manages OpenAI credentials and the embedding model contract. The dimension
must match the documents.embedding column; changing the model requires a full
re-ingestion.

Dependencies: pydantic, pydantic_settings
System role: Embedding provider configuration for ingestion and retrieval
"""

from pydantic import Field, SecretStr
from pydantic_settings import SettingsConfigDict

from persona_rag.configs.base import BaseSettings


class EmbeddingSettings(BaseSettings):
    """OpenAI embedding configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="OPENAI_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: SecretStr | None = Field(default=None, description="OpenAI API key")
    embedding_model: str = Field(
        default="text-embedding-3-small",
        description="OpenAI embedding model ID",
    )
    embedding_dimension: int = Field(
        default=1536,
        description="Embedding vector dimension (must match VECTOR(n) column)",
    )
    max_retries: int = Field(
        default=3,
        description="Attempts per embedding request before surfacing the error",
    )
    request_timeout: float = Field(default=30.0, description="Request timeout in seconds")
