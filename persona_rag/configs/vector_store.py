"""
Vector store configuration settings.

Selects the document store implementation and holds the retrieval knobs
(top-K, fusion constant, context budget).

Dependencies: pydantic, pydantic_settings
System role: Retrieval configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VectorStoreSettings(BaseSettings):
    """Document store and hybrid retrieval configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="postgres",
        description="Document store type: 'postgres' (pgvector) or 'memory' for local dev",
    )
    top_k: int = Field(default=5, description="Number of fused results to return")
    rrf_k: int = Field(default=60, description="Reciprocal Rank Fusion constant")
    max_context_chars: int = Field(
        default=1800,
        description="Character budget for the assembled persona context",
    )

