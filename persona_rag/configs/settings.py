"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from persona_rag.configs.base import BaseSettings
from persona_rag.configs.database import DatabaseSettings
from persona_rag.configs.embedding import EmbeddingSettings
from persona_rag.configs.vector_store import VectorStoreSettings
from persona_rag.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    embedding: EmbeddingSettings = EmbeddingSettings()
    vector_store: VectorStoreSettings = VectorStoreSettings()

    def require_runtime_credentials(self) -> None:
        """
        Fail fast when the store or embedding provider cannot be reached.

        The in-memory store needs no connection string; the embedding
        provider key is always required.

        Raises:
            ConfigurationError: Missing connection string or OPENAI_API_KEY
        """
        if self.vector_store.store_type.lower() == "postgres" and not self.database.is_configured:
            raise ConfigurationError(
                "Database connection string is not set (expected POSTGRES_URL or POSTGRES_HOST)",
                setting="POSTGRES_URL",
            )
        if self.embedding.api_key is None or not self.embedding.api_key.get_secret_value():
            raise ConfigurationError(
                "OPENAI_API_KEY is not set",
                setting="OPENAI_API_KEY",
            )


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for the life of the process.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from persona_rag.configs import get_settings
        settings = get_settings()
    """
    return Settings()
