"""
Database configuration settings.

Manages PostgreSQL connection parameters for SQLAlchemy.
Accepts either a full DSN (POSTGRES_URL, falling back to POSTGRES_URL_LOCAL)
or discrete host/user/db fields.

Dependencies: pydantic, pydantic_settings
System role: Document store connection configuration
"""

from pydantic import AliasChoices, Field
from pydantic_settings import SettingsConfigDict

from persona_rag.configs.base import BaseSettings
from persona_rag.core.exceptions import ConfigurationError


class DatabaseSettings(BaseSettings):
    """PostgreSQL database configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("POSTGRES_URL", "POSTGRES_URL_LOCAL"),
        description="Full PostgreSQL DSN; takes precedence over the discrete fields",
    )
    host: str | None = Field(default=None, description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    user: str = Field(default="postgres", description="PostgreSQL user")
    password: str = Field(default="postgres", description="PostgreSQL password")
    db: str = Field(default="personas", description="PostgreSQL database name")

    pool_size: int = Field(default=5, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Connection pool timeout in seconds")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    sslmode: str = Field(default="prefer", description="SSL mode for the connection")

    @property
    def is_configured(self) -> bool:
        """Whether any connection information was supplied."""
        return bool(self.url or self.host)

    def _base_url(self) -> str:
        if self.url:
            # Strip the driver so callers can choose psycopg or asyncpg
            scheme, _, rest = self.url.partition("://")
            if not rest:
                raise ConfigurationError(
                    "POSTGRES_URL is not a valid connection string",
                    setting="POSTGRES_URL",
                )
            return rest
        if self.host:
            return f"{self.user}:{self.password}@{self.host}:{self.port}/{self.db}"
        raise ConfigurationError(
            "Database connection string is not set (expected POSTGRES_URL or POSTGRES_HOST)",
            setting="POSTGRES_URL",
        )

    @property
    def database_url(self) -> str:
        """
        Construct synchronous PostgreSQL connection URL (psycopg 3 driver).

        Returns:
            str: SQLAlchemy-compatible database URL

        Raises:
            ConfigurationError: If no connection information is configured
        """
        base = self._base_url()
        if self.url:
            return f"postgresql+psycopg://{base}"
        return f"postgresql+psycopg://{base}?sslmode={self.sslmode}"

    @property
    def async_database_url(self) -> str:
        """
        Construct async PostgreSQL connection URL.

        Returns:
            str: SQLAlchemy async-compatible database URL (asyncpg driver)

        Raises:
            ConfigurationError: If no connection information is configured
        """
        base = self._base_url()
        if self.url:
            # asyncpg rejects libpq's sslmode query parameter
            base = base.replace("sslmode=", "ssl=")
            return f"postgresql+asyncpg://{base}"
        ssl_param = f"?ssl={self.sslmode}" if self.sslmode != "disable" else ""
        return f"postgresql+asyncpg://{base}{ssl_param}"
