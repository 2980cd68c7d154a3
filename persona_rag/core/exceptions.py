"""
Exception hierarchy for the persona retrieval subsystem.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class PersonaRagException(Exception):
    """Base exception for all persona retrieval errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(PersonaRagException):
    """Raised at startup when required settings are missing or invalid."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error message
            setting: Environment variable or setting name at fault
            details: Additional context
        """
        details = details or {}
        if setting:
            details["setting"] = setting
        super().__init__(message, details)


class DocumentProcessingError(PersonaRagException):
    """Base exception for per-file ingestion errors."""

    def __init__(
        self,
        message: str,
        source_file: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            source_file: Relative path of the file that failed
            details: Additional context
        """
        details = details or {}
        if source_file:
            details["source_file"] = source_file
        super().__init__(message, details)


class ParsingError(DocumentProcessingError):
    """Raised when text extraction from a source file fails."""

    def __init__(
        self,
        message: str,
        source_file: str | None = None,
        file_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize parsing error.

        Args:
            message: Error message
            source_file: Path of the file
            file_type: Extension of the file that failed parsing
            details: Additional context
        """
        details = details or {}
        if file_type:
            details["file_type"] = file_type
        super().__init__(message, source_file, details)


class EmbeddingProviderError(DocumentProcessingError):
    """Raised when the embedding provider call fails (network, auth, quota)."""

    pass


class VectorStoreError(PersonaRagException):
    """Raised when document store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Operation that failed (upsert, delete, lexical_search, ...)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class DimensionMismatchError(VectorStoreError):
    """Raised when an embedding does not match the store's fixed dimension."""

    def __init__(
        self,
        expected: int,
        actual: int,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize dimension mismatch error.

        Args:
            expected: Dimension of the embedding column
            actual: Length of the rejected vector
            operation: Store operation that rejected it
            details: Additional context
        """
        details = details or {}
        details.update({"expected": expected, "actual": actual})
        super().__init__(
            f"Embedding dimension mismatch: expected {expected}, got {actual}",
            operation,
            details,
        )


class RetrievalError(PersonaRagException):
    """Raised when retrieval operations fail."""

    def __init__(
        self,
        message: str,
        persona_scope: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize retrieval error.

        Args:
            message: Error message
            persona_scope: Persona scope of the failed retrieval
            details: Additional context
        """
        details = details or {}
        if persona_scope:
            details["persona_scope"] = persona_scope
        super().__init__(message, details)
