"""
Exception hierarchy for the legal ingestion pipeline.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class LegalPipelineException(Exception):
    """Base exception for all pipeline errors."""

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


class InputValidationError(LegalPipelineException):
    """Raised when a request is missing required fields or has invalid values."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize input validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class PayloadTooLargeError(InputValidationError):
    """Raised when raw text exceeds the accepted ingest size."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            f"rawText too large ({size} chars, max {limit})",
            field="rawText",
            details={"size": size, "limit": limit},
        )


class NormalizationValidationError(LegalPipelineException):
    """Raised when a normalized document fails schema validation."""

    def __init__(self, issues: list[dict[str, str]]) -> None:
        """
        Initialize normalization validation error.

        Args:
            issues: Field-level issues as {"field", "message"} dicts
        """
        self.issues = issues
        super().__init__("Validation failed", {"issues": issues})


class QAValidationError(LegalPipelineException):
    """Raised when chunk output breaks a structural invariant."""

    def __init__(self, errors: list[str], document_id: str | None = None) -> None:
        """
        Initialize QA validation error.

        Args:
            errors: First violations reported by the QA gate
            document_id: Document being chunked, when known
        """
        self.errors = errors
        details: dict[str, Any] = {"errors": errors}
        if document_id:
            details["document_id"] = document_id
        super().__init__("Chunk validation failed (QA gate)", details)


class DocumentNotFoundError(LegalPipelineException):
    """Raised when a document cannot be found."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize document not found error.

        Args:
            document_id: ID of the missing document
            details: Additional context
        """
        details = details or {}
        details["document_id"] = document_id
        super().__init__(f"Document not found: {document_id}", details)


class PersistenceError(LegalPipelineException):
    """Raised when database writes fail."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize persistence error.

        Args:
            message: Error message
            document_id: ID of the affected document
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class EmbeddingError(LegalPipelineException):
    """Raised when embedding generation fails."""

    def __init__(
        self,
        message: str,
        model_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize embedding error.

        Args:
            message: Error message
            model_name: Name of embedding model
            details: Additional context
        """
        details = details or {}
        if model_name:
            details["model_name"] = model_name
        super().__init__(message, details)


class AuthenticationError(LegalPipelineException):
    """Raised when the internal shared secret is missing or wrong."""


class ConfigurationError(LegalPipelineException):
    """Raised when required configuration is absent."""
