"""Error taxonomy for the retrieval and answer pipeline."""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ErrorDetail:
    """Structured error information carried by every pipeline exception."""
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


class RAGError(Exception):
    """Base exception with structured error information."""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, code: Optional[str] = None):
        self.error = ErrorDetail(
            code=code or self.code,
            message=message,
            details=details or {},
        )
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.error.code,
            "message": self.error.message,
            "details": self.error.details,
        }


class ValidationError(RAGError):
    """Missing or malformed input. Client error, never retried."""
    code = "VALIDATION_ERROR"


class ProviderError(RAGError):
    """An embedding or generation call to the upstream provider failed."""
    code = "API_ERROR"


class DimensionMismatchError(RAGError):
    """A provider produced a vector whose length differs from the canonical dimension."""
    code = "DIMENSION_MISMATCH"

    def __init__(self, expected: int, actual: int, provider: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        message = f"Embedding dimension mismatch: expected {expected}, got {actual}"
        if provider:
            message += f" from provider '{provider}'"
        super().__init__(
            message,
            details={"expected": expected, "actual": actual, "provider": provider},
        )


class StorageError(RAGError):
    """The vector store rejected or failed an operation."""
    code = "STORAGE_ERROR"


class ConfigurationError(RAGError):
    """Invalid process configuration, detected at startup."""
    code = "CONFIGURATION_ERROR"
