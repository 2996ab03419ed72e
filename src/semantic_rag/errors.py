"""Classified errors raised by the query pipeline.

Every failure that leaves the core is one of a small set of kinds. The HTTP
layer maps the kind to a status code; the ``reason`` string is short and
machine-readable (e.g. ``"missing_api_key"``, ``"dimension_mismatch"``).
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Enumerated error kinds."""

    EMBEDDING = "embedding_error"
    RETRIEVAL = "retrieval_error"
    GENERATION = "generation_error"
    VALIDATION = "validation_error"
    INGESTION = "ingestion_error"


class RagError(Exception):
    """Base class for classified pipeline errors.

    Attributes:
        kind: The error kind
        reason: Short machine-readable reason
        detail: Optional human-readable detail (e.g. upstream message)
    """

    kind: ErrorKind

    def __init__(self, reason: str, detail: str | None = None) -> None:
        self.reason = reason
        self.detail = detail
        message = f"{self.kind.value}: {reason}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        """Convert the error to a response payload."""
        return {"error": self.kind.value, "reason": self.reason}


class EmbeddingError(RagError):
    """Embedding service unreachable, misconfigured, or returned a bad vector."""

    kind = ErrorKind.EMBEDDING


class RetrievalError(RagError):
    """Vector store unreachable or the search failed."""

    kind = ErrorKind.RETRIEVAL


class GenerationError(RagError):
    """Generation service failed or returned an empty/non-text completion."""

    kind = ErrorKind.GENERATION


class ValidationError(RagError):
    """Malformed request."""

    kind = ErrorKind.VALIDATION


class IngestionError(RagError):
    """Document download or parsing failed."""

    kind = ErrorKind.INGESTION
