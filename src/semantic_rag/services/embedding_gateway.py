"""Embedding gateway.

Wraps an EmbeddingProvider and guarantees that every vector it hands out has
the configured system-wide dimension.
"""

from semantic_rag.config import settings
from semantic_rag.errors import EmbeddingError
from semantic_rag.protocols import EmbeddingProvider


class EmbeddingGateway:
    """Text → vector with dimensionality validation. No retries."""

    def __init__(self, provider: EmbeddingProvider, dimension: int | None = None) -> None:
        """Initialize the gateway.

        Args:
            provider: Embedding generation service (required).
            dimension: Expected vector length. Defaults to settings.embedding_dimension.
        """
        self._provider = provider
        self._dimension = dimension or settings.embedding_dimension

    async def embed(self, text: str) -> list[float]:
        """Embed a text.

        Raises:
            EmbeddingError: If the provider fails or the vector length is wrong
        """
        try:
            vector = await self._provider.encode(text)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError("provider_failure", str(e)) from e

        if not vector or len(vector) != self._dimension:
            raise EmbeddingError(
                "dimension_mismatch",
                f"expected {self._dimension} dimensions, got {len(vector) if vector else 0}",
            )
        return list(vector)

    async def is_healthy(self) -> bool:
        """Check if the underlying provider is available."""
        return await self._provider.is_available()

    @property
    def dimension(self) -> int:
        """Get the expected vector dimension."""
        return self._dimension

    @property
    def provider(self) -> EmbeddingProvider:
        """Get the underlying provider (for testing)."""
        return self._provider
