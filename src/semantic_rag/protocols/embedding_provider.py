"""Embedding provider protocol.

Defines the interface for any embedding generation service that can
convert text to vector embeddings.

Implementations can include:
- Gemini embeddings (REST API, default)
- Ollama (local HTTP API)
- sentence-transformers (local, in-process)
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for embedding generation services.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed.

    Example:
        ```python
        provider: EmbeddingProvider = GeminiEmbeddingProvider.create()
        provider: EmbeddingProvider = OllamaEmbeddingProvider.create()
        ```
    """

    @property
    def dimension(self) -> int:
        """Return the dimension of the embedding vectors."""
        ...

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model."""
        ...

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats

        Raises:
            EmbeddingError: If the service is unreachable or misconfigured
        """
        ...

    async def is_available(self) -> bool:
        """Check if the embedding provider is available."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
