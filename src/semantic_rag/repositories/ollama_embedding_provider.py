"""Ollama-based embedding provider.

Uses Ollama's local API to generate embeddings. Ollama serves models locally
without requiring API keys or downloading models manually.

Requirements:
    - Ollama installed: https://ollama.com
    - Model pulled: `ollama pull embeddinggemma`
    - Ollama running: `ollama serve` (usually runs automatically)

Models available:
- embeddinggemma (308M params, 768 dims, 2K context)
- nomic-embed-text (137M params, 768 dims)
- mxbai-embed-large (335M params, 1024 dims)
- all-minilm (22M params, 384 dims)
"""

import httpx

from semantic_rag.config import settings
from semantic_rag.errors import EmbeddingError


class OllamaEmbeddingProvider:
    """Ollama-based implementation of EmbeddingProvider protocol.

    Uses Ollama's local API at ``{base_url}/api/embed``.

    Example:
        ```python
        provider = OllamaEmbeddingProvider.create(model_name="embeddinggemma")
        embedding = await provider.encode("Hello, world!")
        ```
    """

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        output_dimension: int | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Ollama embedding provider.

        Args:
            model_name: Name of the Ollama model. Defaults to settings.embedding_model.
            base_url: Ollama API base URL. Defaults to settings.ollama_base_url.
            output_dimension: Vector length the model produces. Defaults to
                settings.embedding_dimension.
            timeout: Request timeout in seconds.
            client: Optional preconfigured async HTTP client.
        """
        self._model_name = model_name or settings.embedding_model
        self._base_url = (base_url or settings.ollama_base_url).rstrip("/")
        self._dimension = output_dimension or settings.embedding_dimension
        self._timeout = timeout or settings.http_timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @classmethod
    def create(
        cls,
        model_name: str | None = None,
        base_url: str | None = None,
    ) -> "OllamaEmbeddingProvider":
        """Factory method to create OllamaEmbeddingProvider with defaults."""
        return cls(model_name=model_name, base_url=base_url)

    @property
    def dimension(self) -> int:
        """Get the embedding vector dimension."""
        return self._dimension

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Raises:
            EmbeddingError: If the Ollama request fails or the response has no vector
        """
        url = f"{self._base_url}/api/embed"
        payload = {
            "model": self._model_name,
            "input": text,
        }

        try:
            response = await self.client.post(url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            detail = f"Ollama API error: {e}"
            if "connection refused" in str(e).lower():
                detail += " (is Ollama running? Try: ollama serve)"
            elif "not found" in str(e).lower():
                detail += f" (model not found? Try: ollama pull {self._model_name})"
            raise EmbeddingError("unreachable", detail) from e

        # Ollama returns {"embeddings": [[...]]} for single input
        if data.get("embeddings"):
            return data["embeddings"][0]

        # Fallback: try "embedding" (singular)
        if "embedding" in data:
            return data["embedding"]

        raise EmbeddingError("malformed_response", f"Unexpected response format: {list(data)}")

    async def is_available(self) -> bool:
        """Check if Ollama is running and the model is available."""
        try:
            await self.encode("test")
            return True
        except EmbeddingError:
            return False

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
