"""Gemini embedding provider.

Calls the Gemini REST API (``models/{model}:embedContent``) with httpx.
The output dimension is requested explicitly via ``outputDimensionality``
so every vector in both corpora has the same length.

Requirements:
    - A Gemini API key in ``GEMINI_API_KEY``
"""

import httpx

from semantic_rag.config import settings
from semantic_rag.errors import EmbeddingError


class GeminiEmbeddingProvider:
    """Gemini implementation of EmbeddingProvider protocol.

    This class satisfies the EmbeddingProvider protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        provider = GeminiEmbeddingProvider.create(api_key="...")
        embedding = await provider.encode("Hello, world!")
        print(len(embedding))  # 768
        ```
    """

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        output_dimension: int | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        task_type: str = "RETRIEVAL_QUERY",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Gemini embedding provider.

        Args:
            api_key: Gemini API key. Defaults to settings.gemini_api_key.
            model_name: Embedding model id. Defaults to settings.embedding_model.
            output_dimension: Requested vector length. Defaults to settings.
            base_url: REST base URL. Defaults to settings.gemini_base_url.
            timeout: Request timeout in seconds.
            task_type: Gemini embedding task type.
            client: Optional preconfigured async HTTP client.
        """
        self._api_key = api_key if api_key is not None else settings.gemini_api_key
        self._model_name = model_name or settings.embedding_model
        self._dimension = output_dimension or settings.embedding_dimension
        self._base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self._timeout = timeout or settings.http_timeout
        self._task_type = task_type
        self._client = client

    @classmethod
    def create(
        cls,
        api_key: str | None = None,
        model_name: str | None = None,
        output_dimension: int | None = None,
    ) -> "GeminiEmbeddingProvider":
        """Factory method to create GeminiEmbeddingProvider with defaults.

        Returns:
            Configured GeminiEmbeddingProvider
        """
        return cls(api_key=api_key, model_name=model_name, output_dimension=output_dimension)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    @property
    def dimension(self) -> int:
        """Get the requested embedding vector dimension."""
        return self._dimension

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Raises:
            EmbeddingError: If the API key is missing, the request fails,
                or the response carries no vector
        """
        if not self._api_key:
            raise EmbeddingError("missing_api_key", "Gemini API key is required for embeddings")

        url = f"{self._base_url}/models/{self._model_name}:embedContent"
        payload = {
            "model": f"models/{self._model_name}",
            "content": {"parts": [{"text": text}]},
            "taskType": self._task_type,
            "outputDimensionality": self._dimension,
        }

        try:
            response = await self.client.post(
                url, json=payload, headers={"x-goog-api-key": self._api_key}
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            reason = {400: "bad_request", 401: "invalid_api_key", 403: "invalid_api_key",
                      429: "quota_exceeded"}.get(status, "upstream_error")
            raise EmbeddingError(reason, f"Gemini API returned {status}") from e
        except httpx.HTTPError as e:
            raise EmbeddingError("unreachable", f"Gemini API error: {e}") from e

        values = (data.get("embedding") or {}).get("values")
        if not isinstance(values, list):
            raise EmbeddingError("malformed_response", f"Unexpected response format: {list(data)}")
        return [float(v) for v in values]

    async def is_available(self) -> bool:
        """Check if the embedding provider is available."""
        try:
            await self.encode("test")
            return True
        except EmbeddingError:
            return False

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
