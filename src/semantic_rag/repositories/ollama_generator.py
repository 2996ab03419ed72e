"""Ollama text generator.

Uses Ollama's local chat API (``/api/chat``) with streaming disabled.
"""

from typing import Sequence

import httpx

from semantic_rag.config import settings
from semantic_rag.entities import ChatMessage
from semantic_rag.errors import GenerationError


class OllamaGenerator:
    """Ollama implementation of TextGenerator protocol."""

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._model_name = model_name or settings.generation_model
        self._base_url = (base_url or settings.ollama_base_url).rstrip("/")
        self._timeout = timeout or settings.http_timeout
        self._client = client

    @classmethod
    def create(cls, model_name: str | None = None, base_url: str | None = None) -> "OllamaGenerator":
        """Factory method to create OllamaGenerator with defaults."""
        return cls(model_name=model_name, base_url=base_url)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    @property
    def model_name(self) -> str:
        return self._model_name

    async def generate(
        self,
        system_instruction: str,
        history: Sequence[ChatMessage],
        user_message: str,
    ) -> str:
        """Generate a completion.

        Raises:
            GenerationError: If the request fails or the reply has no text content
        """
        messages = [{"role": "system", "content": system_instruction}]
        messages += [{"role": message.role.value, "content": message.text} for message in history]
        messages.append({"role": "user", "content": user_message})

        try:
            response = await self.client.post(
                f"{self._base_url}/api/chat",
                json={"model": self._model_name, "messages": messages, "stream": False},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise GenerationError("unreachable", f"Ollama API error: {e}") from e

        content = (data.get("message") or {}).get("content")
        if not isinstance(content, str):
            raise GenerationError("non_text_completion", f"Unexpected response format: {list(data)}")
        return content

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
