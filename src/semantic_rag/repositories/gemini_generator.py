"""Gemini text generator.

Calls the Gemini REST API (``models/{model}:generateContent``) with httpx.
The system instruction goes into ``systemInstruction``; history turns are
mapped to the ``user``/``model`` roles Gemini expects.
"""

from typing import Any, Sequence

import httpx

from semantic_rag.config import settings
from semantic_rag.entities import ChatMessage, Role
from semantic_rag.errors import GenerationError

SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


class GeminiGenerator:
    """Gemini implementation of TextGenerator protocol.

    Example:
        ```python
        generator = GeminiGenerator.create(api_key="...")
        text = await generator.generate("You are helpful.", [], "Hello")
        ```
    """

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Gemini generator.

        Args:
            api_key: Gemini API key. Defaults to settings.gemini_api_key.
            model_name: Generation model id. Defaults to settings.generation_model.
            base_url: REST base URL. Defaults to settings.gemini_base_url.
            timeout: Request timeout in seconds.
            client: Optional preconfigured async HTTP client.
        """
        self._api_key = api_key if api_key is not None else settings.gemini_api_key
        self._model_name = model_name or settings.generation_model
        self._base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self._timeout = timeout or settings.http_timeout
        self._client = client

    @classmethod
    def create(cls, api_key: str | None = None, model_name: str | None = None) -> "GeminiGenerator":
        """Factory method to create GeminiGenerator with defaults."""
        return cls(api_key=api_key, model_name=model_name)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    @staticmethod
    def _contents(history: Sequence[ChatMessage], user_message: str) -> list[dict[str, Any]]:
        contents = [
            {
                "role": "model" if message.role == Role.ASSISTANT else "user",
                "parts": [{"text": message.text}],
            }
            for message in history
        ]
        contents.append({"role": "user", "parts": [{"text": user_message}]})
        return contents

    async def generate(
        self,
        system_instruction: str,
        history: Sequence[ChatMessage],
        user_message: str,
    ) -> str:
        """Generate a completion.

        Raises:
            GenerationError: If the API key is missing, the request fails,
                or the completion carries no text
        """
        if not self._api_key:
            raise GenerationError("missing_api_key", "Gemini API key is required")

        url = f"{self._base_url}/models/{self._model_name}:generateContent"
        payload = {
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "contents": self._contents(history, user_message),
            "safetySettings": SAFETY_SETTINGS,
        }

        try:
            response = await self.client.post(
                url, json=payload, headers={"x-goog-api-key": self._api_key}
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            reason = {401: "invalid_api_key", 403: "invalid_api_key",
                      429: "quota_exceeded"}.get(status, "upstream_error")
            raise GenerationError(reason, f"Gemini API returned {status}") from e
        except httpx.HTTPError as e:
            raise GenerationError("unreachable", f"Gemini API error: {e}") from e

        candidates = data.get("candidates") or []
        if not candidates:
            block_reason = (data.get("promptFeedback") or {}).get("blockReason")
            raise GenerationError("no_candidates", block_reason)

        parts = (candidates[0].get("content") or {}).get("parts") or []
        texts = [part.get("text") for part in parts if "text" in part]
        if not texts or not all(isinstance(text, str) for text in texts):
            raise GenerationError(
                "non_text_completion",
                f"finishReason={candidates[0].get('finishReason')}",
            )
        return "".join(texts)

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
