"""Text generator protocol.

Defines the interface for any chat-completion service.

Implementations can include:
- Gemini (REST API, default)
- Ollama (local HTTP API)
"""

from typing import Protocol, Sequence, runtime_checkable

from semantic_rag.entities import ChatMessage


@runtime_checkable
class TextGenerator(Protocol):
    """Protocol for text generation services."""

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model."""
        ...

    async def generate(
        self,
        system_instruction: str,
        history: Sequence[ChatMessage],
        user_message: str,
    ) -> str:
        """Generate a completion.

        Args:
            system_instruction: Instruction placed before the conversation
            history: Prior conversation turns, oldest first
            user_message: The message to answer

        Returns:
            The completion text

        Raises:
            GenerationError: If the service errors or returns a non-text result
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
