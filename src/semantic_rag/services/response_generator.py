"""Response generator service.

Builds the system instruction for a query and delegates to a TextGenerator,
either without context (direct) or with retrieved passages (grounded).
"""

from typing import Sequence

from semantic_rag.entities import Query, SearchResult
from semantic_rag.errors import GenerationError
from semantic_rag.prompts import build_context, build_system_instruction
from semantic_rag.protocols import TextGenerator


class ResponseGenerator:
    """Produces ungrounded or context-grounded answers."""

    def __init__(self, generator: TextGenerator) -> None:
        """Initialize the response generator.

        Args:
            generator: Text generation service (required).
        """
        self._generator = generator

    async def _generate(self, query: Query, context: str = "") -> str:
        system_instruction = build_system_instruction(
            language=query.language,
            context=context,
            prompt=query.prompt,
        )
        try:
            text = await self._generator.generate(
                system_instruction=system_instruction,
                history=query.history,
                user_message=query.text,
            )
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError("provider_failure", str(e)) from e

        if not isinstance(text, str):
            raise GenerationError("non_text_completion", type(text).__name__)
        return text

    async def generate_direct(self, query: Query) -> str:
        """Answer with no retrieved context."""
        return await self._generate(query)

    async def generate_grounded(self, query: Query, passages: Sequence[SearchResult]) -> str:
        """Answer using retrieved passages, concatenated in retrieval order."""
        context = build_context([passage.text for passage in passages])
        return await self._generate(query, context)

    @property
    def generator(self) -> TextGenerator:
        """Get the underlying generator (for testing)."""
        return self._generator
