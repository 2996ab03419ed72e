"""Query domain entities."""

from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    """Author of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatMessage:
    """A single prior turn of the conversation.

    Attributes:
        role: Who wrote the turn
        text: The turn's text
    """

    role: Role
    text: str


@dataclass(frozen=True)
class Query:
    """An incoming natural-language query. Immutable once received.

    Attributes:
        text: The user's message
        domain_key: Knowledge domain to retrieve from. None means answer directly.
        history: Prior conversation turns, oldest first
        language: Requested response language (ISO-639-1 code)
        prompt: Optional extra system instruction supplied by the caller
    """

    text: str
    domain_key: str | None = None
    history: tuple[ChatMessage, ...] = field(default_factory=tuple)
    language: str = "en"
    prompt: str | None = None

    @property
    def has_domain(self) -> bool:
        """Whether retrieval applies to this query."""
        return bool(self.domain_key)
