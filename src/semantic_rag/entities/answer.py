"""Chat answer domain entity."""

from dataclasses import dataclass
from enum import Enum

# Context-count markers reported alongside an answer
NO_RETRIEVAL = -1
SERVED_FROM_CACHE = 2


class AnswerSource(str, Enum):
    """Which strategy produced the answer."""

    DIRECT = "direct"
    CACHE = "cache"
    GENERATED = "generated"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ChatAnswer:
    """Result of a chat orchestration.

    Attributes:
        text: The answer text
        source: The strategy that produced it
        context_count: -1 for direct answers, 2 for cache hits, the number of
            passages used for generated answers, None for the fallback
    """

    text: str
    source: AnswerSource
    context_count: int | None = None
