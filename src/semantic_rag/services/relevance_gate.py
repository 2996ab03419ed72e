"""Relevance gate and localized fallback messages."""

from typing import Sequence

from semantic_rag.config import settings
from semantic_rag.entities import SearchResult

DEFAULT_LANGUAGE = "en"

NO_RESULTS_MESSAGES = {
    "en": "No relevant information found. Please try rephrasing your question.",
    "es": "No se encontró información relevante. Por favor, intenta reformular tu pregunta.",
    "fr": "Aucune information pertinente trouvée. Veuillez reformuler votre question.",
}


def no_results_message(language: str | None) -> str:
    """Fallback text for a language; unknown codes get the English text."""
    return NO_RESULTS_MESSAGES.get((language or "").lower(), NO_RESULTS_MESSAGES[DEFAULT_LANGUAGE])


class RelevanceGate:
    """Decides whether retrieved passages are worth generating from.

    Relevant iff there is at least one passage scoring at or above the
    threshold.
    """

    def __init__(self, threshold: float | None = None) -> None:
        self._threshold = threshold if threshold is not None else settings.relevance_threshold

    def is_relevant(self, results: Sequence[SearchResult]) -> bool:
        return any(result.score >= self._threshold for result in results)

    @property
    def threshold(self) -> float:
        return self._threshold
