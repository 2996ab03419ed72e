"""Domain entities for internal representation.

These are pure frozen dataclasses used by services and repositories.
They are NOT used for API contracts - use DTOs from the dto package for that.
"""

from .answer import NO_RETRIEVAL, SERVED_FROM_CACHE, AnswerSource, ChatAnswer
from .query import ChatMessage, Query, Role
from .search_result import CachedSearchResult, SearchHit, SearchResult, VectorHit

__all__ = [
    "NO_RETRIEVAL",
    "SERVED_FROM_CACHE",
    "AnswerSource",
    "CachedSearchResult",
    "ChatAnswer",
    "ChatMessage",
    "Query",
    "Role",
    "SearchHit",
    "SearchResult",
    "VectorHit",
]
