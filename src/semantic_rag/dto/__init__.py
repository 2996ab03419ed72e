"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
Internal domain logic should use entities from the entities package.
"""

from .requests import ChatRequest, HistoryItem, SemanticSearchRequest, VectorizeRequest
from .responses import (
    ChatResponse,
    HealthCheckResponse,
    SearchResultItem,
    SemanticSearchResponse,
    VectorizeResponse,
)

__all__ = [
    "ChatRequest",
    "HistoryItem",
    "SemanticSearchRequest",
    "VectorizeRequest",
    "ChatResponse",
    "HealthCheckResponse",
    "SearchResultItem",
    "SemanticSearchResponse",
    "VectorizeResponse",
]
