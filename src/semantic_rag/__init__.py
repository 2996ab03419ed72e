"""Semantic RAG - Retrieval-augmented chat with a semantic answer cache.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (EmbeddingProvider, VectorStore, TextGenerator)
    - repositories: Data access implementations (Redis, Gemini, Ollama, local)
    - services: Business logic (QueryOrchestrator and its collaborators)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from semantic_rag.entities import Query
    from semantic_rag.services import QueryOrchestrator

    answer = await orchestrator.answer_chat(Query(text="What is X?", domain_key="docs"))
    ```

For HTTP API:
    ```python
    from semantic_rag.api.app import app
    ```
"""

from semantic_rag.config import get_redis_client, settings
from semantic_rag.entities import ChatAnswer, ChatMessage, Query, SearchHit
from semantic_rag.errors import (
    EmbeddingError,
    ErrorKind,
    GenerationError,
    IngestionError,
    RagError,
    RetrievalError,
    ValidationError,
)
from semantic_rag.protocols import EmbeddingProvider, TextGenerator, VectorStore
from semantic_rag.services import QueryOrchestrator

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "EmbeddingProvider",
    "TextGenerator",
    "VectorStore",
    # Services (business logic)
    "QueryOrchestrator",
    # Entities (domain models)
    "ChatAnswer",
    "ChatMessage",
    "Query",
    "SearchHit",
    # Errors
    "ErrorKind",
    "RagError",
    "EmbeddingError",
    "GenerationError",
    "IngestionError",
    "RetrievalError",
    "ValidationError",
]
