"""Repository layer for data access.

This layer puts external dependencies (Redis, embedding and generation APIs)
behind protocol-based interfaces. The repositories are protocol-based
(structural typing), not inheritance-based.
"""

from semantic_rag.protocols import EmbeddingProvider, TextGenerator, VectorStore

from .gemini_embedding_provider import GeminiEmbeddingProvider
from .gemini_generator import GeminiGenerator
from .local_embedding_provider import LocalEmbeddingProvider
from .ollama_embedding_provider import OllamaEmbeddingProvider
from .ollama_generator import OllamaGenerator
from .redis_vector_store import RedisVectorStore

__all__ = [
    "EmbeddingProvider",
    "TextGenerator",
    "VectorStore",
    "GeminiEmbeddingProvider",
    "GeminiGenerator",
    "LocalEmbeddingProvider",
    "OllamaEmbeddingProvider",
    "OllamaGenerator",
    "RedisVectorStore",
]
