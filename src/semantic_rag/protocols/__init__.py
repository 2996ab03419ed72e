"""Protocol interfaces for swappable implementations.

Protocols enable:
- Easy swapping of implementations (Redis → pgvector, Gemini → Ollama, etc.)
- Unit testing with in-memory implementations
- Clear separation of concerns
"""

from .embedding_provider import EmbeddingProvider
from .text_generator import TextGenerator
from .vector_store import VectorStore

__all__ = [
    "EmbeddingProvider",
    "TextGenerator",
    "VectorStore",
]
