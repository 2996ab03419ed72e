"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> QueryOrchestrator -> {EmbeddingGateway, SemanticCache,
                                     ContentRetriever, RelevanceGate,
                                     ResponseGenerator} -> Repository
    (HTTP)  -> (Business)                              -> (Data Access)
"""

from .content_retriever import ContentRetriever
from .embedding_gateway import EmbeddingGateway
from .ingestion_service import ChunkFailure, IngestionReport, IngestionService
from .orchestrator import QueryOrchestrator
from .relevance_gate import NO_RESULTS_MESSAGES, RelevanceGate, no_results_message
from .response_generator import ResponseGenerator
from .semantic_cache import SemanticCache

__all__ = [
    "NO_RESULTS_MESSAGES",
    "ChunkFailure",
    "ContentRetriever",
    "EmbeddingGateway",
    "IngestionReport",
    "IngestionService",
    "QueryOrchestrator",
    "RelevanceGate",
    "ResponseGenerator",
    "SemanticCache",
    "no_results_message",
]
