"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Clients and services built once in the lifespan (composition root)
    - Dependency functions retrieve from request.app.state
    - Network clients closed on shutdown
"""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from semantic_rag.config import Settings, get_redis_client, settings
from semantic_rag.handlers import RagHandler
from semantic_rag.protocols import EmbeddingProvider, TextGenerator
from semantic_rag.repositories import (
    GeminiEmbeddingProvider,
    GeminiGenerator,
    LocalEmbeddingProvider,
    OllamaEmbeddingProvider,
    OllamaGenerator,
    RedisVectorStore,
)
from semantic_rag.services import (
    ContentRetriever,
    EmbeddingGateway,
    IngestionService,
    QueryOrchestrator,
    RelevanceGate,
    ResponseGenerator,
    SemanticCache,
)
from semantic_rag.utils import get_logger

logger = get_logger(__name__)


def build_embedding_provider(config: Settings) -> EmbeddingProvider:
    """Create the embedding provider selected by EMBEDDING_PROVIDER."""
    if config.embedding_provider == "ollama":
        return OllamaEmbeddingProvider(
            model_name=config.embedding_model,
            base_url=config.ollama_base_url,
            output_dimension=config.embedding_dimension,
        )
    if config.embedding_provider == "local":
        return LocalEmbeddingProvider(
            model_name=config.embedding_model, output_dimension=config.embedding_dimension
        )
    return GeminiEmbeddingProvider(
        api_key=config.gemini_api_key,
        model_name=config.embedding_model,
        output_dimension=config.embedding_dimension,
        base_url=config.gemini_base_url,
    )


def build_generator(config: Settings) -> TextGenerator:
    """Create the text generator selected by GENERATION_PROVIDER."""
    if config.generation_provider == "ollama":
        return OllamaGenerator(model_name=config.generation_model, base_url=config.ollama_base_url)
    return GeminiGenerator(
        api_key=config.gemini_api_key,
        model_name=config.generation_model,
        base_url=config.gemini_base_url,
    )


def get_handler(request: Request) -> RagHandler:
    """Dependency injection for RagHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "rag_handler", None)
    if handler is None:
        raise RuntimeError("RagHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Builds all layers and stores the handler in app.state:
    1. Repositories (Redis namespaces, embedding provider, generator)
    2. Services (gateway, cache, retriever, gate, responder, orchestrator, ingestion)
    3. Handler (HTTP endpoints) - stored in app.state.rag_handler
    """
    redis_client = get_redis_client()
    embedding_provider = build_embedding_provider(settings)
    generator = build_generator(settings)

    content_store = RedisVectorStore.create(
        index_name=settings.content_index_name,
        dimension=settings.embedding_dimension,
        text_fields=("text",),
        redis_client=redis_client,
    )
    cached_store = RedisVectorStore.create(
        index_name=settings.cache_index_name,
        dimension=settings.embedding_dimension,
        text_fields=("text", "answer"),
        numeric_fields=("hits",),
        redis_client=redis_client,
    )

    embeddings = EmbeddingGateway(embedding_provider, dimension=settings.embedding_dimension)
    orchestrator = QueryOrchestrator(
        embeddings=embeddings,
        cache=SemanticCache(
            cached_store,
            similarity_threshold=settings.cache_similarity_threshold,
            top_k=settings.cache_top_k,
            candidate_multiplier=settings.candidate_multiplier,
        ),
        retriever=ContentRetriever(
            content_store,
            top_k=settings.content_top_k,
            candidate_multiplier=settings.candidate_multiplier,
        ),
        gate=RelevanceGate(threshold=settings.relevance_threshold),
        responder=ResponseGenerator(generator),
        search_top_k=settings.search_top_k,
    )
    ingestion = IngestionService(embeddings, content_store)

    app.state.rag_handler = RagHandler(
        orchestrator=orchestrator,
        ingestion=ingestion,
        content_store=content_store,
        embeddings=embeddings,
    )

    logger.info(
        "RAG service initialized (embeddings=%s/%s, generation=%s/%s)",
        settings.embedding_provider,
        embedding_provider.model_name,
        settings.generation_provider,
        generator.model_name,
    )
    logger.info(
        "Thresholds: cache=%.2f relevance=%.2f",
        settings.cache_similarity_threshold,
        settings.relevance_threshold,
    )

    yield

    del app.state.rag_handler
    await ingestion.close()
    await generator.close()
    await embedding_provider.close()
    redis_client.close()
    logger.info("RAG service shut down")


# Type alias for cleaner dependency injection
HandlerDep = Annotated[RagHandler, Depends(get_handler)]
