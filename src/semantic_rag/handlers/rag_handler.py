"""HTTP handlers for chat, semantic search and ingestion.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes and error translation.
"""

from fastapi import HTTPException, status

from semantic_rag.config import settings
from semantic_rag.dto import (
    ChatRequest,
    ChatResponse,
    HealthCheckResponse,
    SearchResultItem,
    SemanticSearchRequest,
    SemanticSearchResponse,
    VectorizeRequest,
    VectorizeResponse,
)
from semantic_rag.entities import ChatMessage, Query, Role
from semantic_rag.errors import ErrorKind, RagError
from semantic_rag.protocols import VectorStore
from semantic_rag.services import EmbeddingGateway, IngestionService, QueryOrchestrator
from semantic_rag.utils import get_logger

logger = get_logger(__name__)

_INGESTION_STATUS = {
    "download_timeout": status.HTTP_408_REQUEST_TIMEOUT,
    "download_failed": status.HTTP_400_BAD_REQUEST,
    "invalid_pdf": status.HTTP_400_BAD_REQUEST,
}


def _http_error(error: RagError) -> HTTPException:
    """Translate a classified error into an HTTPException."""
    if error.kind == ErrorKind.VALIDATION:
        status_code = status.HTTP_400_BAD_REQUEST
    elif error.kind == ErrorKind.INGESTION:
        status_code = _INGESTION_STATUS.get(error.reason, status.HTTP_500_INTERNAL_SERVER_ERROR)
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = error.to_dict()
    # Upstream messages may carry provider internals
    if error.detail and not settings.is_production:
        detail["detail"] = error.detail
    return HTTPException(status_code=status_code, detail=detail)


class RagHandler:
    """HTTP handlers for the query pipeline.

    This handler delegates business logic to QueryOrchestrator and
    IngestionService, and handles HTTP-specific concerns like:
    - Converting DTOs to entities and back
    - Mapping classified errors to status codes
    """

    def __init__(
        self,
        orchestrator: QueryOrchestrator,
        ingestion: IngestionService,
        content_store: VectorStore,
        embeddings: EmbeddingGateway,
    ) -> None:
        """Initialize the handler.

        Args:
            orchestrator: The query orchestrator (required).
            ingestion: The ingestion service (required).
            content_store: Content vector store, for health checks (required).
            embeddings: Embedding gateway, for health checks (required).
        """
        self._orchestrator = orchestrator
        self._ingestion = ingestion
        self._content_store = content_store
        self._embeddings = embeddings

    @staticmethod
    def _to_query(request: ChatRequest) -> Query:
        history = tuple(
            ChatMessage(
                role=Role.USER if item.role == "user" else Role.ASSISTANT,
                text=item.message,
            )
            for item in request.history or []
        )
        return Query(
            text=request.message,
            domain_key=request.rag_context_key,
            history=history,
            language=request.language,
            prompt=request.prompt,
        )

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Handle POST /api/v1/chat requests.

        Raises:
            HTTPException: If the request fails at any step
        """
        try:
            answer = await self._orchestrator.answer_chat(self._to_query(request))
        except RagError as e:
            logger.error("AI chat: error getting response: %s", e)
            raise _http_error(e) from e

        return ChatResponse(response=answer.text, context_count=answer.context_count)

    async def semantic_search(self, request: SemanticSearchRequest) -> SemanticSearchResponse:
        """Handle POST /api/v1/semantic-search requests.

        Raises:
            HTTPException: If the search fails
        """
        try:
            hits = await self._orchestrator.search(
                text=request.query,
                domain_key=request.context,
                top_k=request.top_k,
            )
        except RagError as e:
            logger.error("Semantic search error: %s", e)
            raise _http_error(e) from e

        return SemanticSearchResponse(
            results=[
                SearchResultItem(text=hit.text, context=hit.domain_key, score=hit.score)
                for hit in hits
            ]
        )

    async def vectorize(self, request: VectorizeRequest) -> VectorizeResponse:
        """Handle POST /api/v1/vectorize requests.

        Raises:
            HTTPException: If the download, parsing or storage fails
        """
        url = str(request.url)
        try:
            report = await self._ingestion.ingest_url(url, request.context, replace=request.replace)
        except RagError as e:
            logger.error("Vectorize error for %s: %s", url, e)
            raise _http_error(e) from e

        return VectorizeResponse(
            message="PDF processing completed",
            url=url,
            context=request.context,
            total_chunks=report.total_chunks,
            successful_embeddings=report.successful,
            failed_embeddings=report.failed,
        )

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        store_healthy = self._content_store.health_check()
        embedding_healthy = await self._embeddings.is_healthy()
        return HealthCheckResponse(
            status="healthy" if store_healthy and embedding_healthy else "unhealthy",
            store_healthy=store_healthy,
            embedding_healthy=embedding_healthy,
        )
