"""Query orchestrator.

Chooses, per request, between answering directly, serving a cached answer,
and retrieval-augmented generation:

    no domain key ──────────────────────────────► DIRECT
    domain key ─► EMBED ─► CACHE_LOOKUP ─┬─ hit ─► CACHE_HIT
                                         └─ miss ► RETRIEVE ─┬─ not relevant ─► FALLBACK
                                                             └─ relevant ─► GENERATE ─► CACHE_WRITE

Any failure aborts the request with a classified RagError. The cache is only
written after generation has fully succeeded.
"""

from semantic_rag.config import settings
from semantic_rag.entities import (
    NO_RETRIEVAL,
    SERVED_FROM_CACHE,
    AnswerSource,
    ChatAnswer,
    Query,
    SearchHit,
)
from semantic_rag.errors import GenerationError, ValidationError
from semantic_rag.services.content_retriever import ContentRetriever
from semantic_rag.services.embedding_gateway import EmbeddingGateway
from semantic_rag.services.relevance_gate import RelevanceGate, no_results_message
from semantic_rag.services.response_generator import ResponseGenerator
from semantic_rag.services.semantic_cache import SemanticCache
from semantic_rag.utils import get_logger

logger = get_logger(__name__)


class QueryOrchestrator:
    """Ties embedding, cache, retrieval, relevance and generation together.

    Depends only on services built over protocols, so every collaborator can
    be swapped or stubbed.

    Example:
        ```python
        orchestrator = QueryOrchestrator(
            embeddings=EmbeddingGateway(provider),
            cache=SemanticCache(cached_store),
            retriever=ContentRetriever(content_store),
            gate=RelevanceGate(),
            responder=ResponseGenerator(generator),
        )
        answer = await orchestrator.answer_chat(Query(text="What is X?", domain_key="docs"))
        ```
    """

    def __init__(
        self,
        embeddings: EmbeddingGateway,
        cache: SemanticCache,
        retriever: ContentRetriever,
        gate: RelevanceGate,
        responder: ResponseGenerator,
        search_top_k: int | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            embeddings: Embedding gateway (required).
            cache: Semantic cache over the cached-answers namespace (required).
            retriever: Content retriever over the content namespace (required).
            gate: Relevance gate (required).
            responder: Response generator (required).
            search_top_k: Default top-K for search. Defaults to settings.search_top_k.
        """
        self._embeddings = embeddings
        self._cache = cache
        self._retriever = retriever
        self._gate = gate
        self._responder = responder
        self._search_top_k = search_top_k or settings.search_top_k

    async def answer_chat(self, query: Query) -> ChatAnswer:
        """Answer a chat query.

        Returns:
            ChatAnswer with the answer text, its source and context count

        Raises:
            EmbeddingError: Embedding failed or returned a bad vector
            RetrievalError: The vector store failed
            GenerationError: Generation failed or produced an empty answer
        """
        if not query.has_domain:
            text = await self._responder.generate_direct(query)
            self._require_answer(text)
            logger.info("Answered directly (no domain key)")
            return ChatAnswer(text=text, source=AnswerSource.DIRECT, context_count=NO_RETRIEVAL)

        domain_key = query.domain_key
        embedding = await self._embeddings.embed(query.text)

        cached = await self._cache.lookup(embedding, domain_key)
        if cached and cached[0].answer:
            best = cached[0]
            await self._cache.record_hit(best.entry_id)
            logger.info(
                "Cache hit domain=%s entry=%s score=%.4f", domain_key, best.entry_id, best.score
            )
            return ChatAnswer(
                text=best.answer, source=AnswerSource.CACHE, context_count=SERVED_FROM_CACHE
            )

        passages = await self._retriever.retrieve(embedding, domain_key)
        if not self._gate.is_relevant(passages):
            logger.info(
                "No relevant passages domain=%s retrieved=%d best=%.4f",
                domain_key,
                len(passages),
                passages[0].score if passages else 0.0,
            )
            return ChatAnswer(text=no_results_message(query.language), source=AnswerSource.FALLBACK)

        text = await self._responder.generate_grounded(query, passages)
        self._require_answer(text)

        await self._cache.write(
            domain_key=domain_key,
            query_text=query.text,
            embedding=embedding,
            answer=text,
        )
        logger.info("Generated grounded answer domain=%s passages=%d", domain_key, len(passages))
        return ChatAnswer(
            text=text, source=AnswerSource.GENERATED, context_count=len(passages)
        )

    async def search(
        self,
        text: str,
        domain_key: str,
        top_k: int | None = None,
    ) -> list[SearchHit]:
        """Semantic search over a domain, without generation.

        A cache hit returns the cached answers as results. On a miss the
        content passages are returned, and the top passage is cached as a
        provisional answer for the query.

        Raises:
            ValidationError: If top_k is not positive or the domain key is empty
            EmbeddingError: Embedding failed or returned a bad vector
            RetrievalError: The vector store failed
        """
        top_k = self._search_top_k if top_k is None else top_k
        if top_k < 1:
            raise ValidationError("invalid_top_k", "top_k must be a positive integer")
        if not domain_key:
            raise ValidationError("missing_domain_key")

        embedding = await self._embeddings.embed(text)

        cached = await self._cache.lookup(embedding, domain_key, limit=top_k)
        if cached:
            await self._cache.record_hit(cached[0].entry_id)
            logger.info("Search served from cache domain=%s results=%d", domain_key, len(cached))
            return [
                SearchHit(text=entry.answer, domain_key=entry.domain_key, score=entry.score)
                for entry in cached
            ]

        passages = await self._retriever.retrieve(embedding, domain_key, top_k=top_k)
        if passages and passages[0].text:
            entry_id = await self._cache.write(
                domain_key=domain_key,
                query_text=text,
                embedding=embedding,
                answer=passages[0].text,
            )
            logger.info("Cached top passage as provisional answer entry=%s", entry_id)

        return [
            SearchHit(text=passage.text, domain_key=passage.domain_key, score=passage.score)
            for passage in passages
        ]

    @staticmethod
    def _require_answer(text: str) -> None:
        if not text:
            raise GenerationError("empty_answer", "The AI response is missing message")
