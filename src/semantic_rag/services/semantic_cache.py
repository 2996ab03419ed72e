"""Semantic cache service.

Stores answers keyed by the embedding of the query that produced them, and
serves them back for near-identical later queries within the same domain.
"""

from semantic_rag.config import settings
from semantic_rag.entities import CachedSearchResult, VectorHit
from semantic_rag.errors import ValidationError
from semantic_rag.protocols import VectorStore
from semantic_rag.utils import get_logger

logger = get_logger(__name__)

HITS_FIELD = "hits"


class SemanticCache:
    """Near-duplicate query cache over the cached-answers namespace.

    A lookup result only counts when its similarity is strictly greater than
    the acceptance threshold. The threshold is high because a hit replaces
    generation entirely.

    Example:
        ```python
        cache = SemanticCache(store=cached_answers_store)
        results = await cache.lookup(vector, "docs")
        if results:
            await cache.record_hit(results[0].entry_id)
        ```
    """

    def __init__(
        self,
        store: VectorStore,
        similarity_threshold: float | None = None,
        top_k: int | None = None,
        candidate_multiplier: int | None = None,
    ) -> None:
        """Initialize the semantic cache.

        Args:
            store: Vector store for the cached-answers namespace (required).
            similarity_threshold: Minimum similarity (exclusive) for a hit. Defaults to settings.
            top_k: Default number of entries returned by lookup. Defaults to settings.
            candidate_multiplier: Candidate pool ratio for the ANN search. Defaults to settings.
        """
        self._store = store
        self._threshold = (
            similarity_threshold
            if similarity_threshold is not None
            else settings.cache_similarity_threshold
        )
        self._top_k = top_k or settings.cache_top_k
        self._multiplier = candidate_multiplier or settings.candidate_multiplier

    @staticmethod
    def _to_result(hit: VectorHit) -> CachedSearchResult:
        return CachedSearchResult(
            text=hit.fields.get("text", ""),
            domain_key=hit.domain_key,
            score=hit.score,
            source_embedding=hit.embedding,
            entry_id=hit.key,
            answer=hit.fields.get("answer", ""),
            hit_count=int(float(hit.fields.get(HITS_FIELD, 0) or 0)),
        )

    async def lookup(
        self,
        embedding: list[float],
        domain_key: str,
        limit: int | None = None,
    ) -> list[CachedSearchResult]:
        """Find cached entries of a domain above the acceptance threshold.

        Args:
            embedding: The query embedding
            domain_key: Only entries of this domain are candidates
            limit: Maximum number of entries. Defaults to the configured top_k.

        Returns:
            List of CachedSearchResult, most similar first. The first one is the hit.
        """
        limit = limit or self._top_k
        hits = self._store.search(
            vector=embedding,
            domain_key=domain_key,
            limit=limit,
            num_candidates=limit * self._multiplier,
        )
        results = [self._to_result(hit) for hit in hits if hit.score > self._threshold]
        results.sort(key=lambda r: r.score, reverse=True)
        logger.debug(
            "Cache lookup domain=%s candidates=%d accepted=%d", domain_key, len(hits), len(results)
        )
        return results

    async def record_hit(self, entry_id: str) -> int | None:
        """Atomically add one to an entry's hit count.

        Returns:
            The new hit count, or None if the entry no longer exists
        """
        count = self._store.increment(entry_id, HITS_FIELD, 1)
        if count is None:
            logger.warning("Cache entry %s disappeared before its hit was recorded", entry_id)
        return count

    async def write(
        self,
        domain_key: str,
        query_text: str,
        embedding: list[float],
        answer: str,
    ) -> str:
        """Create a new cache entry with a hit count of zero.

        Concurrent writes for the same query are not deduplicated.

        Raises:
            ValidationError: If the answer is empty

        Returns:
            The new entry id
        """
        if not answer:
            raise ValidationError("empty_answer", "cache entries must carry an answer")

        entry_id = self._store.insert(
            domain_key=domain_key,
            vector=embedding,
            fields={"text": query_text, "answer": answer, HITS_FIELD: 0},
        )
        logger.debug("Cached answer %s for domain=%s", entry_id, domain_key)
        return entry_id

    @property
    def threshold(self) -> float:
        """Get the acceptance threshold."""
        return self._threshold

    @property
    def store(self) -> VectorStore:
        """Get the underlying store (for testing)."""
        return self._store
