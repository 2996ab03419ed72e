"""Content retriever service."""

from semantic_rag.config import settings
from semantic_rag.entities import SearchResult
from semantic_rag.protocols import VectorStore
from semantic_rag.utils import get_logger

logger = get_logger(__name__)


class ContentRetriever:
    """Finds passages relevant to a query within one domain.

    The nearest-neighbour search examines ``top_k * candidate_multiplier``
    candidates to preserve recall, then keeps the ``top_k`` best.
    """

    def __init__(
        self,
        store: VectorStore,
        top_k: int | None = None,
        candidate_multiplier: int | None = None,
    ) -> None:
        """Initialize the retriever.

        Args:
            store: Vector store for the content namespace (required).
            top_k: Default number of passages. Defaults to settings.content_top_k.
            candidate_multiplier: Candidate pool ratio. Defaults to settings.
        """
        self._store = store
        self._top_k = top_k or settings.content_top_k
        self._multiplier = candidate_multiplier or settings.candidate_multiplier

    async def retrieve(
        self,
        embedding: list[float],
        domain_key: str,
        top_k: int | None = None,
    ) -> list[SearchResult]:
        """Retrieve the passages closest to a query embedding.

        Returns:
            List of SearchResult, most similar first; empty if the domain has no content
        """
        top_k = top_k or self._top_k
        hits = self._store.search(
            vector=embedding,
            domain_key=domain_key,
            limit=top_k,
            num_candidates=top_k * self._multiplier,
        )
        results = [
            SearchResult(
                text=hit.fields.get("text", ""),
                domain_key=hit.domain_key,
                score=hit.score,
                source_embedding=hit.embedding,
            )
            for hit in hits
        ]
        results.sort(key=lambda r: r.score, reverse=True)
        logger.debug("Retrieved %d passages for domain=%s", len(results), domain_key)
        return results

    @property
    def top_k(self) -> int:
        """Get the default number of passages."""
        return self._top_k
