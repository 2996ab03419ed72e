"""Vector store protocol.

Defines the interface for a namespaced vector store. Each instance serves
one namespace (e.g. content passages or cached query/answer pairs), and
every record belongs to exactly one domain key.

Implementations can include:
- Redis Stack with vector search (default)
- PostgreSQL with pgvector
- MongoDB Atlas vector search
"""

from typing import Protocol, runtime_checkable

from semantic_rag.entities import VectorHit


@runtime_checkable
class VectorStore(Protocol):
    """Protocol for namespaced vector storage backends.

    Example:
        ```python
        content: VectorStore = RedisVectorStore.create(index_name="rag_content", ...)
        cached: VectorStore = RedisVectorStore.create(index_name="rag_cached_queries", ...)
        ```
    """

    @property
    def namespace(self) -> str:
        """Return the namespace (index name) this store serves."""
        ...

    def search(
        self,
        vector: list[float],
        domain_key: str,
        limit: int,
        num_candidates: int,
    ) -> list[VectorHit]:
        """Find the nearest records within a domain.

        Args:
            vector: The query embedding vector
            domain_key: Only records of this domain are candidates
            limit: Maximum number of results to return
            num_candidates: Size of the candidate pool to examine

        Returns:
            List of VectorHit, most similar first

        Raises:
            RetrievalError: If the store is unreachable or the search fails
        """
        ...

    def insert(self, domain_key: str, vector: list[float], fields: dict[str, str | int]) -> str:
        """Insert a record.

        Args:
            domain_key: Domain the record belongs to
            vector: The record's embedding vector
            fields: Remaining record fields

        Returns:
            The storage key for the record
        """
        ...

    def increment(self, key: str, field: str, delta: int = 1) -> int | None:
        """Atomically increment a numeric field of an existing record.

        Args:
            key: The storage key
            field: The numeric field name
            delta: Amount to add

        Returns:
            The new value, or None if the record does not exist
        """
        ...

    def delete_domain(self, domain_key: str) -> int:
        """Delete every record of a domain.

        Returns:
            Number of records deleted
        """
        ...

    def health_check(self) -> bool:
        """Check if the store is accessible."""
        ...
