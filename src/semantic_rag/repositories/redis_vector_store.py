"""Redis implementation of VectorStore.

This repository uses Redis Stack with vector search capabilities (HNSW index).
One instance serves one namespace; the content corpus and the cached-answers
corpus are two instances over two indexes. It satisfies the VectorStore
protocol.
"""

import time
import uuid
from dataclasses import replace
from typing import Any, Sequence

import numpy as np
import redis
from redisvl.exceptions import RedisSearchError
from redisvl.index import SearchIndex
from redisvl.query import VectorQuery
from redisvl.query.filter import Tag

from semantic_rag.config import get_redis_client
from semantic_rag.entities import VectorHit
from semantic_rag.errors import RetrievalError
from semantic_rag.utils import get_logger

logger = get_logger(__name__)

# Increment only when the record still exists, in one server-side step
_INCREMENT_IF_EXISTS = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return redis.call('HINCRBY', KEYS[1], ARGV[1], ARGV[2])
end
return false
"""

DOMAIN_FIELD = "domain"
VECTOR_FIELD = "embedding"


def _decode(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class RedisVectorStore:
    """Redis implementation using an HNSW vector index per namespace.

    Uses Redis Stack's vector search with:
    - HNSW (Hierarchical Navigable Small World) algorithm
    - COSINE distance metric, reported as similarity (1 - distance)
    - A ``domain`` tag field every query is filtered on
    """

    def __init__(
        self,
        index_name: str,
        dimension: int,
        text_fields: Sequence[str] = ("text",),
        numeric_fields: Sequence[str] = (),
        redis_client: redis.Redis | None = None,
        index: SearchIndex | None = None,
    ) -> None:
        """Initialize the Redis vector store.

        Args:
            index_name: Name of the Redis search index (also the key prefix).
            dimension: Embedding vector dimension.
            text_fields: Text fields stored and returned with each record.
            numeric_fields: Numeric fields stored and returned with each record.
            redis_client: Redis client instance. If None, creates default.
            index: Prebuilt search index. If None, built from the schema.
        """
        self._client = redis_client or get_redis_client()
        self._index_name = index_name
        self._dimension = dimension
        self._text_fields = list(text_fields)
        self._numeric_fields = list(numeric_fields)
        self._index = index or SearchIndex.from_dict(self._schema(), redis_client=self._client)
        self._increment_script = self._client.register_script(_INCREMENT_IF_EXISTS)

    @classmethod
    def create(
        cls,
        index_name: str,
        dimension: int,
        text_fields: Sequence[str] = ("text",),
        numeric_fields: Sequence[str] = (),
        redis_client: redis.Redis | None = None,
    ) -> "RedisVectorStore":
        """Factory method that also makes sure the index exists.

        Returns:
            Configured RedisVectorStore
        """
        store = cls(
            index_name=index_name,
            dimension=dimension,
            text_fields=text_fields,
            numeric_fields=numeric_fields,
            redis_client=redis_client,
        )
        store.ensure_index()
        return store

    def _schema(self) -> dict:
        fields: list[dict[str, Any]] = [{"name": DOMAIN_FIELD, "type": "tag"}]
        fields += [{"name": name, "type": "text"} for name in self._text_fields]
        fields += [{"name": name, "type": "numeric"} for name in self._numeric_fields]
        fields += [
            {"name": "created_at", "type": "numeric"},
            {
                "name": VECTOR_FIELD,
                "type": "vector",
                "attrs": {
                    "dims": self._dimension,
                    "algorithm": "HNSW",
                    "metric": "COSINE",
                    "datatype": "float32",
                },
            },
        ]
        return {
            "index": {
                "name": self._index_name,
                "prefix": f"{self._index_name}:",
                "storage_type": "hash",
            },
            "fields": fields,
        }

    def ensure_index(self) -> None:
        """Create the Redis vector index if it doesn't exist."""
        try:
            if self._index.exists():
                logger.info("Using existing index: %s", self._index_name)
                return
            self._index.create(overwrite=False)
            logger.info("Created new index: %s (dims=%d)", self._index_name, self._dimension)
        except (redis.RedisError, RedisSearchError) as e:
            raise RetrievalError("store_unavailable", str(e)) from e

    @property
    def namespace(self) -> str:
        """Get the index name."""
        return self._index_name

    def search(
        self,
        vector: list[float],
        domain_key: str,
        limit: int,
        num_candidates: int,
    ) -> list[VectorHit]:
        """Find the nearest records within a domain.

        Fetches ``num_candidates`` neighbours, then keeps the ``limit`` most
        similar ones.

        Returns:
            List of VectorHit, most similar first
        """
        query = VectorQuery(
            vector=vector,
            vector_field_name=VECTOR_FIELD,
            return_fields=[DOMAIN_FIELD, *self._text_fields, *self._numeric_fields],
            num_results=max(num_candidates, limit),
            filter_expression=Tag(DOMAIN_FIELD) == domain_key,
        )

        try:
            results = self._index.query(query)
        except (redis.RedisError, RedisSearchError) as e:
            raise RetrievalError("store_unavailable", str(e)) from e

        hits = []
        for result in results:
            distance = float(result.get("vector_distance", 2.0))
            fields = {
                name: _decode(result[name])
                for name in (*self._text_fields, *self._numeric_fields)
                if name in result
            }
            hits.append(
                VectorHit(
                    key=_decode(result["id"]),
                    domain_key=_decode(result.get(DOMAIN_FIELD, domain_key)),
                    score=1.0 - distance,
                    fields=fields,
                )
            )

        hits.sort(key=lambda h: h.score, reverse=True)
        return self._with_embeddings(hits[:limit])

    def _with_embeddings(self, hits: list[VectorHit]) -> list[VectorHit]:
        """Attach each hit's stored vector.

        FT.SEARCH decodes returned fields as text, which corrupts binary
        vectors, so they are read straight from the hashes instead.
        """
        if not hits:
            return hits
        try:
            pipe = self._client.pipeline(transaction=False)
            for hit in hits:
                pipe.hget(hit.key, VECTOR_FIELD)
            raw_vectors = pipe.execute()
        except redis.RedisError as e:
            raise RetrievalError("store_unavailable", str(e)) from e

        return [
            replace(hit, embedding=np.frombuffer(raw, dtype=np.float32).tolist() if raw else None)
            for hit, raw in zip(hits, raw_vectors)
        ]

    def insert(self, domain_key: str, vector: list[float], fields: dict[str, str | int]) -> str:
        """Store a record as a hash under ``<index_name>:<uuid>``.

        Returns:
            The storage key for the record
        """
        key = f"{self._index_name}:{uuid.uuid4().hex}"
        mapping: dict[str, Any] = {name: str(value) for name, value in fields.items()}
        mapping[DOMAIN_FIELD] = domain_key
        mapping["created_at"] = str(time.time())
        mapping[VECTOR_FIELD] = np.asarray(vector, dtype=np.float32).tobytes()

        try:
            self._client.hset(key, mapping=mapping)
        except redis.RedisError as e:
            raise RetrievalError("store_unavailable", str(e)) from e
        return key

    def increment(self, key: str, field: str, delta: int = 1) -> int | None:
        """Atomically increment a numeric field of an existing record.

        Returns:
            The new value, or None if the record no longer exists
        """
        try:
            value = self._increment_script(keys=[key], args=[field, delta])
        except redis.RedisError as e:
            raise RetrievalError("store_unavailable", str(e)) from e
        return int(value) if value is not None else None

    def delete_domain(self, domain_key: str) -> int:
        """Delete every record of a domain.

        Returns:
            Number of records deleted
        """
        count = 0
        try:
            for key in self._client.scan_iter(match=f"{self._index_name}:*"):
                stored = self._client.hget(key, DOMAIN_FIELD)
                if stored is not None and _decode(stored) == domain_key:
                    count += self._client.delete(key)
        except redis.RedisError as e:
            raise RetrievalError("store_unavailable", str(e)) from e
        return count

    def health_check(self) -> bool:
        """Check if Redis is accessible."""
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
