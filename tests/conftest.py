"""
Shared fixtures: in-memory stand-ins for the embedding provider, the vector
store and the text generator. No network or Redis access.
"""

import threading
from typing import Sequence

import numpy as np
import pytest

from semantic_rag.entities import ChatMessage, VectorHit
from semantic_rag.services import (
    ContentRetriever,
    EmbeddingGateway,
    QueryOrchestrator,
    RelevanceGate,
    ResponseGenerator,
    SemanticCache,
)

DIMENSION = 4
QUERY_VECTOR = [0.1, 0.2, 0.3, 0.4]


class FakeEmbeddingProvider:
    """Returns a fixed vector and records every text it was asked to encode."""

    def __init__(self, vector: list[float] | None = None, error: Exception | None = None) -> None:
        self.vector = vector if vector is not None else list(QUERY_VECTOR)
        self.error = error
        self.calls: list[str] = []

    @property
    def dimension(self) -> int:
        return len(self.vector)

    @property
    def model_name(self) -> str:
        return "fake-embedder"

    async def encode(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return list(self.vector)

    async def is_available(self) -> bool:
        return self.error is None

    async def close(self) -> None:
        pass


class InMemoryVectorStore:
    """Dict-backed VectorStore.

    When ``preset_hits`` is set, searches return those hits (filtered by
    domain) instead of computing cosine similarity, so tests control scores.
    """

    def __init__(self, namespace: str = "test", preset_hits: list[VectorHit] | None = None) -> None:
        self._namespace = namespace
        self.preset_hits = preset_hits
        self.records: dict[str, dict] = {}
        self.search_calls: list[dict] = []
        self.inserts: list[dict] = []
        self._lock = threading.Lock()
        self._next_id = 0

    @property
    def namespace(self) -> str:
        return self._namespace

    def search(self, vector, domain_key, limit, num_candidates):
        self.search_calls.append(
            {"vector": vector, "domain_key": domain_key, "limit": limit, "num_candidates": num_candidates}
        )
        if self.preset_hits is not None:
            hits = [hit for hit in self.preset_hits if hit.domain_key == domain_key]
        else:
            query = np.asarray(vector, dtype=float)
            hits = []
            for key, record in self.records.items():
                if record["domain"] != domain_key:
                    continue
                stored = np.asarray(record["vector"], dtype=float)
                score = float(query @ stored / (np.linalg.norm(query) * np.linalg.norm(stored)))
                fields = {name: str(value) for name, value in record["fields"].items()}
                hits.append(
                    VectorHit(key=key, domain_key=domain_key, score=score, fields=fields, embedding=list(record["vector"]))
                )
        hits = sorted(hits, key=lambda h: h.score, reverse=True)
        return hits[:limit]

    def insert(self, domain_key, vector, fields):
        with self._lock:
            self._next_id += 1
            key = f"{self._namespace}:{self._next_id}"
        self.records[key] = {"domain": domain_key, "vector": list(vector), "fields": dict(fields)}
        self.inserts.append({"key": key, "domain_key": domain_key, "vector": list(vector), "fields": dict(fields)})
        return key

    def increment(self, key, field, delta=1):
        with self._lock:
            record = self.records.get(key)
            if record is None:
                return None
            record["fields"][field] = int(record["fields"].get(field, 0)) + delta
            return record["fields"][field]

    def delete_domain(self, domain_key):
        keys = [key for key, record in self.records.items() if record["domain"] == domain_key]
        for key in keys:
            del self.records[key]
        return len(keys)

    def health_check(self):
        return True


class FakeGenerator:
    """Returns a canned reply and records every call."""

    def __init__(self, reply: object = "Generated answer", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    @property
    def model_name(self) -> str:
        return "fake-generator"

    async def generate(self, system_instruction: str, history: Sequence[ChatMessage], user_message: str):
        self.calls.append(
            {"system_instruction": system_instruction, "history": list(history), "user_message": user_message}
        )
        if self.error is not None:
            raise self.error
        return self.reply

    async def close(self) -> None:
        pass


def content_hit(text: str, score: float, domain_key: str = "docs", key: str | None = None) -> VectorHit:
    return VectorHit(key=key or f"content:{text}", domain_key=domain_key, score=score, fields={"text": text})


def cache_hit(
    query_text: str,
    answer: str,
    score: float,
    domain_key: str = "docs",
    key: str = "cache:1",
    hits: int = 0,
) -> VectorHit:
    return VectorHit(
        key=key,
        domain_key=domain_key,
        score=score,
        fields={"text": query_text, "answer": answer, "hits": str(hits)},
    )


@pytest.fixture
def embedder() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def content_store() -> InMemoryVectorStore:
    return InMemoryVectorStore(namespace="content", preset_hits=[])


@pytest.fixture
def cached_store() -> InMemoryVectorStore:
    return InMemoryVectorStore(namespace="cached")


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def orchestrator(embedder, content_store, cached_store, generator) -> QueryOrchestrator:
    return QueryOrchestrator(
        embeddings=EmbeddingGateway(embedder, dimension=DIMENSION),
        cache=SemanticCache(cached_store, similarity_threshold=0.96, top_k=1, candidate_multiplier=20),
        retriever=ContentRetriever(content_store, top_k=4, candidate_multiplier=20),
        gate=RelevanceGate(threshold=0.8),
        responder=ResponseGenerator(generator),
        search_top_k=5,
    )
