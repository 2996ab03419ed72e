"""
Unit tests for SemanticCache and ContentRetriever over the in-memory store.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import QUERY_VECTOR, InMemoryVectorStore, cache_hit, content_hit
from semantic_rag.entities import VectorHit
from semantic_rag.errors import ValidationError
from semantic_rag.services import ContentRetriever, SemanticCache


@pytest.fixture
def store():
    return InMemoryVectorStore(namespace="cached")


@pytest.fixture
def cache(store):
    return SemanticCache(store, similarity_threshold=0.96, top_k=1, candidate_multiplier=20)


@pytest.mark.asyncio
async def test_lookup_filters_below_threshold(cache, store):
    store.preset_hits = [
        cache_hit("q1", "a1", 0.99, key="k1"),
        cache_hit("q2", "a2", 0.96, key="k2"),
        cache_hit("q3", "a3", 0.5, key="k3"),
    ]

    results = await cache.lookup(QUERY_VECTOR, "docs", limit=3)

    assert [r.entry_id for r in results] == ["k1"]
    assert results[0].answer == "a1"
    assert results[0].text == "q1"


@pytest.mark.asyncio
async def test_lookup_orders_most_similar_first(cache, store):
    store.preset_hits = [
        cache_hit("q1", "a1", 0.97, key="k1"),
        cache_hit("q2", "a2", 0.99, key="k2", hits=7),
    ]

    results = await cache.lookup(QUERY_VECTOR, "docs", limit=2)

    assert [r.entry_id for r in results] == ["k2", "k1"]
    assert results[0].hit_count == 7


@pytest.mark.asyncio
async def test_lookup_only_considers_same_domain(cache, store):
    store.insert("other", QUERY_VECTOR, {"text": "q", "answer": "a", "hits": 0})

    assert await cache.lookup(QUERY_VECTOR, "docs") == []
    assert len(await cache.lookup(QUERY_VECTOR, "other")) == 1


@pytest.mark.asyncio
async def test_write_creates_entry_with_zero_hits(cache, store):
    entry_id = await cache.write("docs", "What is X?", QUERY_VECTOR, "X is Y")

    record = store.records[entry_id]
    assert record["domain"] == "docs"
    assert record["vector"] == QUERY_VECTOR
    assert record["fields"] == {"text": "What is X?", "answer": "X is Y", "hits": 0}


@pytest.mark.asyncio
async def test_write_refuses_empty_answer(cache, store):
    with pytest.raises(ValidationError):
        await cache.write("docs", "What is X?", QUERY_VECTOR, "")

    assert store.inserts == []


@pytest.mark.asyncio
async def test_duplicate_writes_are_not_deduplicated(cache, store):
    await asyncio.gather(
        cache.write("docs", "What is X?", QUERY_VECTOR, "X is Y"),
        cache.write("docs", "What is X?", QUERY_VECTOR, "X is Y"),
    )

    assert len(store.records) == 2


@pytest.mark.asyncio
async def test_record_hit_counts_every_concurrent_call(cache, store):
    """N concurrent hits raise the count by exactly N."""
    entry_id = await cache.write("docs", "What is X?", QUERY_VECTOR, "X is Y")

    await asyncio.gather(*(cache.record_hit(entry_id) for _ in range(50)))

    assert store.records[entry_id]["fields"]["hits"] == 50


def test_store_increment_is_safe_across_threads(store):
    entry_id = store.insert("docs", QUERY_VECTOR, {"text": "q", "answer": "a", "hits": 0})

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda _: store.increment(entry_id, "hits", 1), range(200)))

    assert store.records[entry_id]["fields"]["hits"] == 200


@pytest.mark.asyncio
async def test_record_hit_on_missing_entry_returns_none(cache):
    assert await cache.record_hit("cached:missing") is None


@pytest.mark.asyncio
async def test_retriever_returns_top_k_most_similar_first():
    store = InMemoryVectorStore(
        namespace="content",
        preset_hits=[content_hit(f"passage {i}", score) for i, score in enumerate([0.7, 0.9, 0.8, 0.95, 0.6])],
    )
    retriever = ContentRetriever(store, top_k=4, candidate_multiplier=20)

    results = await retriever.retrieve(QUERY_VECTOR, "docs")

    assert [r.score for r in results] == [0.95, 0.9, 0.8, 0.7]
    assert store.search_calls[0]["num_candidates"] == 80


@pytest.mark.asyncio
async def test_retriever_empty_domain_returns_empty_list():
    retriever = ContentRetriever(InMemoryVectorStore(namespace="content"), top_k=4)

    assert await retriever.retrieve(QUERY_VECTOR, "nothing-here") == []


@pytest.mark.asyncio
async def test_retriever_honours_explicit_top_k():
    store = InMemoryVectorStore(namespace="content", preset_hits=[content_hit("p", 0.9)])
    retriever = ContentRetriever(store, top_k=4, candidate_multiplier=20)

    await retriever.retrieve(QUERY_VECTOR, "docs", top_k=2)

    assert store.search_calls[0]["limit"] == 2
    assert store.search_calls[0]["num_candidates"] == 40


@pytest.mark.asyncio
async def test_results_carry_the_stored_embedding(cache, store):
    entry_id = await cache.write("docs", "What is X?", QUERY_VECTOR, "X is Y")

    results = await cache.lookup(QUERY_VECTOR, "docs")

    assert results[0].entry_id == entry_id
    assert results[0].source_embedding == QUERY_VECTOR


@pytest.mark.asyncio
async def test_retriever_passes_passage_embedding_through():
    stored = [0.4, 0.3, 0.2, 0.1]
    store = InMemoryVectorStore(
        namespace="content",
        preset_hits=[VectorHit(key="content:1", domain_key="docs", score=0.9, fields={"text": "p"}, embedding=stored)],
    )

    results = await ContentRetriever(store, top_k=4).retrieve(QUERY_VECTOR, "docs")

    assert results[0].source_embedding == stored
