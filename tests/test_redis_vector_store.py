"""
Tests for RedisVectorStore against mocked Redis and redisvl objects.
"""

from unittest.mock import MagicMock

import numpy as np
import pytest
import redis

from semantic_rag.errors import RetrievalError
from semantic_rag.repositories import RedisVectorStore


@pytest.fixture
def client():
    client = MagicMock(spec=redis.Redis)
    pipe = client.pipeline.return_value
    pipe.execute.side_effect = lambda: [None] * pipe.hget.call_count
    return client


@pytest.fixture
def index():
    return MagicMock()


@pytest.fixture
def store(client, index):
    return RedisVectorStore(
        index_name="rag_cached_queries",
        dimension=3,
        text_fields=("text", "answer"),
        numeric_fields=("hits",),
        redis_client=client,
        index=index,
    )


def test_schema_declares_domain_tag_and_cosine_vector(store):
    schema = store._schema()
    fields = {field["name"]: field for field in schema["fields"]}

    assert schema["index"]["prefix"] == "rag_cached_queries:"
    assert fields["domain"]["type"] == "tag"
    assert fields["answer"]["type"] == "text"
    assert fields["hits"]["type"] == "numeric"
    assert fields["embedding"]["attrs"]["metric"] == "COSINE"
    assert fields["embedding"]["attrs"]["dims"] == 3


def test_ensure_index_creates_missing_index(store, index):
    index.exists.return_value = False

    store.ensure_index()

    index.create.assert_called_once_with(overwrite=False)


def test_ensure_index_keeps_existing_index(store, index):
    index.exists.return_value = True

    store.ensure_index()

    index.create.assert_not_called()


def test_search_converts_distance_to_similarity_and_trims(store, index):
    index.query.return_value = [
        {"id": "rag_cached_queries:a", "vector_distance": "0.3", "domain": "docs", "text": "q1", "answer": "a1", "hits": "2"},
        {"id": "rag_cached_queries:b", "vector_distance": "0.02", "domain": "docs", "text": "q2", "answer": "a2", "hits": "0"},
        {"id": "rag_cached_queries:c", "vector_distance": "0.5", "domain": "docs", "text": "q3", "answer": "a3", "hits": "1"},
    ]

    hits = store.search([0.1, 0.2, 0.3], "docs", limit=2, num_candidates=40)

    assert [hit.key for hit in hits] == ["rag_cached_queries:b", "rag_cached_queries:a"]
    assert hits[0].score == pytest.approx(0.98)
    assert hits[0].fields == {"text": "q2", "answer": "a2", "hits": "0"}


def test_search_decodes_bytes(store, index):
    index.query.return_value = [
        {"id": b"rag_cached_queries:a", "vector_distance": "0", "domain": b"docs", "text": b"q", "answer": b"a"},
    ]

    hit = store.search([0.1, 0.2, 0.3], "docs", limit=1, num_candidates=20)[0]

    assert hit.key == "rag_cached_queries:a"
    assert hit.domain_key == "docs"
    assert hit.fields == {"text": "q", "answer": "a"}
    assert hit.score == pytest.approx(1.0)


def test_search_attaches_stored_vectors_of_kept_hits(store, index, client):
    index.query.return_value = [
        {"id": "rag_cached_queries:a", "vector_distance": "0.1", "domain": "docs", "text": "q1"},
        {"id": "rag_cached_queries:b", "vector_distance": "0.4", "domain": "docs", "text": "q2"},
        {"id": "rag_cached_queries:c", "vector_distance": "0.9", "domain": "docs", "text": "q3"},
    ]
    pipe = client.pipeline.return_value
    pipe.execute.side_effect = None
    pipe.execute.return_value = [
        np.asarray([0.5, 0.25, 0.125], dtype=np.float32).tobytes(),
        None,
    ]

    hits = store.search([0.1, 0.2, 0.3], "docs", limit=2, num_candidates=40)

    assert hits[0].embedding == [0.5, 0.25, 0.125]
    assert hits[1].embedding is None
    assert [c.args for c in pipe.hget.call_args_list] == [
        ("rag_cached_queries:a", "embedding"),
        ("rag_cached_queries:b", "embedding"),
    ]


def test_search_without_hits_skips_vector_fetch(store, index, client):
    index.query.return_value = []

    assert store.search([0.1, 0.2, 0.3], "docs", limit=4, num_candidates=80) == []
    client.pipeline.assert_not_called()


def test_vector_fetch_failure_is_retrieval_error(store, index, client):
    index.query.return_value = [
        {"id": "rag_cached_queries:a", "vector_distance": "0.1", "domain": "docs", "text": "q1"},
    ]
    client.pipeline.return_value.execute.side_effect = redis.ConnectionError("down")

    with pytest.raises(RetrievalError):
        store.search([0.1, 0.2, 0.3], "docs", limit=1, num_candidates=20)


def test_search_failure_is_retrieval_error(store, index):
    index.query.side_effect = redis.ConnectionError("down")

    with pytest.raises(RetrievalError) as exc_info:
        store.search([0.1, 0.2, 0.3], "docs", limit=1, num_candidates=20)
    assert exc_info.value.reason == "store_unavailable"


def test_insert_writes_hash_with_float32_vector(store, client):
    key = store.insert("docs", [0.1, 0.2, 0.3], {"text": "q", "answer": "a", "hits": 0})

    assert key.startswith("rag_cached_queries:")
    call = client.hset.call_args
    assert call.args[0] == key
    mapping = call.kwargs["mapping"]
    assert mapping["domain"] == "docs"
    assert mapping["text"] == "q"
    assert mapping["hits"] == "0"
    assert "created_at" in mapping
    assert np.frombuffer(mapping["embedding"], dtype=np.float32).tolist() == pytest.approx([0.1, 0.2, 0.3])


def test_insert_keys_are_unique(store):
    keys = {store.insert("docs", [0.1, 0.2, 0.3], {"text": "q"}) for _ in range(20)}
    assert len(keys) == 20


def test_increment_runs_script_on_existing_key(store, client):
    script = client.register_script.return_value
    script.return_value = 5

    assert store.increment("rag_cached_queries:a", "hits", 1) == 5
    script.assert_called_once_with(keys=["rag_cached_queries:a"], args=["hits", 1])


def test_increment_missing_key_returns_none(store, client):
    client.register_script.return_value.return_value = None

    assert store.increment("rag_cached_queries:gone", "hits") is None


def test_increment_failure_is_retrieval_error(store, client):
    client.register_script.return_value.side_effect = redis.ConnectionError("down")

    with pytest.raises(RetrievalError):
        store.increment("rag_cached_queries:a", "hits")


def test_delete_domain_only_removes_matching_records(store, client):
    client.scan_iter.return_value = iter([b"rag_cached_queries:a", b"rag_cached_queries:b"])
    client.hget.side_effect = [b"docs", b"other"]
    client.delete.return_value = 1

    assert store.delete_domain("docs") == 1
    client.delete.assert_called_once_with(b"rag_cached_queries:a")


def test_health_check(store, client):
    client.ping.return_value = True
    assert store.health_check() is True

    client.ping.side_effect = redis.ConnectionError("down")
    assert store.health_check() is False
