"""Search result domain entities."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class VectorHit:
    """A raw nearest-neighbour match returned by a vector store.

    Attributes:
        key: Storage key of the matched record
        domain_key: Domain the record belongs to
        score: Cosine similarity (1 = identical)
        fields: Remaining stored fields, decoded to strings
        embedding: Stored vector, when the store returns it
    """

    key: str
    domain_key: str
    score: float
    fields: dict[str, str] = field(default_factory=dict)
    embedding: list[float] | None = None


@dataclass(frozen=True)
class SearchResult:
    """A content passage relevant to a query."""

    text: str
    domain_key: str
    score: float
    source_embedding: list[float] | None = None


@dataclass(frozen=True)
class CachedSearchResult(SearchResult):
    """A cached query/answer pair similar to the incoming query.

    ``text`` holds the cached query text; ``answer`` holds its stored answer.
    """

    entry_id: str = ""
    answer: str = ""
    hit_count: int = 0


@dataclass(frozen=True)
class SearchHit:
    """Caller-facing search result."""

    text: str
    domain_key: str
    score: float
