import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Runtime
    env: str = os.getenv("ENV", "dev")
    log_level: str | None = os.getenv("LOG_LEVEL")

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    content_index_name: str = os.getenv("CONTENT_INDEX_NAME", "rag_content")
    cache_index_name: str = os.getenv("CACHE_INDEX_NAME", "rag_cached_queries")

    # Embedding
    embedding_provider: str = os.getenv("EMBEDDING_PROVIDER", "gemini")  # or "ollama" or "local"
    embedding_model: str = os.getenv("EMBEDDING_MODEL", "gemini-embedding-001")
    embedding_dimension: int = int(os.getenv("EMBEDDING_DIMENSION", "768"))

    # Generation
    generation_provider: str = os.getenv("GENERATION_PROVIDER", "gemini")  # or "ollama"
    generation_model: str = os.getenv("GENERATION_MODEL", "gemini-2.5-flash")

    # Gemini
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
    gemini_base_url: str = os.getenv(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    )

    # Ollama
    ollama_base_url: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")

    http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "30"))

    # Retrieval policy
    cache_similarity_threshold: float = float(os.getenv("CACHE_SIMILARITY_THRESHOLD", "0.96"))
    relevance_threshold: float = float(os.getenv("RELEVANCE_THRESHOLD", "0.8"))
    content_top_k: int = int(os.getenv("CONTENT_TOP_K", "4"))
    cache_top_k: int = int(os.getenv("CACHE_TOP_K", "1"))
    search_top_k: int = int(os.getenv("SEARCH_TOP_K", "5"))
    candidate_multiplier: int = int(os.getenv("CANDIDATE_MULTIPLIER", "20"))

    # Ingestion
    chunk_size: int = int(os.getenv("CHUNK_SIZE", "1000"))
    chunk_overlap: int = int(os.getenv("CHUNK_OVERLAP", "200"))
    ingest_concurrency: int = int(os.getenv("INGEST_CONCURRENCY", "8"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    @property
    def is_production(self) -> bool:
        """Check whether the service runs in production mode."""
        return self.env == "prod"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        for name in ("cache_similarity_threshold", "relevance_threshold"):
            value = getattr(self, name)
            if not 0 <= value <= 1:
                raise ValueError(f"{name.upper()} must be between 0 and 1 for cosine similarity")

        for name in ("content_top_k", "cache_top_k", "search_top_k", "candidate_multiplier",
                     "embedding_dimension", "ingest_concurrency", "chunk_size"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name.upper()} must be a positive integer")

        if not 0 <= self.chunk_overlap < self.chunk_size:
            raise ValueError("CHUNK_OVERLAP must be smaller than CHUNK_SIZE")

        if self.embedding_provider not in ("gemini", "ollama", "local"):
            raise ValueError(
                f"EMBEDDING_PROVIDER must be one of ['gemini', 'ollama', 'local'], "
                f"got {self.embedding_provider}"
            )

        if self.generation_provider not in ("gemini", "ollama"):
            raise ValueError(
                f"GENERATION_PROVIDER must be one of ['gemini', 'ollama'], "
                f"got {self.generation_provider}"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
    )
