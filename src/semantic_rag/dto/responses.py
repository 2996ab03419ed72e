"""Response DTOs for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class ChatResponse(BaseModel):
    """Response DTO for the chat endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    response: str = Field(..., description="The answer text")
    context_count: int | None = Field(
        None,
        serialization_alias="contextCount",
        description="-1 = no retrieval, 2 = served from cache, otherwise passages used",
    )


class SearchResultItem(BaseModel):
    """Single semantic search result."""

    text: str = Field(..., description="Passage text, or the cached answer")
    context: str = Field(..., description="Knowledge domain of the result")
    score: float = Field(..., description="Cosine similarity (1 = identical)")


class SemanticSearchResponse(BaseModel):
    """Response DTO for the semantic search endpoint."""

    results: list[SearchResultItem] = Field(
        default_factory=list,
        description="Results sorted by score, most similar first",
    )


class VectorizeResponse(BaseModel):
    """Response DTO for the vectorize endpoint."""

    message: str
    url: str
    context: str
    total_chunks: int = Field(..., serialization_alias="totalChunks", ge=0)
    successful_embeddings: int = Field(..., serialization_alias="successfulEmbeddings", ge=0)
    failed_embeddings: int = Field(..., serialization_alias="failedEmbeddings", ge=0)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    store_healthy: bool = Field(..., description="Whether the vector store is reachable")
    embedding_healthy: bool | None = Field(
        None,
        description="Whether the embedding service is reachable",
    )
