"""Request DTOs for API endpoints."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, HttpUrl


class HistoryItem(BaseModel):
    """A prior conversation turn. ``ai`` is accepted as an alias of ``assistant``."""

    role: Literal["user", "ai", "assistant"]
    message: str = Field(..., min_length=1)


class ChatRequest(BaseModel):
    """Request DTO for the chat endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., description="The user's message", min_length=1, max_length=1000)
    language: str = Field(..., description="Response language code (e.g. 'en')", min_length=1)
    rag_context_key: str | None = Field(
        None,
        alias="ragContextKey",
        description="Knowledge domain to ground the answer in (omit to answer directly)",
        min_length=1,
    )
    prompt: str | None = Field(
        None,
        description="Extra system instruction",
        max_length=2000,
    )
    history: list[HistoryItem] | None = Field(
        default=None,
        description="Prior conversation turns, oldest first",
    )


class SemanticSearchRequest(BaseModel):
    """Request DTO for the semantic search endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., description="The search query", min_length=1, max_length=1500)
    context: str = Field(..., description="Knowledge domain to search", min_length=1)
    top_k: int = Field(5, alias="topK", description="Number of results", ge=1, le=100)


class VectorizeRequest(BaseModel):
    """Request DTO for the vectorize (PDF ingestion) endpoint."""

    url: HttpUrl = Field(..., description="URL of the PDF to ingest")
    context: str = Field(..., description="Knowledge domain to store the chunks under", min_length=1)
    replace: bool = Field(..., description="Delete the domain's existing chunks first")
