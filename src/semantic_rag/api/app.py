from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from semantic_rag.api.dependencies import HandlerDep, lifespan
from semantic_rag.config import settings
from semantic_rag.dto import (
    ChatRequest,
    ChatResponse,
    HealthCheckResponse,
    SemanticSearchRequest,
    SemanticSearchResponse,
    VectorizeRequest,
    VectorizeResponse,
)

app = FastAPI(
    title="Semantic RAG API",
    description="Retrieval-augmented chat with a semantic answer cache, backed by Redis vector search",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject malformed payloads with 400 and the list of issues."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid input", "issues": jsonable_encoder(exc.errors())},
    )


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Semantic RAG API",
        "version": "0.1.0",
        "endpoints": {
            "chat": "/api/v1/chat",
            "semantic_search": "/api/v1/semantic-search",
            "vectorize": "/api/v1/vectorize",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/healthz", response_class=PlainTextResponse)
async def healthz() -> str:
    """Liveness probe."""
    return "OK"


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep) -> HealthCheckResponse:
    """Readiness check of the vector store and the embedding service."""
    return await handler.health_check()


@app.post("/api/v1/chat", response_model=ChatResponse, response_model_exclude_none=True)
async def chat(request: ChatRequest, handler: HandlerDep) -> ChatResponse:
    """
    Answer a chat message.

    Without ``ragContextKey`` the model answers directly. With it, the answer
    comes from the semantic cache or is generated from retrieved passages.
    """
    return await handler.chat(request)


@app.post("/api/v1/semantic-search", response_model=SemanticSearchResponse)
async def semantic_search(request: SemanticSearchRequest, handler: HandlerDep) -> SemanticSearchResponse:
    """Return cached answers or the passages closest to the query."""
    return await handler.semantic_search(request)


@app.post("/api/v1/vectorize", response_model=VectorizeResponse)
async def vectorize(request: VectorizeRequest, handler: HandlerDep) -> VectorizeResponse:
    """Download a PDF and store its chunks under a knowledge domain."""
    return await handler.vectorize(request)


def main() -> None:
    import uvicorn

    uvicorn.run(
        "semantic_rag.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    main()
