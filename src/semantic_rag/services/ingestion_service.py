"""Ingestion service.

Downloads a PDF, extracts its text, splits it into chunks and stores one
embedded record per chunk in the content namespace. Chunks are embedded
concurrently; a failed chunk is reported, not fatal to the batch.
"""

import asyncio
import io
from dataclasses import dataclass, field

import httpx
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from semantic_rag.config import settings
from semantic_rag.errors import IngestionError, RagError, ValidationError
from semantic_rag.protocols import VectorStore
from semantic_rag.services.embedding_gateway import EmbeddingGateway
from semantic_rag.utils import clean_text, get_logger, split_text

logger = get_logger(__name__)

DOWNLOAD_TIMEOUT = 30.0


@dataclass
class ChunkFailure:
    chunk_index: int
    error: str


@dataclass
class IngestionReport:
    """Outcome of an ingestion run."""

    domain_key: str
    total_chunks: int = 0
    successful: int = 0
    failures: list[ChunkFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)


class IngestionService:
    """Fills the content corpus from documents."""

    def __init__(
        self,
        embeddings: EmbeddingGateway,
        store: VectorStore,
        chunk_size: int | None = None,
        chunk_overlap: int | None = None,
        concurrency: int | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the ingestion service.

        Args:
            embeddings: Embedding gateway (required).
            store: Vector store for the content namespace (required).
            chunk_size: Maximum chunk length. Defaults to settings.chunk_size.
            chunk_overlap: Overlap between chunks. Defaults to settings.chunk_overlap.
            concurrency: Maximum concurrent chunk embeddings. Defaults to settings.
            http_client: Optional preconfigured async HTTP client for downloads.
        """
        self._embeddings = embeddings
        self._store = store
        self._chunk_size = chunk_size or settings.chunk_size
        self._chunk_overlap = settings.chunk_overlap if chunk_overlap is None else chunk_overlap
        self._concurrency = concurrency or settings.ingest_concurrency
        self._http_client = http_client

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=DOWNLOAD_TIMEOUT, follow_redirects=True)
        return self._http_client

    async def ingest_url(self, url: str, domain_key: str, replace: bool = False) -> IngestionReport:
        """Download a PDF and ingest its text.

        Raises:
            IngestionError: If the download times out, fails, or the file is not a readable PDF
            ValidationError: If the PDF contains no text
        """
        try:
            response = await self.http_client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise IngestionError("download_timeout", "Request timeout while downloading PDF") from e
        except httpx.HTTPError as e:
            raise IngestionError("download_failed", "Could not download PDF from the provided URL") from e

        text = self._extract_pdf_text(response.content)
        logger.info("Downloaded PDF and extracted text: %s (%d chars)", url, len(text))
        return await self.ingest_text(domain_key, text, replace=replace)

    @staticmethod
    def _extract_pdf_text(raw: bytes) -> str:
        try:
            reader = PdfReader(io.BytesIO(raw))
            return "\n".join(page.extract_text() or "" for page in reader.pages)
        except PdfReadError as e:
            raise IngestionError("invalid_pdf", str(e)) from e

    async def ingest_text(self, domain_key: str, text: str, replace: bool = False) -> IngestionReport:
        """Split, embed and store a text under a domain.

        Args:
            domain_key: Domain the chunks belong to
            text: Raw document text
            replace: Delete the domain's existing chunks first

        Raises:
            ValidationError: If the text is empty
        """
        cleaned = clean_text(text)
        if not cleaned:
            raise ValidationError("empty_document", "No text content found in the document")

        chunks = split_text(cleaned, self._chunk_size, self._chunk_overlap)
        logger.info("Text split into %d chunks for domain=%s", len(chunks), domain_key)

        if replace:
            removed = self._store.delete_domain(domain_key)
            logger.info("Removed %d existing chunks for domain=%s", removed, domain_key)

        semaphore = asyncio.Semaphore(self._concurrency)

        async def store_chunk(index: int, chunk: str) -> ChunkFailure | None:
            async with semaphore:
                try:
                    vector = await self._embeddings.embed(chunk)
                    self._store.insert(domain_key=domain_key, vector=vector, fields={"text": chunk})
                except RagError as e:
                    logger.warning("Chunk %d failed for domain=%s: %s", index, domain_key, e)
                    return ChunkFailure(chunk_index=index, error=str(e))
            return None

        outcomes = await asyncio.gather(*(store_chunk(i, chunk) for i, chunk in enumerate(chunks)))
        failures = [outcome for outcome in outcomes if outcome is not None]

        report = IngestionReport(
            domain_key=domain_key,
            total_chunks=len(chunks),
            successful=len(chunks) - len(failures),
            failures=failures,
        )
        logger.info(
            "Ingestion finished domain=%s chunks=%d failed=%d",
            domain_key,
            report.total_chunks,
            report.failed,
        )
        return report

    async def close(self) -> None:
        """Close the download client."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
