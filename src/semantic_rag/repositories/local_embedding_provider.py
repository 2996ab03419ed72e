"""Local sentence-transformers embedding provider.

Runs a sentence-transformers model in-process. No API calls required.
Models trained with Matryoshka Representation Learning (e.g.
EmbeddingGemma) are truncated to the configured output dimension.
"""

import asyncio
import time

import numpy as np
from sentence_transformers import SentenceTransformer

from semantic_rag.config import settings
from semantic_rag.errors import EmbeddingError
from semantic_rag.utils import get_logger

logger = get_logger(__name__)


class LocalEmbeddingProvider:
    """Local sentence-transformers implementation of EmbeddingProvider.

    Encoding runs in a worker thread so the event loop is not blocked.
    """

    def __init__(self, model_name: str | None = None, output_dimension: int | None = None) -> None:
        """Initialize the local embedding provider.

        Args:
            model_name: Name of the sentence-transformers model.
                       Defaults to settings.embedding_model.
            output_dimension: Truncate vectors to this length.
                       Defaults to settings.embedding_dimension.
        """
        self._model_name = model_name or settings.embedding_model
        self._output_dimension = output_dimension or settings.embedding_dimension
        self._model: SentenceTransformer | None = None

    @classmethod
    def create(cls, model_name: str | None = None, output_dimension: int | None = None) -> "LocalEmbeddingProvider":
        """Factory method to create LocalEmbeddingProvider with defaults."""
        return cls(model_name=model_name, output_dimension=output_dimension)

    @property
    def model(self) -> SentenceTransformer:
        """Lazy-load the embedding model."""
        if self._model is None:
            logger.info("Loading embedding model: %s", self._model_name)
            start_time = time.time()
            self._model = SentenceTransformer(self._model_name, trust_remote_code=True)
            logger.info("Model loaded in %.2fs", time.time() - start_time)
        return self._model

    @property
    def dimension(self) -> int:
        """Get the configured output dimension."""
        return self._output_dimension

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    def _encode_sync(self, text: str) -> list[float]:
        embedding = self.model.encode(
            text,
            show_progress_bar=False,
            normalize_embeddings=True,
        )
        if isinstance(embedding, np.ndarray):
            if embedding.ndim > 1:
                embedding = embedding[0]
            return embedding[: self._output_dimension].tolist()
        return list(embedding)[: self._output_dimension]

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Raises:
            EmbeddingError: If the model cannot be loaded or encoding fails
        """
        try:
            return await asyncio.to_thread(self._encode_sync, text)
        except (OSError, RuntimeError, ValueError) as e:
            raise EmbeddingError("model_failure", str(e)) from e

    async def is_available(self) -> bool:
        """Check if the model can be loaded."""
        try:
            await asyncio.to_thread(lambda: self.model)
            return True
        except (OSError, RuntimeError, ValueError):
            return False

    async def close(self) -> None:
        """Nothing to release for in-process models."""
