"""
Embedding provider used by the embed worker.

Wraps a LangChain Embeddings model with truncation, batching, retries
and a per-call timeout. The model name is supplied per call so the
active model can change at runtime through app_settings.

Dependencies: langchain_core, tenacity, legal_pipeline.configs
System role: Text to vector conversion for chunk sets
"""

import asyncio
from collections.abc import Callable

from langchain_core.embeddings import Embeddings
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from legal_pipeline.boundary.embedding.embeddings_wrapper import FixedDimensionEmbeddings
from legal_pipeline.configs.embedding import EmbeddingSettings
from legal_pipeline.core.exceptions import EmbeddingError
from legal_pipeline.observability import get_logger

logger = get_logger(__name__)

EmbeddingsFactory = Callable[[str], Embeddings]


class EmbeddingProvider:
    """
    Batched, retried embedding calls.

    Embeddings instances are created lazily per model name through the
    factory and reused afterwards.
    """

    def __init__(
        self,
        settings: EmbeddingSettings,
        embeddings_factory: EmbeddingsFactory | None = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            settings: Batch size, truncation, timeout and retry policy
            embeddings_factory: Builds an Embeddings for a model name;
                defaults to FixedDimensionEmbeddings
        """
        self.settings = settings
        self._factory = embeddings_factory or self._default_factory
        self._clients: dict[str, Embeddings] = {}

    def _default_factory(self, model_name: str) -> Embeddings:
        return FixedDimensionEmbeddings(
            model=model_name,
            output_dimensionality=self.settings.dimensions,
        )

    def client_for(self, model_name: str) -> Embeddings:
        if model_name not in self._clients:
            self._clients[model_name] = self._factory(model_name)
        return self._clients[model_name]

    async def _embed_batch(self, client: Embeddings, batch: list[str], model_name: str) -> list[list[float]]:
        vectors: list[list[float]] = []
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(Exception),
            stop=stop_after_attempt(self.settings.max_retries),
            wait=wait_exponential_jitter(initial=1, max=20, jitter=2),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:_embed_batch - Retry {retry_state.attempt_number}/"
                f"{self.settings.max_retries} for model={model_name}"
            ),
            reraise=True,
        ):
            with attempt:
                vectors = await asyncio.wait_for(
                    client.aembed_documents(batch),
                    timeout=self.settings.timeout_seconds,
                )
        return vectors

    async def embed_texts(self, texts: list[str], model_name: str) -> list[list[float]]:
        """
        Embed texts in order.

        Args:
            texts: Texts to embed; each is truncated to max_chars_per_text
            model_name: Provider model to use

        Returns:
            One vector per input text

        Raises:
            EmbeddingError: When a batch still fails after retries or the
                provider returns the wrong number of vectors
        """
        if not texts:
            return []

        client = self.client_for(model_name)
        limit = self.settings.max_chars_per_text
        truncated = [text[:limit] for text in texts]
        size = max(1, self.settings.batch_size)

        vectors: list[list[float]] = []
        for offset in range(0, len(truncated), size):
            batch = truncated[offset:offset + size]
            try:
                batch_vectors = await self._embed_batch(client, batch, model_name)
            except Exception as e:
                raise EmbeddingError(
                    f"Embedding batch failed: {e}",
                    model_name=model_name,
                    details={"batch_offset": offset, "batch_size": len(batch)},
                ) from e
            if len(batch_vectors) != len(batch):
                raise EmbeddingError(
                    f"Provider returned {len(batch_vectors)} vectors for {len(batch)} texts",
                    model_name=model_name,
                )
            vectors.extend(batch_vectors)
        return vectors
