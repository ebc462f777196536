"""
Test suite for EmbeddingProvider.

A recording LangChain Embeddings stands in for the Google model.

System role: Verification of batched embedding calls
"""

import pytest
from langchain_core.embeddings import Embeddings

from legal_pipeline.boundary.embedding import EmbeddingProvider
from legal_pipeline.configs.embedding import EmbeddingSettings
from legal_pipeline.core.exceptions import EmbeddingError


class RecordingEmbeddings(Embeddings):
    """Returns [len(text), index] vectors and records every batch."""

    def __init__(self, fail: bool = False, drop_last: bool = False) -> None:
        self.batches: list[list[str]] = []
        self.fail = fail
        self.drop_last = drop_last

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.batches.append(list(texts))
        if self.fail:
            raise RuntimeError("quota exceeded")
        vectors = [[float(len(text)), float(i)] for i, text in enumerate(texts)]
        return vectors[:-1] if self.drop_last else vectors

    def embed_query(self, text: str) -> list[float]:
        return self.embed_documents([text])[0]


def _provider(embeddings: Embeddings, **overrides) -> tuple[EmbeddingProvider, list[str]]:
    values = {"batch_size": 2, "max_chars_per_text": 10, "max_retries": 1, "timeout_seconds": 5}
    values.update(overrides)
    created: list[str] = []

    def factory(model_name: str) -> Embeddings:
        created.append(model_name)
        return embeddings

    return EmbeddingProvider(EmbeddingSettings(**values), embeddings_factory=factory), created


class TestEmbedTexts:
    """Test suite for EmbeddingProvider.embed_texts()."""

    @pytest.mark.asyncio
    async def test_batches_in_order(self) -> None:
        """Test texts are split into batches and vectors keep input order."""
        # Arrange
        embeddings = RecordingEmbeddings()
        provider, _ = _provider(embeddings)

        # Act
        vectors = await provider.embed_texts(["a", "bb", "ccc", "dddd", "eeeee"], "models/test")

        # Assert
        assert embeddings.batches == [["a", "bb"], ["ccc", "dddd"], ["eeeee"]]
        assert [v[0] for v in vectors] == [1.0, 2.0, 3.0, 4.0, 5.0]

    @pytest.mark.asyncio
    async def test_texts_are_truncated(self) -> None:
        """Test each text is cut to max_chars_per_text."""
        # Arrange
        embeddings = RecordingEmbeddings()
        provider, _ = _provider(embeddings)

        # Act
        await provider.embed_texts(["x" * 25], "models/test")

        # Assert
        assert embeddings.batches == [["x" * 10]]

    @pytest.mark.asyncio
    async def test_empty_input_skips_provider(self) -> None:
        """Test no call is made for an empty list."""
        # Arrange
        embeddings = RecordingEmbeddings()
        provider, created = _provider(embeddings)

        # Act
        vectors = await provider.embed_texts([], "models/test")

        # Assert
        assert vectors == []
        assert created == []

    @pytest.mark.asyncio
    async def test_client_reused_per_model(self) -> None:
        """Test one Embeddings instance is built per model name."""
        # Arrange
        provider, created = _provider(RecordingEmbeddings())

        # Act
        await provider.embed_texts(["a"], "models/one")
        await provider.embed_texts(["b"], "models/one")
        await provider.embed_texts(["c"], "models/two")

        # Assert
        assert created == ["models/one", "models/two"]

    @pytest.mark.asyncio
    async def test_provider_failure_raises_embedding_error(self) -> None:
        """Test a failing batch surfaces as EmbeddingError with the model."""
        # Arrange
        provider, _ = _provider(RecordingEmbeddings(fail=True))

        # Act & Assert
        with pytest.raises(EmbeddingError) as exc_info:
            await provider.embed_texts(["a", "b", "c"], "models/test")
        assert exc_info.value.details["model_name"] == "models/test"
        assert exc_info.value.details["batch_offset"] == 0

    @pytest.mark.asyncio
    async def test_vector_count_mismatch_raises(self) -> None:
        """Test a short response is rejected."""
        # Arrange
        provider, _ = _provider(RecordingEmbeddings(drop_last=True))

        # Act & Assert
        with pytest.raises(EmbeddingError, match="returned 1 vectors for 2 texts"):
            await provider.embed_texts(["a", "b"], "models/test")
