"""
Chunk embeddings client pinned to one vector size.

GoogleGenerativeAIEmbeddings does not apply output_dimensionality from its
constructor, so every call here passes it explicitly. Chunks are embedded
as retrieval documents and each returned vector is checked against the
pinned size before it reaches legal_chunks.embedding.

Dependencies: langchain_google_genai
System role: Default embeddings backend for the embed worker
"""

from langchain_google_genai import GoogleGenerativeAIEmbeddings

from legal_pipeline.observability import get_logger

logger = get_logger(__name__)

CHUNK_TASK_TYPE = "RETRIEVAL_DOCUMENT"


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """Google embeddings that always return vectors of one length."""

    _output_dimensionality: int = 1024

    def __init__(
        self,
        model: str,
        output_dimensionality: int = 1024,
        **kwargs,
    ) -> None:
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(
            f"{__name__}:__init__ - Embeddings client ready: model={model}, "
            f"dimensions={output_dimensionality}"
        )

    def _check_dimensions(self, vectors: list[list[float]]) -> list[list[float]]:
        for position, vector in enumerate(vectors):
            if len(vector) != self._output_dimensionality:
                raise ValueError(
                    f"Vector {position} has {len(vector)} dimensions, "
                    f"expected {self._output_dimensionality}"
                )
        return vectors

    def embed_documents(
        self,
        texts: list[str],
        *,
        batch_size: int = 100,
        task_type: str | None = None,
        titles: list[str] | None = None,
        output_dimensionality: int | None = None,
    ) -> list[list[float]]:
        vectors = super().embed_documents(
            texts,
            batch_size=batch_size,
            task_type=task_type or CHUNK_TASK_TYPE,
            titles=titles,
            output_dimensionality=self._output_dimensionality,
        )
        return self._check_dimensions(vectors)

    async def aembed_documents(
        self,
        texts: list[str],
        *,
        batch_size: int = 100,
        task_type: str | None = None,
        titles: list[str] | None = None,
        output_dimensionality: int | None = None,
    ) -> list[list[float]]:
        vectors = await super().aembed_documents(
            texts,
            batch_size=batch_size,
            task_type=task_type or CHUNK_TASK_TYPE,
            titles=titles,
            output_dimensionality=self._output_dimensionality,
        )
        return self._check_dimensions(vectors)
