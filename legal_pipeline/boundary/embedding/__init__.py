"""Embedding provider adapters."""

from legal_pipeline.boundary.embedding.embeddings_wrapper import FixedDimensionEmbeddings
from legal_pipeline.boundary.embedding.provider import EmbeddingProvider

__all__ = ["EmbeddingProvider", "FixedDimensionEmbeddings"]
