"""Structural chunking of normalized legal documents."""

from legal_pipeline.core.chunking.chunker import (
    CHUNKER_VERSION,
    STRATEGY_TABLE,
    chunk_document,
    compute_chunk_set_version,
)
from legal_pipeline.core.chunking.types import DEFAULT_LIMITS, ChunkLimits

__all__ = [
    "CHUNKER_VERSION",
    "STRATEGY_TABLE",
    "DEFAULT_LIMITS",
    "ChunkLimits",
    "chunk_document",
    "compute_chunk_set_version",
]
