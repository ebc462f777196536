"""Chunk quality gate and audit metrics."""

from legal_pipeline.core.qa.audit import ChunkMetrics, compute_chunk_metrics
from legal_pipeline.core.qa.validator import QAResult, validate_chunks

__all__ = ["ChunkMetrics", "QAResult", "compute_chunk_metrics", "validate_chunks"]
