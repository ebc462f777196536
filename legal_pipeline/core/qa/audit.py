"""
Read-only quality metrics for a stored chunk set.

Dependencies: pydantic
System role: Coverage and boundary diagnostics behind the audit endpoint
"""

from collections import Counter
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, Field

GAP_THRESHOLD = 20
OVERLAP_RATIO_LIMIT = 0.15
COVERAGE_OK_RATIO = 0.95


class GapViolation(BaseModel):
    between: tuple[int, int]
    gap_start: int
    gap_end: int
    gap_size: int


class OverlapViolation(BaseModel):
    between: tuple[int, int]
    overlap_size: int
    overlap_ratio: float


class ChunkMetrics(BaseModel):
    """Audit summary of one document's chunks."""

    chunk_count: int = 0
    document_chars: int = 0
    avg_size: int = 0
    max_size: int = 0
    min_size: int = 0
    coverage_percent: float = 0.0
    coverage_ok: bool = False
    gaps: list[GapViolation] = Field(default_factory=list)
    overlap_ratio: float = 0.0
    excessive_overlap: bool = False
    overlaps: list[OverlapViolation] = Field(default_factory=list)
    duplicate_hashes: list[str] = Field(default_factory=list)
    empty_chunks: list[int] = Field(default_factory=list)
    missing_indices: list[int] = Field(default_factory=list)
    type_distribution: dict[str, int] = Field(default_factory=dict)


def _type_name(chunk_type) -> str:
    return getattr(chunk_type, "value", chunk_type)


def compute_chunk_metrics(content_length: int, chunks: Sequence[Any]) -> ChunkMetrics:
    """
    Compute coverage, gap and overlap metrics.

    Accepts LegalChunk models or LegalChunkModel rows.
    """
    if not chunks:
        return ChunkMetrics(document_chars=content_length, coverage_ok=content_length < 100)

    sizes = [len(c.chunk_text) for c in chunks]

    indices = sorted(c.chunk_index for c in chunks)
    present = set(indices)
    missing = [i for i in range(indices[0], indices[-1] + 1) if i not in present]

    ordered = sorted(chunks, key=lambda c: (c.char_start, c.chunk_index))
    gaps: list[GapViolation] = []
    overlaps: list[OverlapViolation] = []
    overlap_total = 0
    covered = 0
    frontier = 0
    for i, chunk in enumerate(ordered):
        start = max(chunk.char_start, frontier)
        end = min(chunk.char_end, content_length)
        if end > start:
            covered += end - start
            frontier = end
        if i + 1 == len(ordered):
            continue
        nxt = ordered[i + 1]
        if chunk.char_end < nxt.char_start:
            gap = nxt.char_start - chunk.char_end
            if gap > GAP_THRESHOLD:
                gaps.append(
                    GapViolation(
                        between=(chunk.chunk_index, nxt.chunk_index),
                        gap_start=chunk.char_end,
                        gap_end=nxt.char_start,
                        gap_size=gap,
                    )
                )
        elif chunk.char_end > nxt.char_start:
            size = chunk.char_end - nxt.char_start
            overlap_total += size
            span = chunk.char_end - chunk.char_start
            ratio = size / span if span > 0 else 0.0
            if ratio > OVERLAP_RATIO_LIMIT:
                overlaps.append(
                    OverlapViolation(
                        between=(chunk.chunk_index, nxt.chunk_index),
                        overlap_size=size,
                        overlap_ratio=round(ratio, 2),
                    )
                )

    coverage = covered / content_length if content_length > 0 else 0.0
    overlap_ratio = overlap_total / sum(sizes) if sum(sizes) else 0.0
    hash_counts = Counter(c.chunk_hash for c in chunks if c.chunk_hash)

    return ChunkMetrics(
        chunk_count=len(chunks),
        document_chars=content_length,
        avg_size=round(sum(sizes) / len(sizes)),
        max_size=max(sizes),
        min_size=min(sizes),
        coverage_percent=round(coverage * 100, 1),
        coverage_ok=coverage >= COVERAGE_OK_RATIO,
        gaps=gaps,
        overlap_ratio=round(overlap_ratio, 3),
        excessive_overlap=overlap_ratio > OVERLAP_RATIO_LIMIT,
        overlaps=overlaps,
        duplicate_hashes=sorted(h for h, n in hash_counts.items() if n > 1),
        empty_chunks=[c.chunk_index for c in chunks if not c.chunk_text.strip()],
        missing_indices=missing,
        type_distribution=dict(Counter(_type_name(c.chunk_type) for c in chunks)),
    )
