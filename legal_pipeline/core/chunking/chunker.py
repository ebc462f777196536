"""
Structural chunker entry point.

Dispatches a document to the strategy registered for its doc_type and
runs uniform post-processing. Pure and deterministic: the same input and
limits always yield the same chunks.

Dependencies: hashlib (stdlib)
System role: Document to chunk-set transformation
"""

import hashlib

from legal_pipeline.core.chunking.postprocess import (
    enforce_span_cap,
    finalize_chunks,
    merge_undersized_tails,
    reclassify_tables,
)
from legal_pipeline.core.chunking.strategies import (
    ChunkingStrategy,
    CourtDecisionStrategy,
    EchrStrategy,
    FixedWindowStrategy,
    LegislationStrategy,
    TreatyStrategy,
)
from legal_pipeline.core.chunking.types import DEFAULT_LIMITS, ChunkLimits
from legal_pipeline.models.chunk import ChunkInput, ChunkResult
from legal_pipeline.models.enums import DocType

CHUNKER_VERSION = "2.2.0"

STRATEGY_TABLE: dict[DocType, ChunkingStrategy] = {
    DocType.LAW: LegislationStrategy(DocType.LAW),
    DocType.CODE: LegislationStrategy(DocType.CODE),
    DocType.REGULATION: LegislationStrategy(DocType.REGULATION),
    DocType.GOVERNMENT_DECREE: LegislationStrategy(DocType.GOVERNMENT_DECREE),
    DocType.PM_DECISION: LegislationStrategy(DocType.PM_DECISION),
    DocType.COURT_DECISION: CourtDecisionStrategy(DocType.COURT_DECISION),
    DocType.CASSATION_RULING: CourtDecisionStrategy(DocType.CASSATION_RULING),
    DocType.APPEAL_RULING: CourtDecisionStrategy(DocType.APPEAL_RULING),
    DocType.FIRST_INSTANCE_RULING: CourtDecisionStrategy(DocType.FIRST_INSTANCE_RULING),
    DocType.CONSTITUTIONAL_COURT: CourtDecisionStrategy(DocType.CONSTITUTIONAL_COURT),
    DocType.ECHR_JUDGMENT: EchrStrategy(DocType.ECHR_JUDGMENT),
    DocType.INTERNATIONAL_TREATY: TreatyStrategy(DocType.INTERNATIONAL_TREATY),
    DocType.LEGAL_COMMENTARY: FixedWindowStrategy(DocType.LEGAL_COMMENTARY),
    DocType.OTHER: FixedWindowStrategy(DocType.OTHER),
}

_unmapped = set(DocType) - set(STRATEGY_TABLE)
if _unmapped:
    raise RuntimeError(
        f"No chunking strategy for doc types: {sorted(d.value for d in _unmapped)}"
    )


def compute_chunk_set_version(content_text: str, chunker_version: str = CHUNKER_VERSION) -> str:
    """SHA-256 over content_text and chunker version."""
    return hashlib.sha256((content_text + chunker_version).encode("utf-8")).hexdigest()


def chunk_document(doc: ChunkInput, limits: ChunkLimits = DEFAULT_LIMITS) -> ChunkResult:
    """
    Split a normalized document into structural chunks.

    Args:
        doc: doc_type and content_text of the document
        limits: Size policy; defaults to the reference limits

    Returns:
        ChunkResult with chunks, the strategy that applied and the case
        number when one was found
    """
    text = doc.content_text
    if not text or not text.strip():
        return ChunkResult(chunks=[], strategy="fixed")

    result = STRATEGY_TABLE[doc.doc_type].split(text, limits)

    drafts = enforce_span_cap(text, result.drafts, limits)
    drafts = merge_undersized_tails(drafts, limits)
    drafts = reclassify_tables(text, drafts)
    chunks = finalize_chunks(text, drafts, CHUNKER_VERSION)

    return ChunkResult(chunks=chunks, strategy=result.strategy, case_number=result.case_number)
