"""
QA gate over a freshly produced chunk set.

Every check is re-derived from content_text and the chunks themselves;
nothing produced by the chunker is trusted. Runs before any chunk is
persisted.

Dependencies: pydantic
System role: Structural correctness gate for ingestion and workers
"""

from pydantic import BaseModel

from legal_pipeline.core.chunking.postprocess import chunk_hash
from legal_pipeline.core.chunking.types import DEFAULT_LIMITS
from legal_pipeline.models.chunk import LegalChunk


class QAResult(BaseModel):
    """Outcome of validate_chunks."""

    ok: bool
    errors: list[str]


def _chunk_errors(content_text: str, chunk: LegalChunk, position: int, max_chars: int) -> list[str]:
    errors = []
    idx = chunk.chunk_index
    length = len(content_text)

    if chunk.chunk_index != position:
        errors.append(f"chunk {position}: chunk_index {idx} is not contiguous (expected {position})")
    if not (0 <= chunk.char_start < chunk.char_end <= length):
        errors.append(
            f"chunk {idx}: bounds [{chunk.char_start}, {chunk.char_end}) outside [0, {length}]"
        )
    elif content_text[chunk.char_start:chunk.char_end] != chunk.chunk_text:
        errors.append(f"chunk {idx}: chunk_text does not match content_text slice")
    if chunk.char_end - chunk.char_start > max_chars:
        errors.append(
            f"chunk {idx}: span {chunk.char_end - chunk.char_start} exceeds {max_chars}"
        )
    if not chunk.chunk_text.strip():
        errors.append(f"chunk {idx}: chunk_text is blank")
    if chunk.chunk_hash != chunk_hash(chunk.chunk_text):
        errors.append(f"chunk {idx}: chunk_hash does not match chunk_text")
    return errors


def validate_chunks(
    content_text: str,
    chunks: list[LegalChunk],
    max_errors: int = 10,
    max_chars: int = DEFAULT_LIMITS.max_chars,
    max_overlap: int = DEFAULT_LIMITS.overlap,
) -> QAResult:
    """
    Validate a chunk set against its source text.

    Args:
        content_text: Text the chunks were cut from
        chunks: Chunks in emitted order
        max_errors: Number of violations to report at most
        max_chars: Span cap
        max_overlap: Largest overlap allowed between neighbours

    Returns:
        QAResult with ok=False and the first max_errors violations on failure
    """
    errors: list[str] = []
    prev: LegalChunk | None = None

    for position, chunk in enumerate(chunks):
        errors.extend(_chunk_errors(content_text, chunk, position, max_chars))

        if prev is not None:
            if chunk.char_start < prev.char_start:
                errors.append(
                    f"chunk {chunk.chunk_index}: char_start {chunk.char_start} "
                    f"precedes previous start {prev.char_start}"
                )
            overlap = prev.char_end - chunk.char_start
            if overlap > max_overlap:
                errors.append(
                    f"chunk {chunk.chunk_index}: overlaps previous chunk by {overlap} chars"
                )
        prev = chunk

        if len(errors) >= max_errors:
            break

    errors = errors[:max_errors]
    return QAResult(ok=not errors, errors=errors)
