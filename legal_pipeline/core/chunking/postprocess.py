"""
Uniform post-processing of strategy drafts.

Applied in order: hard size cap, tail merge, table reclassification and
splitting, then finalization into LegalChunk models.

Dependencies: hashlib (stdlib), legal_pipeline.models
System role: Enforces chunk invariants independent of strategy
"""

from dataclasses import replace
import hashlib

from legal_pipeline.core.chunking import patterns as p
from legal_pipeline.core.chunking.fixed_window import fixed_window_spans
from legal_pipeline.core.chunking.strategies import article_label
from legal_pipeline.core.chunking.types import ChunkDraft, ChunkLimits, trim_span
from legal_pipeline.models.chunk import LegalChunk
from legal_pipeline.models.enums import ChunkType

TABLE_CANDIDATE_TYPES = frozenset({ChunkType.FULL_TEXT, ChunkType.OTHER})


def chunk_hash(text: str) -> str:
    """SHA-256 hex digest of chunk text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def enforce_span_cap(text: str, drafts: list[ChunkDraft], limits: ChunkLimits) -> list[ChunkDraft]:
    """Re-split any draft longer than max_chars inside its own bounds."""
    capped: list[ChunkDraft] = []
    for draft in drafts:
        if draft.length <= limits.max_chars:
            capped.append(draft)
            continue
        for start, end in fixed_window_spans(
            text, draft.start, draft.end, limits.max_chars, limits.overlap, limits.min_chars
        ):
            capped.append(replace(draft, start=start, end=end))
    return capped


def _merge(prev: ChunkDraft, tail: ChunkDraft) -> ChunkDraft:
    locator = prev.locator
    label = prev.label
    if prev.locator and tail.locator and prev.locator.part and tail.locator.part:
        first = prev.locator.part.split("-")[0]
        last = tail.locator.part.split("-")[-1]
        if first != last:
            part = f"{first}-{last}"
            locator = prev.locator.model_copy(update={"part": part})
            if prev.locator.article:
                label = article_label(prev.locator.article, part)
    return replace(prev, end=max(prev.end, tail.end), locator=locator, label=label)


def merge_undersized_tails(drafts: list[ChunkDraft], limits: ChunkLimits) -> list[ChunkDraft]:
    """
    Fold drafts shorter than merge_min_chars into the previous draft.

    Only drafts sharing the same non-null parent_key merge, and only
    while the merged span stays within max_chars.
    """
    merged: list[ChunkDraft] = []
    for draft in drafts:
        prev = merged[-1] if merged else None
        if (
            prev is not None
            and draft.length < limits.merge_min_chars
            and draft.parent_key is not None
            and draft.parent_key == prev.parent_key
            and draft.start >= prev.start
            and max(prev.end, draft.end) - prev.start <= limits.max_chars
        ):
            merged[-1] = _merge(prev, draft)
        else:
            merged.append(draft)
    return merged


def is_table_text(chunk_text: str) -> bool:
    """True when most lines look like pipe or tab separated rows."""
    lines = [line for line in chunk_text.split("\n") if line.strip()]
    if len(lines) < p.TABLE_MIN_LINES:
        return False
    rows = sum(1 for line in lines if line.count("|") >= 2 or line.count("\t") >= 2)
    return rows / len(lines) >= p.TABLE_LINE_RATIO


def _row_kind(line: str) -> str | None:
    if p.PIPE_ROW_RE.match(line):
        return "pipe"
    if p.TAB_ROW_RE.search(line):
        return "tab"
    return None


def find_table_regions(text: str, start: int, end: int) -> list[tuple[int, int]]:
    """
    Absolute spans of table row runs inside text[start:end].

    A run is at least TABLE_MIN_ROWS rows of one kind (pipe or tab
    separated). One blank line between rows does not end the run.
    """
    lines = []
    pos = start
    for line in text[start:end].split("\n"):
        kind = "blank" if not line.strip() else _row_kind(line)
        lines.append((pos, pos + len(line), kind))
        pos += len(line) + 1

    regions = []
    i = 0
    while i < len(lines):
        kind = lines[i][2]
        if kind is None or kind == "blank":
            i += 1
            continue
        rows, last, gap = 1, i, False
        for j in range(i + 1, len(lines)):
            next_kind = lines[j][2]
            if next_kind == kind:
                rows, last, gap = rows + 1, j, False
            elif next_kind == "blank" and not gap:
                gap = True
            else:
                break
        if rows >= p.TABLE_MIN_ROWS:
            regions.append((lines[i][0], lines[last][1]))
        i = last + 1
    return regions


def split_table_regions(text: str, draft: ChunkDraft) -> list[ChunkDraft]:
    """Cut embedded tables out of a draft; the pieces keep its locator."""
    regions = find_table_regions(text, draft.start, draft.end)
    if not regions:
        return [draft]

    pieces = []
    cursor = draft.start
    for region_start, region_end in regions:
        pieces.append(replace(draft, start=cursor, end=region_start))
        pieces.append(replace(draft, start=region_start, end=region_end, chunk_type=ChunkType.TABLE))
        cursor = region_end
    pieces.append(replace(draft, start=cursor, end=draft.end))

    result = []
    for piece in pieces:
        start, end = trim_span(text, piece.start, piece.end)
        if end > start:
            result.append(replace(piece, start=start, end=end))
    return result


def reclassify_tables(text: str, drafts: list[ChunkDraft]) -> list[ChunkDraft]:
    """
    Mark drafts that are tables and split out tables embedded in others.

    Unstructured drafts that are mostly rows become one table chunk.
    Any other draft has its row runs cut into separate table chunks,
    unless it overlaps a neighbour (fixed-window output), where cutting
    would break start ordering.
    """
    result = []
    for index, draft in enumerate(drafts):
        if draft.chunk_type in TABLE_CANDIDATE_TYPES and is_table_text(text[draft.start:draft.end]):
            result.append(replace(draft, chunk_type=ChunkType.TABLE))
            continue
        prev_end = drafts[index - 1].end if index > 0 else draft.start
        next_start = drafts[index + 1].start if index + 1 < len(drafts) else draft.end
        if prev_end > draft.start or next_start < draft.end:
            result.append(draft)
            continue
        result.extend(split_table_regions(text, draft))
    return result


def finalize_chunks(text: str, drafts: list[ChunkDraft], chunker_version: str) -> list[LegalChunk]:
    """Slice text, number chunks contiguously and hash them."""
    chunks = []
    for index, draft in enumerate(drafts):
        chunk_text = text[draft.start:draft.end]
        chunks.append(
            LegalChunk(
                chunk_index=index,
                chunk_type=draft.chunk_type,
                chunk_text=chunk_text,
                char_start=draft.start,
                char_end=draft.end,
                label=draft.label,
                locator=draft.locator,
                chunk_hash=chunk_hash(chunk_text),
                chunker_version=chunker_version,
                metadata=draft.metadata,
            )
        )
    return chunks
