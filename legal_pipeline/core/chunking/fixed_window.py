"""
Overlapping fixed-size windows over a span of text.

Used directly for unstructured documents, as the fallback of every
structural strategy, and to split oversized structural spans.

Dependencies: legal_pipeline.core.chunking.types
System role: Size-bounded splitting primitive
"""

from legal_pipeline.core.chunking.types import trim_span


def fixed_window_spans(
    text: str,
    start: int,
    end: int,
    max_chars: int,
    overlap: int,
    min_break: int,
) -> list[tuple[int, int]]:
    """
    Split text[start:end] into trimmed windows of at most max_chars.

    Each window prefers to end at the last paragraph break, then the last
    line break, found after min_break characters. The next window starts
    overlap characters before the previous break.

    Args:
        text: Full document text; offsets are absolute into it
        start: Span start (inclusive)
        end: Span end (exclusive)
        max_chars: Window cap
        overlap: Characters shared by consecutive windows
        min_break: Earliest break position relative to the window start

    Returns:
        List of (start, end) pairs, non-empty after trimming
    """
    min_break = max(1, min(min_break, max_chars // 2))
    overlap = max(0, min(overlap, max_chars - 1))

    spans: list[tuple[int, int]] = []
    pos = start
    last_stop = start
    while pos < end:
        stop = min(pos + max_chars, end)
        if stop < end:
            floor = max(pos + min_break, last_stop + 1)
            brk = text.rfind("\n\n", floor, stop)
            if brk == -1:
                brk = text.rfind("\n", floor, stop)
            if brk != -1:
                stop = brk

        s, e = trim_span(text, pos, stop)
        if e > s:
            spans.append((s, e))
        if stop >= end:
            break

        last_stop = stop
        nxt = stop - overlap
        pos = nxt if nxt > pos else stop
    return spans
