"""
Unit tests for the QA gate and chunk audit metrics.
"""

from legal_pipeline.core.chunking import CHUNKER_VERSION, chunk_document
from legal_pipeline.core.chunking.postprocess import chunk_hash
from legal_pipeline.core.qa import compute_chunk_metrics, validate_chunks
from legal_pipeline.models.chunk import ChunkInput, LegalChunk
from legal_pipeline.models.enums import ChunkType, DocType

TEXT = "abcdefghij" * 30


def make_chunk(text: str, start: int, end: int, index: int, chunk_type=ChunkType.FULL_TEXT) -> LegalChunk:
    piece = text[start:end]
    return LegalChunk(
        chunk_index=index,
        chunk_type=chunk_type,
        chunk_text=piece,
        char_start=start,
        char_end=end,
        chunk_hash=chunk_hash(piece),
        chunker_version=CHUNKER_VERSION,
    )


def legislation_chunks(text: str) -> list[LegalChunk]:
    return chunk_document(ChunkInput(doc_type=DocType.LAW, content_text=text)).chunks


class TestValidateChunks:
    """Test structural invariant checks."""

    def test_valid_set(self, legislation_text):
        """Chunker output passes."""
        result = validate_chunks(legislation_text, legislation_chunks(legislation_text))

        assert result.ok is True
        assert result.errors == []

    def test_empty_set_is_valid(self):
        """No chunks means nothing to violate."""
        assert validate_chunks("", []).ok is True

    def test_non_contiguous_index(self, legislation_text):
        """Indices must run 0..n-1 in order."""
        chunks = legislation_chunks(legislation_text)
        chunks[1] = chunks[1].model_copy(update={"chunk_index": 5})

        result = validate_chunks(legislation_text, chunks)

        assert result.ok is False
        assert "chunk 1: chunk_index 5 is not contiguous (expected 1)" in result.errors

    def test_text_not_a_slice(self, legislation_text):
        """Chunk text must equal the content slice."""
        chunks = legislation_chunks(legislation_text)
        tampered = "tampered text"
        chunks[0] = chunks[0].model_copy(
            update={"chunk_text": tampered, "chunk_hash": chunk_hash(tampered)}
        )

        result = validate_chunks(legislation_text, chunks)

        assert result.errors == ["chunk 0: chunk_text does not match content_text slice"]

    def test_bounds_outside_text(self):
        """Offsets past the end of content are reported."""
        chunk = make_chunk(TEXT, 0, 100, 0).model_copy(update={"char_end": len(TEXT) + 10})

        result = validate_chunks(TEXT, [chunk])

        assert any("outside" in e for e in result.errors)

    def test_hash_mismatch(self):
        """Stored hash must match the text."""
        chunk = make_chunk(TEXT, 0, 100, 0).model_copy(update={"chunk_hash": "0" * 64})

        result = validate_chunks(TEXT, [chunk])

        assert result.errors == ["chunk 0: chunk_hash does not match chunk_text"]

    def test_span_cap(self):
        """Spans longer than max_chars are reported."""
        result = validate_chunks(TEXT, [make_chunk(TEXT, 0, 100, 0)], max_chars=50)

        assert result.errors == ["chunk 0: span 100 exceeds 50"]

    def test_blank_chunk(self):
        """Whitespace-only chunks are reported."""
        text = "words" + " " * 10 + "words"

        result = validate_chunks(text, [make_chunk(text, 5, 15, 0)])

        assert result.errors == ["chunk 0: chunk_text is blank"]

    def test_excessive_overlap(self):
        """Neighbours may share at most max_overlap characters."""
        chunks = [make_chunk(TEXT, 0, 200, 0), make_chunk(TEXT, 100, 300, 1)]

        result = validate_chunks(TEXT, chunks, max_overlap=50)

        assert result.errors == ["chunk 1: overlaps previous chunk by 100 chars"]

    def test_starts_must_not_decrease(self):
        """A chunk may not start before its predecessor."""
        chunks = [make_chunk(TEXT, 100, 150, 0), make_chunk(TEXT, 0, 50, 1)]

        result = validate_chunks(TEXT, chunks)

        assert result.errors == ["chunk 1: char_start 0 precedes previous start 100"]

    def test_errors_truncated(self):
        """Only the first max_errors violations are reported."""
        chunks = [
            make_chunk(TEXT, i * 10, i * 10 + 10, i).model_copy(update={"chunk_hash": "x"})
            for i in range(5)
        ]

        result = validate_chunks(TEXT, chunks, max_errors=2)

        assert result.ok is False
        assert len(result.errors) == 2


class TestChunkMetrics:
    """Test audit metrics."""

    def test_full_coverage(self):
        """Adjacent chunks cover the whole document."""
        metrics = compute_chunk_metrics(len(TEXT), [make_chunk(TEXT, 0, 150, 0), make_chunk(TEXT, 150, 300, 1)])

        assert metrics.chunk_count == 2
        assert metrics.coverage_percent == 100.0
        assert metrics.coverage_ok is True
        assert metrics.gaps == []
        assert metrics.avg_size == 150

    def test_gap_reported(self):
        """Uncovered stretches above the threshold are gaps."""
        metrics = compute_chunk_metrics(len(TEXT), [make_chunk(TEXT, 0, 100, 0), make_chunk(TEXT, 150, 300, 1)])

        assert len(metrics.gaps) == 1
        gap = metrics.gaps[0]
        assert gap.between == (0, 1)
        assert gap.gap_size == 50
        assert metrics.coverage_ok is False

    def test_overlap_reported(self):
        """Large overlaps are flagged per pair and overall."""
        metrics = compute_chunk_metrics(len(TEXT), [make_chunk(TEXT, 0, 200, 0), make_chunk(TEXT, 100, 300, 1)])

        assert metrics.overlaps[0].overlap_size == 100
        assert metrics.overlaps[0].overlap_ratio == 0.5
        assert metrics.overlap_ratio == 0.25
        assert metrics.excessive_overlap is True

    def test_duplicates_and_missing_indices(self):
        """Repeated hashes and holes in the index sequence are listed."""
        text = "same text\nsame text\nother text"
        chunks = [make_chunk(text, 0, 9, 0), make_chunk(text, 10, 19, 2), make_chunk(text, 20, 30, 3)]

        metrics = compute_chunk_metrics(len(text), chunks)

        assert metrics.duplicate_hashes == [chunk_hash("same text")]
        assert metrics.missing_indices == [1]

    def test_type_distribution(self, legislation_text):
        """Chunk types are counted by value."""
        metrics = compute_chunk_metrics(len(legislation_text), legislation_chunks(legislation_text))

        assert metrics.type_distribution == {"article": 3}
        assert metrics.gaps == []
        assert metrics.empty_chunks == []

    def test_no_chunks(self):
        """Tiny documents without chunks are acceptable, larger ones are not."""
        assert compute_chunk_metrics(50, []).coverage_ok is True
        assert compute_chunk_metrics(500, []).coverage_ok is False
