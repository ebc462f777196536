"""
Internal chunker types.

Strategies emit ChunkDrafts: absolute [start, end) spans into
content_text plus structural context. Text is only sliced when drafts
are finalized, so every emitted chunk is a slice of content_text by
construction.

Dependencies: dataclasses (stdlib), legal_pipeline.models
System role: Shared vocabulary between strategies and post-processing
"""

from dataclasses import dataclass, field

from legal_pipeline.models.chunk import ChunkLocator, ChunkMetadata
from legal_pipeline.models.enums import ChunkType


@dataclass(frozen=True)
class ChunkLimits:
    """Size policy applied by every strategy and post-processing step."""

    max_chars: int = 8000
    min_chars: int = 200
    merge_min_chars: int = 200
    overlap: int = 200

    @classmethod
    def from_settings(cls, settings) -> "ChunkLimits":
        """Build limits from ChunkingSettings."""
        return cls(
            max_chars=settings.max_chunk_chars,
            min_chars=settings.min_chunk_chars,
            merge_min_chars=settings.merge_min_chars,
            overlap=settings.fixed_window_overlap,
        )


DEFAULT_LIMITS = ChunkLimits()


@dataclass(frozen=True)
class ChunkDraft:
    """A not-yet-indexed chunk span."""

    start: int
    end: int
    chunk_type: ChunkType
    label: str | None = None
    locator: ChunkLocator | None = None
    parent_key: str | None = None
    metadata: ChunkMetadata | None = None

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass
class StrategyResult:
    """What a strategy produced and which strategy actually applied."""

    drafts: list[ChunkDraft]
    strategy: str
    case_number: str | None = None
    notes: list[str] = field(default_factory=list)


def trim_span(text: str, start: int, end: int) -> tuple[int, int]:
    """Shrink [start, end) past surrounding whitespace."""
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    return start, end
