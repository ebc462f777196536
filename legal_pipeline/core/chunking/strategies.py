"""
Chunking strategies, one per document family.

Each strategy turns content_text into ChunkDrafts on absolute offsets.
Strategies do not enforce the size cap or merge tails; post-processing
does that uniformly for all of them.

Dependencies: re (stdlib), legal_pipeline.core.normalization.identifiers
System role: Structure-aware splitting of legal documents
"""

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass
import re

from legal_pipeline.core.chunking import patterns as p
from legal_pipeline.core.chunking.fixed_window import fixed_window_spans
from legal_pipeline.core.chunking.types import (
    ChunkDraft,
    ChunkLimits,
    StrategyResult,
    trim_span,
)
from legal_pipeline.core.normalization.identifiers import (
    extract_application_number,
    extract_case_number,
    extract_treaty_number,
)
from legal_pipeline.models.chunk import ChunkLocator, ChunkMetadata
from legal_pipeline.models.enums import ChunkType, CourtType, DocType

SECTION_MIN_GAP = 50
SECTION_MAX_LINE = 200
SECTION_TITLE_MAX = 200

COURT_LEVEL_BY_DOC_TYPE: dict[DocType, CourtType] = {
    DocType.CASSATION_RULING: CourtType.CASSATION,
    DocType.APPEAL_RULING: CourtType.APPEAL,
    DocType.FIRST_INSTANCE_RULING: CourtType.FIRST_INSTANCE,
    DocType.CONSTITUTIONAL_COURT: CourtType.CONSTITUTIONAL,
    DocType.ECHR_JUDGMENT: CourtType.ECHR,
}


def article_label(article: str, part: str | None = None) -> str:
    """Human label for an article or a part range of it."""
    if not part:
        return f"Article {article}"
    if "-" in part:
        return f"Article {article}, parts {part}"
    return f"Article {article}, part {part}"


def _line_bounds(text: str, index: int) -> tuple[int, int]:
    line_start = text.rfind("\n", 0, index) + 1
    line_end = text.find("\n", index)
    if line_end == -1:
        line_end = len(text)
    return line_start, line_end


def _heading(text: str, start: int) -> str:
    line_start, line_end = _line_bounds(text, start)
    return text[line_start:line_end].strip()[:SECTION_TITLE_MAX]


def _draft(text: str, start: int, end: int, chunk_type: ChunkType, **kwargs) -> ChunkDraft | None:
    """Trimmed draft over [start, end), or None when only whitespace."""
    s, e = trim_span(text, start, end)
    if e <= s:
        return None
    return ChunkDraft(start=s, end=e, chunk_type=chunk_type, **kwargs)


def fixed_window_drafts(
    text: str,
    start: int,
    end: int,
    limits: ChunkLimits,
    chunk_type: ChunkType = ChunkType.FULL_TEXT,
    metadata: ChunkMetadata | None = None,
) -> list[ChunkDraft]:
    """Fixed windows labelled "Part k" over [start, end)."""
    spans = fixed_window_spans(
        text, start, end, limits.max_chars, limits.overlap, limits.min_chars
    )
    return [
        ChunkDraft(
            start=s,
            end=e,
            chunk_type=chunk_type,
            label=f"Part {k}",
            metadata=metadata,
        )
        for k, (s, e) in enumerate(spans, start=1)
    ]


@dataclass(frozen=True)
class SectionBoundary:
    """A validated section heading position."""

    index: int
    order: int
    pattern: p.SectionPattern
    heading: str
    article: str | None = None


def find_sections(
    text: str,
    section_patterns: tuple[p.SectionPattern, ...],
    min_gap: int = SECTION_MIN_GAP,
    max_line: int = SECTION_MAX_LINE,
) -> list[SectionBoundary]:
    """
    Locate section headings that open a line.

    A match counts only when the text before it on its line is empty or a
    section numeral, and the whole line is at most max_line characters.
    Boundaries closer than min_gap to the previous kept one are dropped.
    """
    found: list[SectionBoundary] = []
    for order, sp in enumerate(section_patterns):
        for m in sp.regex.finditer(text):
            line_start, line_end = _line_bounds(text, m.start())
            if line_end - line_start > max_line:
                continue
            if not p.LINE_PREFIX_RE.match(text[line_start:m.start()]):
                continue
            article = None
            if sp.keyed_by_article:
                article = next((g for g in m.groups() if g), None)
            found.append(
                SectionBoundary(
                    index=line_start,
                    order=order,
                    pattern=sp,
                    heading=text[line_start:line_end].strip()[:SECTION_TITLE_MAX],
                    article=article,
                )
            )

    found.sort(key=lambda b: (b.index, b.order))
    kept: list[SectionBoundary] = []
    for boundary in found:
        if not kept or boundary.index - kept[-1].index > min_gap:
            kept.append(boundary)
    return kept


class ChunkingStrategy(ABC):
    """Splits content_text of one document family into drafts."""

    name: str = "fixed"

    def __init__(self, doc_type: DocType):
        self.doc_type = doc_type

    @abstractmethod
    def split(self, text: str, limits: ChunkLimits) -> StrategyResult:
        """Produce drafts for text."""

    def fallback(
        self,
        text: str,
        limits: ChunkLimits,
        metadata: ChunkMetadata | None = None,
        case_number: str | None = None,
    ) -> StrategyResult:
        drafts = fixed_window_drafts(text, 0, len(text), limits, metadata=metadata)
        return StrategyResult(drafts=drafts, strategy="fixed", case_number=case_number)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.doc_type.value})"


class FixedWindowStrategy(ChunkingStrategy):
    """Unstructured text: commentary and anything unclassified."""

    name = "fixed"

    def split(self, text: str, limits: ChunkLimits) -> StrategyResult:
        return self.fallback(text, limits)


class _ArticleStrategy(ChunkingStrategy):
    """Shared article and part splitting for statutes and treaties."""

    header_re: re.Pattern = p.ARTICLE_HEADER_RE
    article_type: ChunkType = ChunkType.ARTICLE
    preamble_min_chars: int | None = None

    def split(self, text: str, limits: ChunkLimits) -> StrategyResult:
        matches = list(self.header_re.finditer(text))
        if not matches:
            return self.fallback(text, limits, case_number=self.case_number(text))

        drafts: list[ChunkDraft] = []
        first = matches[0].start()
        min_preamble = limits.min_chars if self.preamble_min_chars is None else self.preamble_min_chars
        if first > min_preamble:
            preamble = _draft(
                text,
                0,
                first,
                ChunkType.PREAMBLE,
                label="Preamble",
                parent_key=f"{self.doc_type.value}:preamble",
            )
            if preamble:
                drafts.append(preamble)

        seen: Counter[str] = Counter()
        for i, match in enumerate(matches):
            start = match.start()
            end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
            number = match.group("number")
            seen[number] += 1
            key = f"{self.doc_type.value}:article:{number}"
            if seen[number] > 1:
                key = f"{key}#{seen[number]}"
            drafts.extend(self._article_drafts(text, start, end, number, key))

        return StrategyResult(
            drafts=drafts, strategy=self.name, case_number=self.case_number(text)
        )

    def case_number(self, text: str) -> str | None:
        return None

    def _article_drafts(
        self, text: str, start: int, end: int, number: str, key: str
    ) -> list[ChunkDraft]:
        heading = _heading(text, start)
        markers = list(p.PART_RE.finditer(text, start, end))
        # The heading line itself never opens a part
        markers = [m for m in markers if m.start() > start]

        if len(markers) < 2:
            draft = _draft(
                text,
                start,
                end,
                self.article_type,
                label=article_label(number),
                locator=ChunkLocator(article=number, section_title=heading),
                parent_key=key,
            )
            return [draft] if draft else []

        drafts = []
        for i, marker in enumerate(markers):
            seg_start = start if i == 0 else marker.start()
            seg_end = markers[i + 1].start() if i + 1 < len(markers) else end
            part = marker.group(1)
            draft = _draft(
                text,
                seg_start,
                seg_end,
                self.article_type,
                label=article_label(number, part),
                locator=ChunkLocator(article=number, part=part, section_title=heading),
                parent_key=key,
            )
            if draft:
                drafts.append(draft)
        return drafts


class LegislationStrategy(_ArticleStrategy):
    """Laws, codes, regulations and executive acts split by article."""

    name = "article"


class TreatyStrategy(_ArticleStrategy):
    """International treaties split by article heading lines."""

    name = "treaty"
    header_re = p.TREATY_ARTICLE_RE
    article_type = ChunkType.TREATY_ARTICLE
    preamble_min_chars = 0

    def case_number(self, text: str) -> str | None:
        return extract_treaty_number(text)


class _SectionStrategy(ChunkingStrategy):
    """Shared section splitting for rulings and judgments."""

    section_patterns: tuple[p.SectionPattern, ...] = p.COURT_SECTION_PATTERNS

    def case_number(self, text: str) -> str | None:
        return extract_case_number(text)

    def metadata(self, case_number: str | None, section_type: ChunkType | None) -> ChunkMetadata:
        court_level = COURT_LEVEL_BY_DOC_TYPE.get(self.doc_type)
        return ChunkMetadata(
            document_type=self.doc_type.value,
            court_level=court_level.value if court_level else None,
            case_number=case_number,
            section_type=section_type.value if section_type else None,
        )

    def parent_key(self, boundary: SectionBoundary) -> str:
        return f"{self.doc_type.value}:section:{boundary.pattern.chunk_type.value}"

    def split(self, text: str, limits: ChunkLimits) -> StrategyResult:
        case_number = self.case_number(text)
        boundaries = find_sections(text, self.section_patterns)
        if not boundaries:
            return self.fallback(
                text,
                limits,
                metadata=self.metadata(case_number, None),
                case_number=case_number,
            )

        drafts: list[ChunkDraft] = []
        header = _draft(
            text,
            0,
            boundaries[0].index,
            ChunkType.HEADER,
            label="Header",
            parent_key=f"{self.doc_type.value}:header",
            metadata=self.metadata(case_number, ChunkType.HEADER),
        )
        if header:
            drafts.append(header)

        for i, boundary in enumerate(boundaries):
            end = boundaries[i + 1].index if i + 1 < len(boundaries) else len(text)
            chunk_type = boundary.pattern.chunk_type
            draft = _draft(
                text,
                boundary.index,
                end,
                chunk_type,
                label=boundary.pattern.label,
                locator=ChunkLocator(article=boundary.article, section_title=boundary.heading),
                parent_key=self.parent_key(boundary),
                metadata=self.metadata(case_number, chunk_type),
            )
            if draft:
                drafts.append(draft)

        return StrategyResult(drafts=drafts, strategy=self.name, case_number=case_number)


class CourtDecisionStrategy(_SectionStrategy):
    """Domestic court rulings split by section markers."""

    name = "sections"


class EchrStrategy(_SectionStrategy):
    """European Court of Human Rights judgments."""

    name = "echr"
    section_patterns = p.ECHR_SECTION_PATTERNS

    def case_number(self, text: str) -> str | None:
        return extract_application_number(text)

    def parent_key(self, boundary: SectionBoundary) -> str:
        if boundary.article:
            return f"{self.doc_type.value}:law:article:{boundary.article}"
        return super().parent_key(boundary)
