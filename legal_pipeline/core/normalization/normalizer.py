"""
Document normalizer.

Turns raw extracted text into a canonical NormalizedDocument: hashes the
original input, cleans it, classifies doc_type and branch with ordered
deterministic detectors, and extracts dates, numbers and court metadata.

Dependencies: hashlib (stdlib), legal_pipeline.core.preprocessing
System role: Second stage of the ingestion pipeline
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
import hashlib
from urllib.parse import urlparse

from legal_pipeline.core.normalization import patterns as p
from legal_pipeline.core.normalization.identifiers import (
    extract_act_number,
    extract_case_number,
    extract_first_date,
)
from legal_pipeline.core.normalization.validation import validate
from legal_pipeline.core.preprocessing import PreprocessResult, preprocess
from legal_pipeline.models.document import (
    CourtMeta,
    IngestionMeta,
    NormalizedDocument,
    NormalizeInput,
    ValidationIssue,
)
from legal_pipeline.models.enums import (
    COURT_DOC_TYPES,
    Branch,
    CourtType,
    DocType,
    Outcome,
)

HASH_PREFIX_CHARS = 10_000
HEADER_WINDOW = 3000
BRANCH_WINDOW = 5000
OUTCOME_WINDOW = 5000
COURT_NAME_WINDOW = 2000
TITLE_MAX_CHARS = 500
PIPELINE_NAME = "legal-document-normalizer"

COURT_TYPE_BY_DOC_TYPE: dict[DocType, CourtType] = {
    DocType.ECHR_JUDGMENT: CourtType.ECHR,
    DocType.CONSTITUTIONAL_COURT: CourtType.CONSTITUTIONAL,
    DocType.CASSATION_RULING: CourtType.CASSATION,
    DocType.APPEAL_RULING: CourtType.APPEAL,
    DocType.FIRST_INSTANCE_RULING: CourtType.FIRST_INSTANCE,
}


@dataclass
class NormalizeOptions:
    """Overrides for a single normalization run."""

    force_doc_type: DocType | None = None
    source_name: str | None = None
    skip_preprocess: bool = False


@dataclass
class NormalizeResult:
    document: NormalizedDocument
    preprocess: PreprocessResult
    validation_errors: list[ValidationIssue] = field(default_factory=list)


def compute_source_hash(raw_text: str) -> str:
    """SHA-256 hex digest of the first 10,000 characters of the raw text."""
    prefix = raw_text[:HASH_PREFIX_CHARS]
    return hashlib.sha256(prefix.encode("utf-8")).hexdigest()


def _first_line(text: str) -> str:
    for line in text.split("\n"):
        if line.strip():
            return line.strip()
    return ""


def detect_doc_type(file_name: str, text: str) -> DocType:
    """
    Classify a document from its file name and opening text.

    Court detectors run before act detectors so that a ruling that cites
    a code is not classified as the code itself.
    """
    fn = file_name.lower()
    header = text[:HEADER_WINDOW]
    title = _first_line(text)
    has_court_word = bool(p.COURT_WORD_RE.search(header))

    if p.ECHR_RE.search(header) or any(t in fn for t in ("echr", "mied", "hudoc")):
        return DocType.ECHR_JUDGMENT
    if p.CONSTITUTIONAL_RE.search(header) and has_court_word:
        return DocType.CONSTITUTIONAL_COURT
    if p.CASSATION_RE.search(header) or "cassation" in fn:
        return DocType.CASSATION_RULING
    if p.APPEAL_RE.search(header) or "appeal" in fn:
        return DocType.APPEAL_RULING
    if p.FIRST_INSTANCE_RE.search(header) and has_court_word:
        return DocType.FIRST_INSTANCE_RULING
    if has_court_word and extract_case_number(text):
        return DocType.COURT_DECISION

    if p.TREATY_RE.search(header) or p.TREATY_TITLE_RE.search(title) or "treaty" in fn:
        return DocType.INTERNATIONAL_TREATY
    if p.GOVERNMENT_RE.search(header) or "government" in fn:
        return DocType.GOVERNMENT_DECREE
    if p.PM_RE.search(header) or "pm_decision" in fn:
        return DocType.PM_DECISION
    if p.REGULATION_RE.search(title) or "regulation" in fn:
        return DocType.REGULATION
    if p.COMMENTARY_RE.search(title) or "commentary" in fn:
        return DocType.LEGAL_COMMENTARY
    if p.CODE_RE.search(header) or "code" in fn or "orensgirq" in fn:
        return DocType.CODE
    if p.LAW_RE.search(header) or "law" in fn or "orenq" in fn:
        return DocType.LAW

    return DocType.OTHER


def detect_branch(text: str, doc_type: DocType) -> Branch:
    if doc_type == DocType.ECHR_JUDGMENT:
        return Branch.ECHR
    if doc_type == DocType.CONSTITUTIONAL_COURT:
        return Branch.CONSTITUTIONAL
    if doc_type == DocType.INTERNATIONAL_TREATY:
        return Branch.INTERNATIONAL

    window = text[:BRANCH_WINDOW]
    for branch, pattern in p.BRANCH_PATTERNS:
        if pattern.search(window):
            return Branch(branch)
    return Branch.OTHER


def detect_court_type(text: str, doc_type: DocType) -> CourtType:
    """Court level from the doc type, falling back to header keywords."""
    if doc_type in COURT_TYPE_BY_DOC_TYPE:
        return COURT_TYPE_BY_DOC_TYPE[doc_type]
    header = text[:HEADER_WINDOW]
    if p.CASSATION_RE.search(header):
        return CourtType.CASSATION
    if p.APPEAL_RE.search(header):
        return CourtType.APPEAL
    return CourtType.FIRST_INSTANCE


def detect_court_name(text: str) -> str | None:
    for line in text[:COURT_NAME_WINDOW].split("\n"):
        if p.COURT_WORD_RE.search(line):
            return line.strip()[:200]
    return None


def detect_outcome(text: str) -> Outcome | None:
    """Disposition from the last 5,000 characters; partial outranks granted."""
    tail = text[-OUTCOME_WINDOW:]
    for outcome, pattern in p.OUTCOME_PATTERNS:
        if pattern.search(tail):
            return Outcome(outcome)
    return None


def extract_title(text: str) -> str:
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    if not lines:
        return "Untitled"
    title = lines[0]
    if len(title) < 10 and len(lines) > 1:
        title = " ".join(lines[:3])
    return title[:TITLE_MAX_CHARS]


def detect_source_name(source_url: str | None) -> str | None:
    if not source_url:
        return None
    host = (urlparse(source_url).hostname or "").lower()
    for suffix, name in p.SOURCE_HOSTS:
        if host == suffix or host.endswith("." + suffix):
            return name
    return None


def _is_html(mime_type: str) -> bool:
    return "html" in (mime_type or "").lower()


def normalize(
    data: NormalizeInput,
    options: NormalizeOptions | None = None,
    now: datetime | None = None,
) -> NormalizeResult:
    """
    Normalize a raw document.

    Args:
        data: File name, MIME type, raw text and optional source URL
        options: Optional overrides (forced doc type, source name, skip cleaning)
        now: Ingestion timestamp; defaults to the current UTC time

    Returns:
        NormalizeResult: the document, the preprocessing report and any
        schema validation issues
    """
    options = options or NormalizeOptions()
    source_hash = compute_source_hash(data.raw_text)

    if options.skip_preprocess:
        cleaned = PreprocessResult(cleaned=data.raw_text)
    else:
        cleaned = preprocess(data.raw_text, is_html=_is_html(data.mime_type))
    content = cleaned.cleaned

    doc_type = options.force_doc_type or detect_doc_type(data.file_name, content)
    header = content[:HEADER_WINDOW]

    court_meta = None
    if doc_type in COURT_DOC_TYPES:
        court_meta = CourtMeta(
            court_type=detect_court_type(content, doc_type),
            court_name=detect_court_name(content),
            case_number=extract_case_number(content),
            outcome=detect_outcome(content),
        )

    document = NormalizedDocument(
        doc_type=doc_type,
        branch=detect_branch(content, doc_type),
        title=extract_title(content),
        content_text=content,
        document_number=extract_act_number(header),
        date_adopted=extract_first_date(header),
        source_url=data.source_url,
        source_name=options.source_name or detect_source_name(data.source_url),
        court_meta=court_meta,
        source_hash=source_hash,
        ingestion=IngestionMeta(
            pipeline=PIPELINE_NAME,
            ingested_at=now or datetime.now(timezone.utc),
        ),
    )

    return NormalizeResult(
        document=document,
        preprocess=cleaned,
        validation_errors=validate(document),
    )
