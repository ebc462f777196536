"""
JSONL export of chunk sets and validation of JSONL payloads.

One self-contained JSON object per chunk, carrying enough document
context to be indexed without joining back to the database.

Dependencies: json (stdlib), pydantic
System role: Interchange format for downstream indexers
"""

from collections.abc import Iterable, Sequence
import json
import re
from typing import Any

from pydantic import BaseModel, Field

from legal_pipeline.models.enums import COURT_DOC_TYPES, ChunkType, DocType

MAX_CHUNK_TEXT_LENGTH = 50_000

COLLECTIONS = frozenset({"legislation", "court_practice", "echr", "treaties", "commentary", "other"})
CHUNK_TYPES = frozenset(t.value for t in ChunkType)

LEGISLATION_DOC_TYPES = frozenset({
    DocType.LAW,
    DocType.CODE,
    DocType.REGULATION,
    DocType.GOVERNMENT_DECREE,
    DocType.PM_DECISION,
})

_ARMENIAN_RE = re.compile(r"[Ա-֏]")
_CYRILLIC_RE = re.compile(r"[А-Яа-яЁё]")
_LATIN_RE = re.compile(r"[A-Za-z]")
LANGUAGE_SAMPLE_CHARS = 5000


class JsonlLineError(BaseModel):
    line: int
    message: str


class JsonlValidationResult(BaseModel):
    valid: bool
    errors: list[JsonlLineError] = Field(default_factory=list)
    records: list[dict[str, Any]] = Field(default_factory=list)


def collection_for(doc_type: DocType | str) -> str:
    """Map a doc_type to its export collection."""
    doc_type = DocType(doc_type)
    if doc_type in LEGISLATION_DOC_TYPES:
        return "legislation"
    if doc_type is DocType.ECHR_JUDGMENT:
        return "echr"
    if doc_type in COURT_DOC_TYPES:
        return "court_practice"
    if doc_type is DocType.INTERNATIONAL_TREATY:
        return "treaties"
    if doc_type is DocType.LEGAL_COMMENTARY:
        return "commentary"
    return "other"


def detect_language(text: str) -> str:
    """Dominant script of the text: hy, ru or en."""
    sample = text[:LANGUAGE_SAMPLE_CHARS]
    counts = {
        "hy": len(_ARMENIAN_RE.findall(sample)),
        "ru": len(_CYRILLIC_RE.findall(sample)),
        "en": len(_LATIN_RE.findall(sample)),
    }
    best = max(counts, key=counts.get)
    return best if counts[best] else "hy"


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(exclude_none=True)
    if hasattr(value, "value"):
        return value.value
    return value


def build_jsonl(
    document: Any,
    chunks: Sequence[Any],
    strategy: str | None = None,
    file_name: str | None = None,
) -> list[str]:
    """
    Serialize a document's chunks to JSONL lines.

    Args:
        document: NormalizedDocument or LegalDocumentModel
        chunks: LegalChunk models or LegalChunkModel rows, in index order
        strategy: Chunking strategy that produced the set
        file_name: Original upload name, if known

    Returns:
        One JSON string per chunk
    """
    doc_type = _plain(document.doc_type)
    collection = collection_for(doc_type)
    language = detect_language(" ".join(c.chunk_text for c in chunks[:5]))
    doc_id = str(document.id) if getattr(document, "id", None) else None

    lines = []
    for chunk in chunks:
        chunk_id = f"{doc_id}:{chunk.chunk_index}" if doc_id else chunk.chunk_hash
        metadata = {
            "doc_id": doc_id,
            "category": _plain(document.branch),
            "chunk_hash": chunk.chunk_hash,
            "chunker_version": chunk.chunker_version,
            "document_number": getattr(document, "document_number", None),
            "date_adopted": getattr(document, "date_adopted", None),
            "source_name": getattr(document, "source_name", None),
        }
        # ORM rows expose the column as chunk_metadata; .metadata is the table MetaData there
        raw_meta = chunk.chunk_metadata if hasattr(chunk, "chunk_metadata") else chunk.metadata
        chunk_meta = _plain(raw_meta)
        if chunk_meta:
            metadata.update(chunk_meta)

        record = {
            "id": chunk_id,
            "jurisdiction": document.jurisdiction,
            "collection": collection,
            "doc_type": doc_type,
            "title": document.title,
            "source": {
                "type": getattr(document, "source_name", None) or "upload",
                "uri": document.source_url,
                "file_name": file_name,
            },
            "language": language,
            "chunk": {
                "index": chunk.chunk_index,
                "total": len(chunks),
                "strategy": strategy,
                "type": _plain(chunk.chunk_type),
                "text": chunk.chunk_text,
                "char_start": chunk.char_start,
                "char_end": chunk.char_end,
                "label": chunk.label,
                "locator": _plain(chunk.locator),
            },
            "metadata": metadata,
        }
        lines.append(json.dumps(record, ensure_ascii=False))
    return lines


def _record_errors(record: dict[str, Any]) -> list[str]:
    errors = []
    chunk = record.get("chunk") if isinstance(record.get("chunk"), dict) else {}

    text = chunk.get("text", record.get("chunk_text"))
    if not isinstance(text, str) or not text:
        errors.append("Missing or invalid required field: chunk.text")
    elif len(text) > MAX_CHUNK_TEXT_LENGTH:
        errors.append(f"chunk text exceeds max length ({len(text)} > {MAX_CHUNK_TEXT_LENGTH})")

    collection = record.get("collection")
    if collection is not None and collection not in COLLECTIONS:
        errors.append(f"Invalid collection: {collection}")

    chunk_type = chunk.get("type", record.get("chunk_type"))
    if chunk_type is not None and chunk_type not in CHUNK_TYPES:
        errors.append(f"Invalid chunk_type: {chunk_type}")
    return errors


def validate_jsonl(lines: Iterable[str]) -> JsonlValidationResult:
    """
    Validate JSONL lines; blank lines are skipped.

    Accepts both the nested chunk.text layout and the legacy flat
    chunk_text layout.
    """
    errors: list[JsonlLineError] = []
    records: list[dict[str, Any]] = []

    for number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue
        try:
            parsed = json.loads(line)
        except json.JSONDecodeError:
            errors.append(JsonlLineError(line=number, message="Invalid JSON"))
            continue
        if not isinstance(parsed, dict):
            errors.append(JsonlLineError(line=number, message="Must be a JSON object"))
            continue

        errors.extend(JsonlLineError(line=number, message=m) for m in _record_errors(parsed))
        records.append(parsed)

    return JsonlValidationResult(valid=not errors, errors=errors, records=records)
