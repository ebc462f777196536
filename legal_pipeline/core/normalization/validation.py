"""
Schema validation for normalized documents.

Accepts either a NormalizedDocument or a plain mapping (for records that
arrive as JSON from import files) and reports every violation found.

Dependencies: legal_pipeline.models
System role: Normalizer output contract
"""

from typing import Any, Mapping

from legal_pipeline.core.normalization.patterns import ISO_DATE_SHAPE_RE
from legal_pipeline.models.document import (
    JURISDICTION,
    SCHEMA_VERSION,
    NormalizedDocument,
    ValidationIssue,
)
from legal_pipeline.models.enums import Branch, CourtType, DocType


def _enum_values(enum_cls) -> set[str]:
    return {member.value for member in enum_cls}


DOC_TYPE_VALUES = _enum_values(DocType)
BRANCH_VALUES = _enum_values(Branch)
COURT_TYPE_VALUES = _enum_values(CourtType)


def validate(doc: NormalizedDocument | Mapping[str, Any]) -> list[ValidationIssue]:
    """
    Validate a normalized document.

    Args:
        doc: Document model or its JSON-shaped dict

    Returns:
        list[ValidationIssue]: Empty when the document is valid
    """
    data = doc.model_dump(mode="json") if isinstance(doc, NormalizedDocument) else dict(doc)
    issues: list[ValidationIssue] = []

    def fail(field: str, message: str) -> None:
        issues.append(ValidationIssue(field=field, message=message))

    if data.get("doc_type") not in DOC_TYPE_VALUES:
        fail("doc_type", f"Invalid doc_type: {data.get('doc_type')}")
    if data.get("jurisdiction") != JURISDICTION:
        fail("jurisdiction", f"Must be '{JURISDICTION}'")
    if data.get("branch") not in BRANCH_VALUES:
        fail("branch", f"Invalid branch: {data.get('branch')}")
    if not (data.get("title") or "").strip():
        fail("title", "Title is required")
    if not (data.get("content_text") or "").strip():
        fail("content_text", "Content text is required")

    for date_field in ("date_adopted", "date_effective"):
        value = data.get(date_field)
        if value and not ISO_DATE_SHAPE_RE.match(str(value)):
            fail(date_field, "Must be YYYY-MM-DD")

    court = data.get("court_meta")
    if court:
        court_type = court.get("court_type")
        if court_type not in COURT_TYPE_VALUES:
            fail("court_meta.court_type", f"Invalid court_type: {court_type}")

    ingestion = data.get("ingestion") or {}
    if ingestion.get("schema_version") != SCHEMA_VERSION:
        fail("ingestion.schema_version", f"Must be '{SCHEMA_VERSION}'")

    return issues
