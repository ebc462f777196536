"""
Normalized document domain model.

Canonical record produced by the normalizer and persisted as a
legal_documents row.

Dependencies: pydantic
System role: Document data structure
"""

from datetime import datetime
import uuid

from pydantic import BaseModel, Field

from legal_pipeline.models.enums import Branch, CourtType, DocType, Outcome

SCHEMA_VERSION = "1.0"
JURISDICTION = "AM"


class NormalizeInput(BaseModel):
    """Raw document handed to the normalizer."""

    file_name: str
    mime_type: str = "text/plain"
    raw_text: str
    source_url: str | None = None


class CourtMeta(BaseModel):
    """Court metadata, present only for court-type documents."""

    court_type: CourtType | None = None
    court_name: str | None = None
    case_number: str | None = None
    outcome: Outcome | None = None


class IngestionMeta(BaseModel):
    """Provenance of a normalization run."""

    pipeline: str = Field(default="normalizer", description="Pipeline that produced the record")
    ingested_at: datetime
    schema_version: str = SCHEMA_VERSION


class NormalizedDocument(BaseModel):
    """Canonical legal document; offsets of every chunk refer to content_text."""

    id: uuid.UUID | None = None
    doc_type: DocType
    jurisdiction: str = JURISDICTION
    branch: Branch
    title: str
    title_alt: str | None = None
    content_text: str
    document_number: str | None = None
    date_adopted: str | None = None
    date_effective: str | None = None
    source_url: str | None = None
    source_name: str | None = None
    court_meta: CourtMeta | None = None
    source_hash: str = Field(description="SHA-256 of the original raw text prefix")
    ingestion: IngestionMeta
    is_active: bool = True


class ValidationIssue(BaseModel):
    """A single field-level schema violation."""

    field: str
    message: str
