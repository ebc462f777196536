"""
Chunk domain models.

Represents addressable slices of a document's content_text produced by
the structural chunker.

Dependencies: pydantic
System role: Chunk data structures
"""

from pydantic import BaseModel, Field

from legal_pipeline.models.enums import ChunkType, DocType


class ChunkInput(BaseModel):
    """Minimal document view consumed by the chunker."""

    doc_type: DocType
    content_text: str
    title: str | None = None


class ChunkLocator(BaseModel):
    """Structured position of a chunk inside the document."""

    article: str | None = None
    part: str | None = None
    section_title: str | None = None


class ChunkMetadata(BaseModel):
    """Document-level context copied onto court and ECHR chunks."""

    document_type: str | None = None
    court_level: str | None = None
    case_number: str | None = None
    section_type: str | None = None


class LegalChunk(BaseModel):
    """A contiguous slice of content_text."""

    chunk_index: int
    chunk_type: ChunkType
    chunk_text: str
    char_start: int
    char_end: int
    label: str | None = None
    locator: ChunkLocator | None = None
    chunk_hash: str = Field(description="SHA-256 hex of chunk_text")
    chunker_version: str
    metadata: ChunkMetadata | None = None


class ChunkResult(BaseModel):
    """Output of chunk_document."""

    chunks: list[LegalChunk]
    strategy: str
    case_number: str | None = None
