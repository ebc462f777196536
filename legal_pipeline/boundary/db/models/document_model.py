"""
Legal document ORM model.

Stores the normalized document and the version of the chunk set
currently attached to it.

Dependencies: sqlalchemy, legal_pipeline.boundary.db.base
System role: Canonical document storage
"""

import enum

from sqlalchemy import Boolean, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from legal_pipeline.boundary.db.base import Base, JsonValue, TimestampMixin, UUIDMixin
from legal_pipeline.models.enums import Branch, DocType


class EmbeddingStatus(str, enum.Enum):
    """
    Embedding state of the current chunk set.

    PENDING: Chunks exist without vectors
    DONE: Every current chunk has a vector
    FAILED: Last embedding attempt failed
    SKIPPED: Nothing to embed
    """

    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"
    SKIPPED = "skipped"


class LegalDocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Normalized legal document.

    Attributes:
        source_hash: SHA-256 of the first 10,000 raw characters, unique
        content_text: Canonical text; every chunk offset points into it
        court_meta: Court type, name, case number and outcome for rulings
        ingestion: Pipeline id, timestamp and schema version
        chunker_version: Chunker that produced the current chunk set
        chunk_set_version: sha256(content_text + chunker_version) of that set
        embedding_status: Embedding state of the current chunk set
    """

    __tablename__ = "legal_documents"

    doc_type: Mapped[DocType] = mapped_column(
        Enum(DocType, native_enum=False),
        nullable=False,
        index=True,
    )
    jurisdiction: Mapped[str] = mapped_column(String(8), nullable=False, default="AM")
    branch: Mapped[Branch] = mapped_column(
        Enum(Branch, native_enum=False),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    title_alt: Mapped[str | None] = mapped_column(Text, nullable=True)
    content_text: Mapped[str] = mapped_column(Text, nullable=False)
    document_number: Mapped[str | None] = mapped_column(String(128), nullable=True)
    date_adopted: Mapped[str | None] = mapped_column(String(10), nullable=True)
    date_effective: Mapped[str | None] = mapped_column(String(10), nullable=True)
    source_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    source_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
    )
    court_meta: Mapped[dict | None] = mapped_column(JsonValue, nullable=True)
    ingestion: Mapped[dict] = mapped_column(JsonValue, nullable=False, default=dict)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    chunker_version: Mapped[str | None] = mapped_column(String(32), nullable=True)
    chunk_set_version: Mapped[str | None] = mapped_column(String(64), nullable=True)
    embedding_status: Mapped[EmbeddingStatus] = mapped_column(
        Enum(EmbeddingStatus, native_enum=False),
        nullable=False,
        default=EmbeddingStatus.PENDING,
    )
