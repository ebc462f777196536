"""
Legal chunk ORM model.

One row per chunk of a chunk set. Rows of older chunk sets are removed
once a newer set is in place.

Dependencies: sqlalchemy, legal_pipeline.boundary.db.base
System role: Chunk and vector storage
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from legal_pipeline.boundary.db.base import Base, JsonValue, TimestampMixin, UUIDMixin
from legal_pipeline.models.enums import ChunkType


class LegalChunkModel(Base, UUIDMixin, TimestampMixin):
    """
    Persisted chunk.

    Attributes:
        document_id: Owning legal_documents row
        chunk_set_version: Chunk set this row belongs to
        chunk_metadata: Court context, stored in the "metadata" column
        embedding: Vector as a JSON list of floats, null until embedded

    Constraints:
        (document_id, chunk_set_version, chunk_index) is unique
    """

    __tablename__ = "legal_chunks"
    __table_args__ = (
        UniqueConstraint(
            "document_id",
            "chunk_set_version",
            "chunk_index",
            name="uq_legal_chunks_doc_set_index",
        ),
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("legal_documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)
    chunk_type: Mapped[ChunkType] = mapped_column(
        Enum(ChunkType, native_enum=False),
        nullable=False,
    )
    chunk_text: Mapped[str] = mapped_column(Text, nullable=False)
    char_start: Mapped[int] = mapped_column(Integer, nullable=False)
    char_end: Mapped[int] = mapped_column(Integer, nullable=False)
    label: Mapped[str | None] = mapped_column(String(255), nullable=True)
    locator: Mapped[dict | None] = mapped_column(JsonValue, nullable=True)
    chunk_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    chunker_version: Mapped[str] = mapped_column(String(32), nullable=False)
    chunk_set_version: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    chunk_metadata: Mapped[dict | None] = mapped_column("metadata", JsonValue, nullable=True)

    embedding: Mapped[list | None] = mapped_column(JsonValue, nullable=True)
    embedding_model: Mapped[str | None] = mapped_column(String(128), nullable=True)
    embedded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
