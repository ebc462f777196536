"""
Legal chunk CRUD operations.

Dependencies: sqlalchemy, legal_pipeline.boundary.db.models
System role: Chunk-set persistence and vector storage
"""

from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from legal_pipeline.boundary.db.CRUD.base_crud import BaseCRUD
from legal_pipeline.boundary.db.models import LegalChunkModel
from legal_pipeline.models.chunk import LegalChunk


class ChunkCRUD(BaseCRUD[LegalChunkModel]):
    """CRUD operations for LegalChunkModel."""

    def __init__(self) -> None:
        super().__init__(LegalChunkModel)

    @staticmethod
    def to_row(document_id: UUID, chunk: LegalChunk, chunk_set_version: str) -> dict[str, Any]:
        """Column values for one chunk of a chunk set."""
        return {
            "document_id": document_id,
            "chunk_index": chunk.chunk_index,
            "chunk_type": chunk.chunk_type,
            "chunk_text": chunk.chunk_text,
            "char_start": chunk.char_start,
            "char_end": chunk.char_end,
            "label": chunk.label,
            "locator": chunk.locator.model_dump(exclude_none=True) if chunk.locator else None,
            "chunk_hash": chunk.chunk_hash,
            "chunker_version": chunk.chunker_version,
            "chunk_set_version": chunk_set_version,
            "chunk_metadata": chunk.metadata.model_dump(exclude_none=True) if chunk.metadata else None,
        }

    async def get_by_document(
        self,
        session: AsyncSession,
        document_id: UUID,
        chunk_set_version: str | None = None,
    ) -> Sequence[LegalChunkModel]:
        """
        Chunks of a document in index order.

        Args:
            session: Async database session
            document_id: Owning document
            chunk_set_version: Restrict to one chunk set

        Returns:
            Sequence of chunk rows
        """
        stmt = select(LegalChunkModel).where(LegalChunkModel.document_id == document_id)
        if chunk_set_version is not None:
            stmt = stmt.where(LegalChunkModel.chunk_set_version == chunk_set_version)
        stmt = stmt.order_by(LegalChunkModel.chunk_index)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_document(
        self,
        session: AsyncSession,
        document_id: UUID,
        chunk_set_version: str | None = None,
    ) -> int:
        stmt = select(func.count()).select_from(LegalChunkModel).where(
            LegalChunkModel.document_id == document_id
        )
        if chunk_set_version is not None:
            stmt = stmt.where(LegalChunkModel.chunk_set_version == chunk_set_version)
        result = await session.execute(stmt)
        return result.scalar_one()

    async def get_unembedded(
        self,
        session: AsyncSession,
        document_id: UUID,
        chunk_set_version: str | None,
    ) -> Sequence[LegalChunkModel]:
        """Chunks of the given set that still lack a vector."""
        stmt = (
            select(LegalChunkModel)
            .where(
                LegalChunkModel.document_id == document_id,
                LegalChunkModel.chunk_set_version == chunk_set_version,
                LegalChunkModel.embedding.is_(None),
            )
            .order_by(LegalChunkModel.chunk_index)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_other_versions(
        self,
        session: AsyncSession,
        document_id: UUID,
        keep_version: str,
    ) -> int:
        """
        Delete every chunk of the document not in keep_version.

        Returns:
            Number of rows deleted
        """
        stmt = delete(LegalChunkModel).where(
            LegalChunkModel.document_id == document_id,
            LegalChunkModel.chunk_set_version != keep_version,
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    async def set_embedding(
        self,
        session: AsyncSession,
        chunk_id: UUID,
        vector: list[float],
        model_name: str,
        embedded_at: datetime,
    ) -> None:
        stmt = (
            update(LegalChunkModel)
            .where(LegalChunkModel.id == chunk_id)
            .values(embedding=vector, embedding_model=model_name, embedded_at=embedded_at)
        )
        await session.execute(stmt)


chunk_crud = ChunkCRUD()
