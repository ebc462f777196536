"""
Legal document CRUD operations.

Dependencies: sqlalchemy, legal_pipeline.boundary.db.models
System role: Document persistence and chunk-set bookkeeping queries
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from legal_pipeline.boundary.db.CRUD.base_crud import BaseCRUD
from legal_pipeline.boundary.db.models import LegalChunkModel, LegalDocumentModel


class DocumentCRUD(BaseCRUD[LegalDocumentModel]):
    """CRUD operations for LegalDocumentModel."""

    def __init__(self) -> None:
        super().__init__(LegalDocumentModel)

    async def get_by_source_hash(
        self,
        session: AsyncSession,
        source_hash: str,
    ) -> LegalDocumentModel | None:
        """
        Retrieve the document ingested from identical raw text.

        Args:
            session: Async database session
            source_hash: SHA-256 of the raw text prefix

        Returns:
            LegalDocumentModel if found, None otherwise
        """
        stmt = select(LegalDocumentModel).where(LegalDocumentModel.source_hash == source_hash)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_with_chunks(self, session: AsyncSession, id: UUID) -> bool:
        """
        Delete a document and its chunks.

        Chunks are deleted explicitly so the operation does not depend on
        the backend enforcing ON DELETE CASCADE.
        """
        await session.execute(delete(LegalChunkModel).where(LegalChunkModel.document_id == id))
        return await self.delete_by_id(session, id)

    async def get_ids_missing_chunk_set(
        self,
        session: AsyncSession,
        chunker_version: str,
        limit: int | None = None,
    ) -> Sequence[UUID]:
        """
        Active documents without a chunk set from the given chunker version.

        Args:
            session: Async database session
            chunker_version: Current chunker version
            limit: Maximum number of ids to return

        Returns:
            Document ids needing a chunk job
        """
        stmt = select(LegalDocumentModel.id).where(
            LegalDocumentModel.is_active.is_(True),
            or_(
                LegalDocumentModel.chunk_set_version.is_(None),
                LegalDocumentModel.chunker_version.is_(None),
                LegalDocumentModel.chunker_version != chunker_version,
            ),
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_ids_missing_embeddings(
        self,
        session: AsyncSession,
        limit: int | None = None,
    ) -> Sequence[UUID]:
        """Documents whose current chunk set has chunks without a vector."""
        unembedded = exists().where(
            LegalChunkModel.document_id == LegalDocumentModel.id,
            LegalChunkModel.chunk_set_version == LegalDocumentModel.chunk_set_version,
            LegalChunkModel.embedding.is_(None),
        )
        stmt = select(LegalDocumentModel.id).where(
            LegalDocumentModel.is_active.is_(True),
            unembedded,
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()


document_crud = DocumentCRUD()
