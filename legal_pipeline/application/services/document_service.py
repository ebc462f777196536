"""
Document service.

Read-side operations over stored documents: lookup, JSONL export of the
current chunk set and chunk-set audits.

Dependencies: sqlalchemy, legal_pipeline.core.export, legal_pipeline.core.qa
System role: Document read and export orchestration
"""

from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from legal_pipeline.boundary.db.CRUD import chunk_crud, document_crud
from legal_pipeline.boundary.db.models import LegalDocumentModel
from legal_pipeline.core.chunking import STRATEGY_TABLE
from legal_pipeline.core.exceptions import DocumentNotFoundError
from legal_pipeline.core.export import build_jsonl
from legal_pipeline.core.qa import ChunkMetrics, compute_chunk_metrics


class AuditReport(BaseModel):
    document_id: UUID
    doc_type: str
    chunker_version: str | None
    chunk_set_version: str | None
    embedding_status: str
    metrics: ChunkMetrics


class DocumentService:
    """
    Document read service.

    Only the document's current chunk set is exported or audited; rows
    of superseded sets are ignored.
    """

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize document service.

        Args:
            db: AsyncSession for database operations
        """
        self.db = db

    async def get_document(self, document_id: UUID) -> LegalDocumentModel:
        """
        Fetch a document or fail.

        Raises:
            DocumentNotFoundError: No document with this id
        """
        document = await document_crud.get_by_id(self.db, document_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        return document

    async def export_jsonl(self, document_id: UUID) -> list[str]:
        """
        Serialize the current chunk set as JSONL lines.

        Args:
            document_id: Document UUID

        Returns:
            One JSON string per chunk, in index order
        """
        document = await self.get_document(document_id)
        chunks = await chunk_crud.get_by_document(self.db, document.id, document.chunk_set_version)
        strategy = STRATEGY_TABLE[document.doc_type].name if chunks else None
        return build_jsonl(document, chunks, strategy=strategy)

    async def audit(self, document_id: UUID) -> AuditReport:
        """Coverage, overlap and integrity metrics of the current chunk set."""
        document = await self.get_document(document_id)
        chunks = await chunk_crud.get_by_document(self.db, document.id, document.chunk_set_version)
        return AuditReport(
            document_id=document.id,
            doc_type=document.doc_type.value,
            chunker_version=document.chunker_version,
            chunk_set_version=document.chunk_set_version,
            embedding_status=document.embedding_status.value,
            metrics=compute_chunk_metrics(len(document.content_text), chunks),
        )
