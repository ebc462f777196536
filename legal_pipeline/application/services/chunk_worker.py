"""
Chunk worker.

Drains chunk jobs: re-chunks each document with the current chunker,
swaps in the new chunk set atomically and queues embedding.

Dependencies: sqlalchemy, legal_pipeline.core, legal_pipeline.boundary
System role: Background (re)chunking of stored documents
"""

from collections.abc import Callable
from datetime import datetime

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from legal_pipeline.application.services.worker_base import JobOutcome, LeasedJobWorker
from legal_pipeline.boundary.db.base import utcnow
from legal_pipeline.boundary.db.CRUD import chunk_crud, document_crud, job_crud
from legal_pipeline.boundary.db.models import (
    EmbeddingStatus,
    JobType,
    LegalDocumentModel,
    PipelineJobModel,
)
from legal_pipeline.configs.chunking import ChunkingSettings
from legal_pipeline.configs.jobs import JobSettings
from legal_pipeline.core.chunking import (
    CHUNKER_VERSION,
    ChunkLimits,
    chunk_document,
    compute_chunk_set_version,
)
from legal_pipeline.core.exceptions import DocumentNotFoundError, QAValidationError
from legal_pipeline.core.qa import validate_chunks
from legal_pipeline.models.chunk import ChunkInput
from legal_pipeline.observability import get_logger

logger = get_logger(__name__)


class ChunkWorkerReport(BaseModel):
    picked: int
    processed_ok: int
    processed_failed: int
    total_chunks_inserted: int
    pending_remaining: int
    duration_ms: int
    chunker_version: str
    recovered: int = 0
    errors: list[str] = Field(default_factory=list)


class ChunkWorker(LeasedJobWorker):
    """Lease-based chunk job processor."""

    job_type = JobType.CHUNK
    worker_prefix = "chunk"

    def __init__(
        self,
        session_factory: async_sessionmaker,
        settings: JobSettings,
        chunking: ChunkingSettings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        super().__init__(session_factory, settings, clock)
        self.limits = ChunkLimits.from_settings(chunking or ChunkingSettings())

    @property
    def lease_seconds(self) -> int:
        return self.settings.chunk_lease_seconds

    async def _store_versions(
        self,
        session: AsyncSession,
        document: LegalDocumentModel,
        chunk_set_version: str,
        embedding_status: EmbeddingStatus,
    ) -> None:
        await chunk_crud.delete_other_versions(session, document.id, chunk_set_version)
        await document_crud.update_by_id(
            session,
            document.id,
            chunker_version=CHUNKER_VERSION,
            chunk_set_version=chunk_set_version,
            embedding_status=embedding_status,
        )

    async def _process(self, session: AsyncSession, job: PipelineJobModel) -> JobOutcome:
        document = await document_crud.get_by_id(session, job.document_id)
        if document is None:
            raise DocumentNotFoundError(str(job.document_id))

        content = document.content_text[: self.settings.chunk_max_input_chars]
        chunk_set_version = compute_chunk_set_version(content)

        if len(content.strip()) < self.settings.chunk_min_content_chars:
            await self._store_versions(session, document, chunk_set_version, EmbeddingStatus.SKIPPED)
            note = "content too short to chunk"
            await self._resolve_success(session, job, note)
            return JobOutcome(ok=True, note=note)

        if document.chunk_set_version == chunk_set_version:
            existing = await chunk_crud.count_by_document(session, document.id, chunk_set_version)
            if existing > 0:
                note = "chunk set unchanged"
                await self._resolve_success(session, job, note)
                return JobOutcome(ok=True, note=note)

        result = chunk_document(
            ChunkInput(doc_type=document.doc_type, content_text=content, title=document.title),
            self.limits,
        )
        if not result.chunks:
            await self._store_versions(session, document, chunk_set_version, EmbeddingStatus.SKIPPED)
            note = "no chunks produced"
            await self._resolve_success(session, job, note)
            return JobOutcome(ok=True, note=note)

        qa = validate_chunks(
            content,
            result.chunks,
            max_chars=self.limits.max_chars,
            max_overlap=self.limits.overlap,
        )
        if not qa.ok:
            raise QAValidationError(qa.errors, document_id=str(document.id))

        inserted = 0
        batch_size = self.settings.chunk_insert_batch_size
        for offset in range(0, len(result.chunks), batch_size):
            rows = [
                chunk_crud.to_row(document.id, chunk, chunk_set_version)
                for chunk in result.chunks[offset:offset + batch_size]
            ]
            inserted += await chunk_crud.bulk_insert(session, rows)

        await self._store_versions(session, document, chunk_set_version, EmbeddingStatus.PENDING)
        await job_crud.enqueue(
            session,
            [document.id],
            JobType.EMBED,
            source_table=job.source_table,
            max_attempts=self.settings.max_attempts,
        )
        await self._resolve_success(session, job)
        logger.info(
            f"{__name__}:_process - Chunked document {document.id}: "
            f"{inserted} chunks, strategy={result.strategy}"
        )
        return JobOutcome(ok=True, chunks=inserted)

    async def run(
        self,
        concurrency_docs: int | None = None,
        source_table: str | None = None,
    ) -> ChunkWorkerReport:
        """
        Claim and process up to concurrency_docs chunk jobs.

        Args:
            concurrency_docs: Jobs to claim; clamped to the configured maximum
            source_table: Only claim jobs for this source table

        Returns:
            ChunkWorkerReport for the invocation
        """
        limit = concurrency_docs or self.settings.chunk_default_concurrency
        limit = max(1, min(limit, self.settings.chunk_max_concurrency))
        summary = await self.drain(limit, source_table)
        return ChunkWorkerReport(
            picked=summary.picked,
            processed_ok=summary.processed_ok,
            processed_failed=summary.processed_failed,
            total_chunks_inserted=summary.chunks,
            pending_remaining=summary.pending_remaining,
            duration_ms=summary.duration_ms,
            chunker_version=CHUNKER_VERSION,
            recovered=summary.recovered,
            errors=summary.errors,
        )
