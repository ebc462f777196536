"""
Ingestion service orchestrator.

Runs normalize -> chunk -> QA gate -> dedup -> persist for one raw
document, and the same per item for bulk payloads.

Dependencies: sqlalchemy, legal_pipeline.core, legal_pipeline.boundary
System role: Synchronous ingestion entry point behind POST /ingest
"""

import asyncio
from enum import Enum
import logging
from uuid import UUID

from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from legal_pipeline.boundary.db.CRUD import chunk_crud, document_crud, job_crud
from legal_pipeline.boundary.db.models import EmbeddingStatus, JobType, LegalDocumentModel
from legal_pipeline.boundary.notifications import TableRendererNotifier
from legal_pipeline.configs import Settings, get_settings
from legal_pipeline.core.chunking import (
    CHUNKER_VERSION,
    ChunkLimits,
    chunk_document,
    compute_chunk_set_version,
)
from legal_pipeline.core.exceptions import (
    InputValidationError,
    LegalPipelineException,
    NormalizationValidationError,
    PayloadTooLargeError,
    PersistenceError,
    QAValidationError,
)
from legal_pipeline.core.ingestion import parse_input
from legal_pipeline.core.normalization import normalize
from legal_pipeline.core.qa import validate_chunks
from legal_pipeline.models.chunk import ChunkInput, LegalChunk
from legal_pipeline.models.document import NormalizedDocument, NormalizeInput
from legal_pipeline.models.enums import ChunkType
from legal_pipeline.observability import get_logger, log_exception_with_context, log_with_context

logger = get_logger(__name__)

# The event loop holds tasks weakly; in-flight notifications are kept here
_pending_notifications: set[asyncio.Task] = set()


def _notification_done(task: asyncio.Task) -> None:
    _pending_notifications.discard(task)
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        log_exception_with_context(logger, "Table renderer notification crashed", error)


async def drain_notifications() -> None:
    """Wait for table renderer notifications still in flight."""
    if _pending_notifications:
        await asyncio.gather(*_pending_notifications, return_exceptions=True)


class DedupMode(str, Enum):
    """What to do when identical raw text was already ingested."""

    SKIP = "skip"
    UPSERT = "upsert"


class IngestCommand(BaseModel):
    file_name: str
    mime_type: str = "text/plain"
    raw_text: str
    source_url: str | None = None
    dedup_mode: DedupMode = DedupMode.SKIP


class IngestResult(BaseModel):
    document_id: UUID
    chunks_inserted: int
    deduplicated: bool = False
    chunker_version: str
    chunk_set_version: str | None = None
    doc_type: str | None = None
    strategy: str | None = None


class BulkItemResult(BaseModel):
    file_name: str
    result: IngestResult | None = None
    error: str | None = None


class BulkIngestResult(BaseModel):
    source_type: str
    items: list[BulkItemResult] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    succeeded: int = 0
    failed: int = 0


def _document_row(doc: NormalizedDocument) -> dict:
    row = doc.model_dump(exclude={"id", "court_meta", "ingestion"})
    row["court_meta"] = doc.court_meta.model_dump(mode="json") if doc.court_meta else None
    row["ingestion"] = doc.ingestion.model_dump(mode="json")
    return row


class IngestionService:
    """
    Ingestion orchestrator.

    Validation and QA failures raise before anything is written. Once the
    document row is committed, any failure while writing its chunks
    removes the document again.
    """

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings | None = None,
        notifier: TableRendererNotifier | None = None,
    ) -> None:
        """
        Initialize ingestion service.

        Args:
            db: AsyncSession for persistence
            settings: Application settings (defaults to get_settings())
            notifier: Table renderer notifier; built from settings if None
        """
        self.db = db
        self.settings = settings or get_settings()
        self.notifier = notifier or TableRendererNotifier(
            self.settings.notifications,
            internal_key=self.settings.security.internal_ingest_key,
        )
        self.limits = ChunkLimits.from_settings(self.settings.chunking)

    def _check_input(self, command: IngestCommand) -> None:
        if not command.file_name.strip():
            raise InputValidationError("fileName is required", field="fileName")
        if not command.raw_text.strip():
            raise InputValidationError("rawText is required", field="rawText")
        limit = self.settings.chunking.max_ingest_chars
        if len(command.raw_text) > limit:
            raise PayloadTooLargeError(len(command.raw_text), limit)

    def _prepare(self, command: IngestCommand) -> tuple[NormalizedDocument, list[LegalChunk], str]:
        normalized = normalize(
            NormalizeInput(
                file_name=command.file_name,
                mime_type=command.mime_type,
                raw_text=command.raw_text,
                source_url=command.source_url,
            )
        )
        if normalized.validation_errors:
            raise NormalizationValidationError(
                [issue.model_dump() for issue in normalized.validation_errors]
            )

        doc = normalized.document
        chunk_result = chunk_document(
            ChunkInput(doc_type=doc.doc_type, content_text=doc.content_text, title=doc.title),
            self.limits,
        )
        qa = validate_chunks(
            doc.content_text,
            chunk_result.chunks,
            max_errors=self.settings.chunking.qa_max_errors,
            max_chars=self.limits.max_chars,
            max_overlap=self.limits.overlap,
        )
        if not qa.ok:
            raise QAValidationError(qa.errors)
        return doc, chunk_result.chunks, chunk_result.strategy

    async def _insert_document(
        self,
        doc: NormalizedDocument,
        chunk_set_version: str,
        has_chunks: bool,
    ) -> LegalDocumentModel:
        row = await document_crud.create(
            self.db,
            **_document_row(doc),
            chunker_version=CHUNKER_VERSION,
            chunk_set_version=chunk_set_version,
            embedding_status=EmbeddingStatus.PENDING if has_chunks else EmbeddingStatus.SKIPPED,
        )
        await self.db.commit()
        return row

    async def _insert_chunks(
        self,
        document_id: UUID,
        chunks: list[LegalChunk],
        chunk_set_version: str,
    ) -> int:
        batch_size = self.settings.chunking.insert_batch_size
        inserted = 0
        for offset in range(0, len(chunks), batch_size):
            rows = [
                chunk_crud.to_row(document_id, chunk, chunk_set_version)
                for chunk in chunks[offset:offset + batch_size]
            ]
            inserted += await chunk_crud.bulk_insert(self.db, rows)
        if chunks:
            await job_crud.enqueue(
                self.db,
                [document_id],
                JobType.EMBED,
                source_table=self.settings.jobs.default_source_table,
                max_attempts=self.settings.jobs.max_attempts,
            )
        await self.db.commit()
        return inserted

    async def _discard(self, document_id: UUID) -> None:
        await self.db.rollback()
        try:
            await document_crud.delete_with_chunks(self.db, document_id)
            await self.db.commit()
        except SQLAlchemyError as cleanup_error:
            await self.db.rollback()
            log_exception_with_context(
                logger,
                "Cleanup of partially ingested document failed",
                cleanup_error,
                document_id=str(document_id),
            )

    def _schedule_notification(self, document_id: UUID, chunk_indices: list[int]) -> asyncio.Task:
        """Notify the table renderer without holding up the ingest response."""
        task = asyncio.create_task(self.notifier.notify(document_id, chunk_indices))
        _pending_notifications.add(task)
        task.add_done_callback(_notification_done)
        return task

    async def ingest(self, command: IngestCommand) -> IngestResult:
        """
        Ingest one raw document.

        Args:
            command: Raw text, file name and dedup policy

        Returns:
            IngestResult with the document id and number of chunks stored

        Raises:
            InputValidationError: Missing fileName or rawText
            PayloadTooLargeError: rawText over the configured limit
            NormalizationValidationError: Normalized document is invalid
            QAValidationError: Chunk set violates a structural invariant
            PersistenceError: Document or chunk writes failed
        """
        self._check_input(command)
        doc, chunks, strategy = self._prepare(command)
        chunk_set_version = compute_chunk_set_version(doc.content_text)

        existing = await document_crud.get_by_source_hash(self.db, doc.source_hash)
        if existing is not None:
            if command.dedup_mode is DedupMode.SKIP:
                log_with_context(
                    logger,
                    logging.INFO,
                    "Duplicate ingest skipped",
                    document_id=str(existing.id),
                    file_name=command.file_name,
                )
                return IngestResult(
                    document_id=existing.id,
                    chunks_inserted=0,
                    deduplicated=True,
                    chunker_version=existing.chunker_version or CHUNKER_VERSION,
                    chunk_set_version=existing.chunk_set_version,
                    doc_type=existing.doc_type.value,
                )
            try:
                await document_crud.delete_with_chunks(self.db, existing.id)
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                raise PersistenceError(
                    f"Failed to replace existing document: {e}",
                    document_id=str(existing.id),
                ) from e

        try:
            document = await self._insert_document(doc, chunk_set_version, bool(chunks))
        except IntegrityError as e:
            # A concurrent ingest of the same text won the unique source_hash
            await self.db.rollback()
            winner = await document_crud.get_by_source_hash(self.db, doc.source_hash)
            if winner is None:
                raise PersistenceError(f"Failed to insert document: {e}") from e
            return IngestResult(
                document_id=winner.id,
                chunks_inserted=0,
                deduplicated=True,
                chunker_version=winner.chunker_version or CHUNKER_VERSION,
                chunk_set_version=winner.chunk_set_version,
                doc_type=winner.doc_type.value,
            )
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"Failed to insert document: {e}") from e

        try:
            inserted = await self._insert_chunks(document.id, chunks, chunk_set_version)
        except SQLAlchemyError as e:
            await self._discard(document.id)
            raise PersistenceError(
                f"Failed to insert chunks: {e}",
                document_id=str(document.id),
            ) from e

        table_indices = [c.chunk_index for c in chunks if c.chunk_type is ChunkType.TABLE]
        if table_indices:
            self._schedule_notification(document.id, table_indices)

        log_with_context(
            logger,
            logging.INFO,
            "Document ingested",
            document_id=str(document.id),
            doc_type=doc.doc_type.value,
            strategy=strategy,
            chunks=inserted,
        )
        return IngestResult(
            document_id=document.id,
            chunks_inserted=inserted,
            chunker_version=CHUNKER_VERSION,
            chunk_set_version=chunk_set_version,
            doc_type=doc.doc_type.value,
            strategy=strategy,
        )

    async def ingest_bulk(
        self,
        payload: str,
        file_name: str = "input.txt",
        mime_type: str = "text/plain",
        dedup_mode: DedupMode = DedupMode.SKIP,
        source_url: str | None = None,
    ) -> BulkIngestResult:
        """
        Parse a multi-document payload and ingest each item.

        Item failures are collected; they do not stop the remaining items.
        """
        parsed = parse_input(payload, file_name=file_name, mime_type=mime_type, source_url=source_url)
        result = BulkIngestResult(source_type=parsed.source_type.value, warnings=parsed.warnings)

        for item in parsed.items:
            command = IngestCommand(
                file_name=item.file_name,
                mime_type=item.mime_type,
                raw_text=item.raw_text,
                source_url=item.source_url,
                dedup_mode=dedup_mode,
            )
            try:
                item_result = await self.ingest(command)
            except LegalPipelineException as e:
                result.items.append(BulkItemResult(file_name=item.file_name, error=e.message))
                result.failed += 1
                continue
            result.items.append(BulkItemResult(file_name=item.file_name, result=item_result))
            result.succeeded += 1

        log_with_context(
            logger,
            logging.INFO,
            "Bulk ingest finished",
            source_type=result.source_type,
            succeeded=result.succeeded,
            failed=result.failed,
        )
        return result
