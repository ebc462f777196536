"""
Test suite for IngestionService.

Tests the normalize -> chunk -> QA -> persist flow, dedup policy,
failure cleanup and bulk payloads against an in-memory database.

System role: Verification of synchronous ingestion orchestration
"""

import asyncio
import logging
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from legal_pipeline.application.services.ingestion_service import (
    DedupMode,
    IngestCommand,
    IngestionService,
    drain_notifications,
)
from legal_pipeline.boundary.db.CRUD import chunk_crud, document_crud
from legal_pipeline.boundary.db.models import (
    EmbeddingStatus,
    JobStatus,
    JobType,
    PipelineJobModel,
)
from legal_pipeline.configs import Settings
from legal_pipeline.configs.chunking import ChunkingSettings
from legal_pipeline.core.chunking import CHUNKER_VERSION
from legal_pipeline.core.exceptions import (
    InputValidationError,
    NormalizationValidationError,
    PayloadTooLargeError,
    PersistenceError,
    QAValidationError,
)
from legal_pipeline.core.qa import QAResult

TABLE_TEXT = "Tariffs\n| item | fee |\n| copy | 100 |\n| extract | 200 |"


@pytest.fixture
def notifier() -> AsyncMock:
    mock = AsyncMock()
    mock.notify = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def service(test_async_db: AsyncSession, settings: Settings, notifier: AsyncMock) -> IngestionService:
    return IngestionService(test_async_db, settings, notifier=notifier)


def _command(raw_text: str, file_name: str = "registers.txt", **kwargs) -> IngestCommand:
    return IngestCommand(file_name=file_name, raw_text=raw_text, **kwargs)


class TestIngest:
    """Test suite for IngestionService.ingest()."""

    @pytest.mark.asyncio
    async def test_ingest_statute_stores_document_and_chunks(
        self,
        service: IngestionService,
        test_async_db: AsyncSession,
        legislation_text: str,
    ) -> None:
        """Test a statute is stored with one chunk per article."""
        # Act
        result = await service.ingest(_command(legislation_text))

        # Assert
        assert result.chunks_inserted == 3
        assert result.deduplicated is False
        assert result.doc_type == "law"
        assert result.strategy == "article"
        assert result.chunker_version == CHUNKER_VERSION

        document = await document_crud.get_by_id(test_async_db, result.document_id)
        assert document.chunk_set_version == result.chunk_set_version
        assert document.chunker_version == CHUNKER_VERSION
        assert document.embedding_status == EmbeddingStatus.PENDING

        chunks = await chunk_crud.get_by_document(test_async_db, result.document_id)
        assert [c.chunk_index for c in chunks] == [0, 1, 2]
        assert {c.chunk_set_version for c in chunks} == {result.chunk_set_version}

    @pytest.mark.asyncio
    async def test_ingest_enqueues_embed_job(
        self,
        service: IngestionService,
        test_async_db: AsyncSession,
        legislation_text: str,
    ) -> None:
        """Test a stored chunk set gets a pending embed job."""
        # Act
        result = await service.ingest(_command(legislation_text))

        # Assert
        jobs = (await test_async_db.execute(select(PipelineJobModel))).scalars().all()
        assert len(jobs) == 1
        assert jobs[0].document_id == result.document_id
        assert jobs[0].job_type == JobType.EMBED
        assert jobs[0].status == JobStatus.PENDING
        assert jobs[0].source_table == "legal_documents"

    @pytest.mark.asyncio
    async def test_duplicate_is_skipped(
        self,
        service: IngestionService,
        test_async_db: AsyncSession,
        legislation_text: str,
    ) -> None:
        """Test identical raw text returns the stored document untouched."""
        # Arrange
        first = await service.ingest(_command(legislation_text))

        # Act
        second = await service.ingest(_command(legislation_text, file_name="copy.txt"))

        # Assert
        assert second.document_id == first.document_id
        assert second.deduplicated is True
        assert second.chunks_inserted == 0
        assert second.chunk_set_version == first.chunk_set_version
        assert await chunk_crud.count_by_document(test_async_db, first.document_id) == 3

    @pytest.mark.asyncio
    async def test_duplicate_is_replaced_on_upsert(
        self,
        service: IngestionService,
        test_async_db: AsyncSession,
        legislation_text: str,
    ) -> None:
        """Test upsert deletes the old document and stores a fresh one."""
        # Arrange
        first = await service.ingest(_command(legislation_text))

        # Act
        second = await service.ingest(_command(legislation_text, dedup_mode=DedupMode.UPSERT))

        # Assert
        assert second.document_id != first.document_id
        assert second.deduplicated is False
        assert second.chunks_inserted == 3
        assert await document_crud.get_by_id(test_async_db, first.document_id) is None
        assert await chunk_crud.count_by_document(test_async_db, first.document_id) == 0

    @pytest.mark.asyncio
    async def test_blank_raw_text_rejected(self, service: IngestionService) -> None:
        """Test whitespace-only rawText is a validation error."""
        # Act & Assert
        with pytest.raises(InputValidationError) as exc_info:
            await service.ingest(_command("   \n  "))
        assert exc_info.value.details["field"] == "rawText"

    @pytest.mark.asyncio
    async def test_blank_file_name_rejected(self, service: IngestionService, legislation_text: str) -> None:
        """Test a blank fileName is a validation error."""
        # Act & Assert
        with pytest.raises(InputValidationError) as exc_info:
            await service.ingest(_command(legislation_text, file_name=" "))
        assert exc_info.value.details["field"] == "fileName"

    @pytest.mark.asyncio
    async def test_oversized_payload_rejected(
        self,
        test_async_db: AsyncSession,
        job_settings,
        notifier: AsyncMock,
        legislation_text: str,
    ) -> None:
        """Test rawText over the ingest limit raises before any write."""
        # Arrange
        settings = Settings(jobs=job_settings, chunking=ChunkingSettings(max_ingest_chars=100))
        service = IngestionService(test_async_db, settings, notifier=notifier)

        # Act & Assert
        with pytest.raises(PayloadTooLargeError) as exc_info:
            await service.ingest(_command(legislation_text))
        assert exc_info.value.details["limit"] == 100
        assert await document_crud.count(test_async_db) == 0

    @pytest.mark.asyncio
    async def test_text_empty_after_cleaning_fails_normalization(
        self,
        service: IngestionService,
        test_async_db: AsyncSession,
    ) -> None:
        """Test raw text made only of page numbers leaves no content."""
        # Act & Assert
        with pytest.raises(NormalizationValidationError) as exc_info:
            await service.ingest(_command("12\n13\n- 14 -\n"))
        assert [issue["field"] for issue in exc_info.value.issues] == ["content_text"]
        assert await document_crud.count(test_async_db) == 0

    @pytest.mark.asyncio
    async def test_qa_failure_stores_nothing(
        self,
        service: IngestionService,
        test_async_db: AsyncSession,
        legislation_text: str,
    ) -> None:
        """Test a failed QA gate raises before the document is written."""
        # Arrange
        failed = QAResult(ok=False, errors=["chunk 0: chunk_text is blank"])

        # Act & Assert
        with patch(
            "legal_pipeline.application.services.ingestion_service.validate_chunks",
            return_value=failed,
        ):
            with pytest.raises(QAValidationError) as exc_info:
                await service.ingest(_command(legislation_text))

        assert exc_info.value.errors == ["chunk 0: chunk_text is blank"]
        assert await document_crud.count(test_async_db) == 0

    @pytest.mark.asyncio
    async def test_chunk_write_failure_removes_document(
        self,
        service: IngestionService,
        test_async_db: AsyncSession,
        legislation_text: str,
    ) -> None:
        """Test the document row is deleted again when chunk inserts fail."""
        # Arrange
        failing_insert = AsyncMock(side_effect=SQLAlchemyError("disk full"))

        # Act & Assert
        with patch.object(chunk_crud, "bulk_insert", failing_insert):
            with pytest.raises(PersistenceError, match="Failed to insert chunks"):
                await service.ingest(_command(legislation_text))

        assert await document_crud.count(test_async_db) == 0

    @pytest.mark.asyncio
    async def test_table_chunks_notify_renderer(
        self,
        service: IngestionService,
        notifier: AsyncMock,
    ) -> None:
        """Test table chunk indices are sent to the renderer."""
        # Act
        result = await service.ingest(_command(TABLE_TEXT, file_name="tariffs.txt"))

        # Assert
        await drain_notifications()
        notifier.notify.assert_awaited_once_with(result.document_id, [0])

    @pytest.mark.asyncio
    async def test_notification_does_not_block_ingest(
        self,
        service: IngestionService,
        notifier: AsyncMock,
    ) -> None:
        """Test ingest returns while the renderer call is still in flight."""
        # Arrange
        release = asyncio.Event()
        delivered = []

        async def slow_notify(document_id, chunk_indices):
            await release.wait()
            delivered.append((document_id, chunk_indices))
            return True

        notifier.notify = AsyncMock(side_effect=slow_notify)

        # Act
        result = await service.ingest(_command(TABLE_TEXT, file_name="tariffs.txt"))
        pending_before_release = list(delivered)
        release.set()
        await drain_notifications()

        # Assert
        assert result.chunks_inserted == 1
        assert pending_before_release == []
        assert delivered == [(result.document_id, [0])]

    @pytest.mark.asyncio
    async def test_crashed_notification_is_logged(
        self,
        service: IngestionService,
        notifier: AsyncMock,
        caplog,
    ) -> None:
        """Test an unexpected notifier error is logged, not raised."""
        # Arrange
        notifier.notify = AsyncMock(side_effect=RuntimeError("renderer client broken"))

        # Act
        with caplog.at_level(logging.ERROR):
            result = await service.ingest(_command(TABLE_TEXT, file_name="tariffs.txt"))
            await drain_notifications()
            await asyncio.sleep(0)

        # Assert
        assert result.chunks_inserted == 1
        assert "Table renderer notification crashed" in caplog.text

    @pytest.mark.asyncio
    async def test_no_tables_no_notification(
        self,
        service: IngestionService,
        notifier: AsyncMock,
        legislation_text: str,
    ) -> None:
        """Test documents without tables do not notify."""
        # Act
        await service.ingest(_command(legislation_text))

        # Assert
        notifier.notify.assert_not_awaited()


class TestIngestBulk:
    """Test suite for IngestionService.ingest_bulk()."""

    @pytest.mark.asyncio
    async def test_bulk_collects_item_failures(
        self,
        service: IngestionService,
        test_async_db: AsyncSession,
        legislation_text: str,
        appeal_text: str,
    ) -> None:
        """Test a failing item does not stop the rest of the payload."""
        # Arrange
        import json

        payload = json.dumps([{"text": legislation_text}, {"text": "  "}, {"text": appeal_text}])

        # Act
        result = await service.ingest_bulk(payload, file_name="batch.json", mime_type="application/json")

        # Assert
        assert result.source_type == "json"
        assert result.succeeded == 2
        assert result.failed == 1
        assert [item.error for item in result.items] == [None, "rawText is required", None]
        assert await document_crud.count(test_async_db) == 2

    @pytest.mark.asyncio
    async def test_bulk_raw_text_is_single_item(
        self,
        service: IngestionService,
        legislation_text: str,
    ) -> None:
        """Test a plain text payload ingests as one document."""
        # Act
        result = await service.ingest_bulk(legislation_text, file_name="registers.txt")

        # Assert
        assert result.source_type == "raw_text"
        assert result.succeeded == 1
        assert result.items[0].result.chunks_inserted == 3
