"""
Test suite for DocumentService.

Tests document lookup, JSONL export of the current chunk set and
chunk-set audits.

System role: Verification of document read operations
"""

import json
from unittest.mock import AsyncMock
import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from legal_pipeline.application.services.document_service import DocumentService
from legal_pipeline.application.services.ingestion_service import IngestCommand, IngestionService
from legal_pipeline.boundary.db.CRUD import chunk_crud
from legal_pipeline.configs import Settings
from legal_pipeline.core.exceptions import DocumentNotFoundError
from legal_pipeline.models.enums import ChunkType


async def ingest(session: AsyncSession, settings: Settings, text: str, file_name: str) -> uuid.UUID:
    service = IngestionService(session, settings, notifier=AsyncMock())
    result = await service.ingest(IngestCommand(file_name=file_name, raw_text=text))
    return result.document_id


class TestGetDocument:
    """Test suite for DocumentService.get_document()."""

    @pytest.mark.asyncio
    async def test_missing_document_raises(self, test_async_db: AsyncSession) -> None:
        """Test an unknown id raises DocumentNotFoundError."""
        # Arrange
        service = DocumentService(test_async_db)
        missing = uuid.uuid4()

        # Act & Assert
        with pytest.raises(DocumentNotFoundError) as exc_info:
            await service.get_document(missing)
        assert exc_info.value.details["document_id"] == str(missing)


class TestExportJsonl:
    """Test suite for DocumentService.export_jsonl()."""

    @pytest.mark.asyncio
    async def test_export_current_chunk_set(
        self, test_async_db: AsyncSession, settings: Settings, legislation_text: str
    ) -> None:
        """Test one JSON line per chunk in index order."""
        # Arrange
        document_id = await ingest(test_async_db, settings, legislation_text, "registers.txt")
        service = DocumentService(test_async_db)

        # Act
        lines = await service.export_jsonl(document_id)

        # Assert
        records = [json.loads(line) for line in lines]
        assert len(records) == 3
        assert [r["chunk"]["index"] for r in records] == [0, 1, 2]
        assert {r["collection"] for r in records} == {"legislation"}
        assert {r["chunk"]["strategy"] for r in records} == {"article"}
        assert records[0]["id"] == f"{document_id}:0"

    @pytest.mark.asyncio
    async def test_export_ignores_superseded_chunks(
        self, test_async_db: AsyncSession, settings: Settings, legislation_text: str
    ) -> None:
        """Test rows of another chunk set are not exported."""
        # Arrange
        document_id = await ingest(test_async_db, settings, legislation_text, "registers.txt")
        await chunk_crud.bulk_insert(
            test_async_db,
            [
                {
                    "document_id": document_id,
                    "chunk_index": 0,
                    "chunk_type": ChunkType.FULL_TEXT,
                    "chunk_text": legislation_text,
                    "char_start": 0,
                    "char_end": len(legislation_text),
                    "chunk_hash": "superseded",
                    "chunker_version": "1.0.0",
                    "chunk_set_version": "older",
                }
            ],
        )
        service = DocumentService(test_async_db)

        # Act
        lines = await service.export_jsonl(document_id)

        # Assert
        assert len(lines) == 3
        assert all(json.loads(line)["metadata"]["chunk_hash"] != "superseded" for line in lines)


class TestAudit:
    """Test suite for DocumentService.audit()."""

    @pytest.mark.asyncio
    async def test_audit_reports_metrics(
        self, test_async_db: AsyncSession, settings: Settings, appeal_text: str
    ) -> None:
        """Test audit returns versions, status and chunk metrics."""
        # Arrange
        document_id = await ingest(test_async_db, settings, appeal_text, "appeal.txt")
        service = DocumentService(test_async_db)

        # Act
        report = await service.audit(document_id)

        # Assert
        assert report.document_id == document_id
        assert report.doc_type == "appeal_ruling"
        assert report.embedding_status == "pending"
        assert report.metrics.chunk_count == 4
        assert report.metrics.overlaps == []
        assert report.metrics.missing_indices == []
        assert report.metrics.type_distribution == {
            "header": 1,
            "facts": 1,
            "reasoning": 1,
            "resolution": 1,
        }
