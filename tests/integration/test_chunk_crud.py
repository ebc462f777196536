"""
Test suite for ChunkCRUD and AppSettingCRUD.

System role: Verification of chunk-set storage and runtime settings
"""

from datetime import datetime, timezone
import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from legal_pipeline.boundary.db.CRUD import app_setting_crud, chunk_crud, document_crud
from legal_pipeline.core.chunking import chunk_document
from legal_pipeline.models.chunk import ChunkInput
from legal_pipeline.models.enums import Branch, ChunkType, DocType


async def make_document(session: AsyncSession, text: str):
    return await document_crud.create(
        session,
        doc_type=DocType.APPEAL_RULING,
        branch=Branch.CIVIL,
        title="Ruling",
        content_text=text,
        source_hash=uuid.uuid4().hex,
        ingestion={"pipeline": "test", "schema_version": "1.0"},
    )


async def store(session: AsyncSession, document_id: uuid.UUID, text: str, version: str) -> int:
    result = chunk_document(ChunkInput(doc_type=DocType.APPEAL_RULING, content_text=text))
    rows = [chunk_crud.to_row(document_id, c, version) for c in result.chunks]
    return await chunk_crud.bulk_insert(session, rows)


class TestChunkRows:
    """Test suite for chunk row mapping and storage."""

    def test_to_row_maps_models(self, appeal_text: str) -> None:
        """Test locator and metadata become plain JSON dicts."""
        # Arrange
        chunk = chunk_document(ChunkInput(doc_type=DocType.APPEAL_RULING, content_text=appeal_text)).chunks[1]
        document_id = uuid.uuid4()

        # Act
        row = chunk_crud.to_row(document_id, chunk, "v1")

        # Assert
        assert row["document_id"] == document_id
        assert row["chunk_set_version"] == "v1"
        assert row["chunk_type"] == ChunkType.FACTS
        assert row["locator"] == {"section_title": "FACTS"}
        assert row["chunk_metadata"]["court_level"] == "appeal"

    @pytest.mark.asyncio
    async def test_bulk_insert_and_read_back(self, test_async_db: AsyncSession, appeal_text: str) -> None:
        """Test stored chunks come back in index order with metadata."""
        # Arrange
        document = await make_document(test_async_db, appeal_text)

        # Act
        inserted = await store(test_async_db, document.id, appeal_text, "v1")
        chunks = await chunk_crud.get_by_document(test_async_db, document.id)

        # Assert
        assert inserted == 4
        assert [c.chunk_index for c in chunks] == [0, 1, 2, 3]
        assert chunks[1].chunk_type == ChunkType.FACTS
        assert chunks[1].chunk_metadata["case_number"] == "CA-1234-2024"
        assert chunks[1].embedding is None

    @pytest.mark.asyncio
    async def test_bulk_insert_nothing(self, test_async_db: AsyncSession) -> None:
        """Test an empty batch inserts nothing."""
        assert await chunk_crud.bulk_insert(test_async_db, []) == 0


class TestChunkSets:
    """Test suite for version-scoped chunk queries."""

    @pytest.mark.asyncio
    async def test_version_filter_and_swap(self, test_async_db: AsyncSession, appeal_text: str) -> None:
        """Test old sets are removed once a new set is stored."""
        # Arrange
        document = await make_document(test_async_db, appeal_text)
        await store(test_async_db, document.id, appeal_text, "old")
        await store(test_async_db, document.id, appeal_text, "new")

        # Act
        both = await chunk_crud.count_by_document(test_async_db, document.id)
        deleted = await chunk_crud.delete_other_versions(test_async_db, document.id, "new")
        remaining = await chunk_crud.get_by_document(test_async_db, document.id)

        # Assert
        assert both == 8
        assert deleted == 4
        assert {c.chunk_set_version for c in remaining} == {"new"}

    @pytest.mark.asyncio
    async def test_embedding_bookkeeping(self, test_async_db: AsyncSession, appeal_text: str) -> None:
        """Test only chunks without vectors are returned as unembedded."""
        # Arrange
        document = await make_document(test_async_db, appeal_text)
        await store(test_async_db, document.id, appeal_text, "v1")
        chunks = await chunk_crud.get_by_document(test_async_db, document.id, "v1")
        embedded_at = datetime(2025, 3, 1, tzinfo=timezone.utc)

        # Act
        await chunk_crud.set_embedding(test_async_db, chunks[0].id, [0.5, 0.25], "test-model", embedded_at)
        unembedded = await chunk_crud.get_unembedded(test_async_db, document.id, "v1")
        other_set = await chunk_crud.get_unembedded(test_async_db, document.id, "v2")

        # Assert
        assert [c.chunk_index for c in unembedded] == [1, 2, 3]
        assert other_set == []
        stored = await chunk_crud.get_by_document(test_async_db, document.id)
        await test_async_db.refresh(stored[0])
        assert stored[0].embedding == [0.5, 0.25]
        assert stored[0].embedding_model == "test-model"


class TestAppSettings:
    """Test suite for runtime setting storage."""

    @pytest.mark.asyncio
    async def test_set_and_replace_value(self, test_async_db: AsyncSession) -> None:
        """Test values are inserted and then replaced under one key."""
        # Act
        missing = await app_setting_crud.get_value(test_async_db, "embedding_provider")
        await app_setting_crud.set_value(test_async_db, "embedding_provider", {"model": "a"})
        await app_setting_crud.set_value(test_async_db, "embedding_provider", {"model": "b"})
        value = await app_setting_crud.get_value(test_async_db, "embedding_provider")

        # Assert
        assert missing is None
        assert value == {"model": "b"}
