"""
Test suite for ChunkWorker.

Tests the lease-based re-chunking run: chunk set swap, embed handoff,
skip paths, failure backoff and dead-lettering.

System role: Verification of background chunking
"""

from unittest.mock import patch
import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from legal_pipeline.application.services.chunk_worker import ChunkWorker
from legal_pipeline.boundary.db.CRUD import chunk_crud, document_crud, job_crud
from legal_pipeline.boundary.db.models import (
    EmbeddingStatus,
    JobStatus,
    JobType,
    PipelineJobModel,
)
from legal_pipeline.configs.jobs import JobSettings
from legal_pipeline.core.chunking import CHUNKER_VERSION, compute_chunk_set_version
from legal_pipeline.core.qa import QAResult
from legal_pipeline.models.enums import ChunkType


async def enqueue_chunk_jobs(session_factory: async_sessionmaker, *document_ids: uuid.UUID, max_attempts: int = 5) -> None:
    async with session_factory() as session:
        await job_crud.enqueue(
            session, list(document_ids), JobType.CHUNK, source_table="legal_documents", max_attempts=max_attempts
        )
        await session.commit()


async def jobs_for(session_factory: async_sessionmaker, document_id: uuid.UUID) -> dict[JobType, PipelineJobModel]:
    async with session_factory() as session:
        result = await session.execute(
            select(PipelineJobModel).where(PipelineJobModel.document_id == document_id)
        )
        return {job.job_type: job for job in result.scalars().all()}


class TestChunkWorkerRun:
    """Test suite for ChunkWorker.run()."""

    @pytest.mark.asyncio
    async def test_run_chunks_document_and_queues_embedding(
        self,
        session_factory: async_sessionmaker,
        job_settings: JobSettings,
        document_factory,
        legislation_text: str,
    ) -> None:
        """Test a claimed document gets a chunk set and an embed job."""
        # Arrange
        document = await document_factory(legislation_text)
        await enqueue_chunk_jobs(session_factory, document.id)
        worker = ChunkWorker(session_factory, job_settings)

        # Act
        report = await worker.run()

        # Assert
        assert report.picked == 1
        assert report.processed_ok == 1
        assert report.processed_failed == 0
        assert report.total_chunks_inserted == 3
        assert report.pending_remaining == 0
        assert report.chunker_version == CHUNKER_VERSION

        async with session_factory() as session:
            stored = await document_crud.get_by_id(session, document.id)
            chunks = await chunk_crud.get_by_document(session, document.id)
        assert stored.chunk_set_version == compute_chunk_set_version(legislation_text)
        assert stored.chunker_version == CHUNKER_VERSION
        assert stored.embedding_status == EmbeddingStatus.PENDING
        assert [c.chunk_type for c in chunks] == [ChunkType.ARTICLE] * 3

        jobs = await jobs_for(session_factory, document.id)
        assert jobs[JobType.CHUNK].status == JobStatus.DONE
        assert jobs[JobType.CHUNK].attempts == 1
        assert jobs[JobType.EMBED].status == JobStatus.PENDING

    @pytest.mark.asyncio
    async def test_unchanged_chunk_set_is_not_rewritten(
        self,
        session_factory: async_sessionmaker,
        job_settings: JobSettings,
        document_factory,
        legislation_text: str,
    ) -> None:
        """Test a second run over the same content leaves chunks in place."""
        # Arrange
        document = await document_factory(legislation_text)
        await enqueue_chunk_jobs(session_factory, document.id)
        worker = ChunkWorker(session_factory, job_settings)
        await worker.run()
        async with session_factory() as session:
            before = [c.id for c in await chunk_crud.get_by_document(session, document.id)]
        await enqueue_chunk_jobs(session_factory, document.id)

        # Act
        report = await worker.run()

        # Assert
        assert report.processed_ok == 1
        assert report.total_chunks_inserted == 0
        async with session_factory() as session:
            after = [c.id for c in await chunk_crud.get_by_document(session, document.id)]
        assert after == before
        jobs = await jobs_for(session_factory, document.id)
        assert jobs[JobType.CHUNK].last_error == "chunk set unchanged"

    @pytest.mark.asyncio
    async def test_stale_chunk_set_is_replaced(
        self,
        session_factory: async_sessionmaker,
        job_settings: JobSettings,
        document_factory,
        legislation_text: str,
    ) -> None:
        """Test chunks of an older set are deleted when the new set lands."""
        # Arrange
        document = await document_factory(
            legislation_text, chunker_version="1.0.0", chunk_set_version="stale"
        )
        async with session_factory() as session:
            await chunk_crud.bulk_insert(
                session,
                [
                    {
                        "document_id": document.id,
                        "chunk_index": 0,
                        "chunk_type": ChunkType.FULL_TEXT,
                        "chunk_text": legislation_text,
                        "char_start": 0,
                        "char_end": len(legislation_text),
                        "chunk_hash": "old",
                        "chunker_version": "1.0.0",
                        "chunk_set_version": "stale",
                    }
                ],
            )
            await session.commit()
        await enqueue_chunk_jobs(session_factory, document.id)

        # Act
        report = await ChunkWorker(session_factory, job_settings).run()

        # Assert
        assert report.total_chunks_inserted == 3
        async with session_factory() as session:
            chunks = await chunk_crud.get_by_document(session, document.id)
        assert len(chunks) == 3
        assert {c.chunk_set_version for c in chunks} == {compute_chunk_set_version(legislation_text)}

    @pytest.mark.asyncio
    async def test_short_content_is_skipped(
        self,
        session_factory: async_sessionmaker,
        job_settings: JobSettings,
        document_factory,
    ) -> None:
        """Test content under the minimum length completes without chunks."""
        # Arrange
        document = await document_factory("Repealed.")
        await enqueue_chunk_jobs(session_factory, document.id)

        # Act
        report = await ChunkWorker(session_factory, job_settings).run()

        # Assert
        assert report.processed_ok == 1
        assert report.total_chunks_inserted == 0
        async with session_factory() as session:
            stored = await document_crud.get_by_id(session, document.id)
            assert await chunk_crud.count_by_document(session, document.id) == 0
        assert stored.embedding_status == EmbeddingStatus.SKIPPED
        assert stored.chunk_set_version == compute_chunk_set_version("Repealed.")

        jobs = await jobs_for(session_factory, document.id)
        assert jobs[JobType.CHUNK].status == JobStatus.DONE
        assert jobs[JobType.CHUNK].last_error == "content too short to chunk"
        assert JobType.EMBED not in jobs

    @pytest.mark.asyncio
    async def test_missing_document_backs_off(
        self,
        session_factory: async_sessionmaker,
        job_settings: JobSettings,
    ) -> None:
        """Test a job for a deleted document fails and is scheduled for retry."""
        # Arrange
        document_id = uuid.uuid4()
        await enqueue_chunk_jobs(session_factory, document_id)

        # Act
        report = await ChunkWorker(session_factory, job_settings).run()

        # Assert
        assert report.processed_failed == 1
        assert report.pending_remaining == 0
        assert "Document not found" in report.errors[0]

        job = (await jobs_for(session_factory, document_id))[JobType.CHUNK]
        assert job.status == JobStatus.PENDING
        assert job.attempts == 1
        assert job.next_run_at is not None
        assert job.worker_id is None
        assert job.last_error.startswith("Document not found")

    @pytest.mark.asyncio
    async def test_exhausted_job_is_dead_lettered(
        self,
        session_factory: async_sessionmaker,
        job_settings: JobSettings,
    ) -> None:
        """Test a failing job on its last attempt lands in the dead letter state."""
        # Arrange
        document_id = uuid.uuid4()
        await enqueue_chunk_jobs(session_factory, document_id, max_attempts=1)

        # Act
        await ChunkWorker(session_factory, job_settings).run()

        # Assert
        job = (await jobs_for(session_factory, document_id))[JobType.CHUNK]
        assert job.status == JobStatus.DEAD_LETTER
        assert job.attempts == 1
        assert job.next_run_at is None

    @pytest.mark.asyncio
    async def test_qa_failure_discards_chunk_writes(
        self,
        session_factory: async_sessionmaker,
        job_settings: JobSettings,
        document_factory,
        legislation_text: str,
    ) -> None:
        """Test a QA failure leaves no chunks and no embed job behind."""
        # Arrange
        document = await document_factory(legislation_text)
        await enqueue_chunk_jobs(session_factory, document.id)
        failed = QAResult(ok=False, errors=["chunk 1: chunk_text is blank"])

        # Act
        with patch(
            "legal_pipeline.application.services.chunk_worker.validate_chunks",
            return_value=failed,
        ):
            report = await ChunkWorker(session_factory, job_settings).run()

        # Assert
        assert report.processed_failed == 1
        async with session_factory() as session:
            assert await chunk_crud.count_by_document(session, document.id) == 0
            stored = await document_crud.get_by_id(session, document.id)
        assert stored.chunk_set_version is None
        jobs = await jobs_for(session_factory, document.id)
        assert jobs[JobType.CHUNK].status == JobStatus.PENDING
        assert "QA gate" in jobs[JobType.CHUNK].last_error
        assert JobType.EMBED not in jobs

    @pytest.mark.asyncio
    async def test_claim_limit_leaves_remaining_pending(
        self,
        session_factory: async_sessionmaker,
        job_settings: JobSettings,
        document_factory,
        legislation_text: str,
    ) -> None:
        """Test only concurrency_docs jobs are claimed per run."""
        # Arrange
        documents = [await document_factory(legislation_text) for _ in range(3)]
        await enqueue_chunk_jobs(session_factory, *(d.id for d in documents))

        # Act
        report = await ChunkWorker(session_factory, job_settings).run(concurrency_docs=2)

        # Assert
        assert report.picked == 2
        assert report.processed_ok == 2
        assert report.pending_remaining == 1

    @pytest.mark.asyncio
    async def test_source_table_filter(
        self,
        session_factory: async_sessionmaker,
        job_settings: JobSettings,
        document_factory,
    ) -> None:
        """Test a run restricted to another table claims nothing."""
        # Arrange
        document = await document_factory()
        await enqueue_chunk_jobs(session_factory, document.id)

        # Act
        report = await ChunkWorker(session_factory, job_settings).run(source_table="archive_documents")

        # Assert
        assert report.picked == 0
        assert report.pending_remaining == 0
