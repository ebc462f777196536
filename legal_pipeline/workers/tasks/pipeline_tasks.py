"""
Pipeline Celery tasks.

Tasks: run_chunk_worker, run_embed_worker, recover_expired_leases,
enqueue_missing

Each task runs one async worker invocation on a fresh event loop. A
NullPool engine and the embedding provider are created per invocation
since pooled connections and client sessions cannot cross event loops.

Dependencies: celery, sqlalchemy, legal_pipeline.application
System role: Scheduled background processing
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from legal_pipeline.application.services import (
    ChunkWorker,
    EmbedWorker,
    EmbeddingConfigService,
    JobQueueService,
)
from legal_pipeline.boundary.db.connection import build_session_factory
from legal_pipeline.boundary.embedding import EmbeddingProvider
from legal_pipeline.configs import get_settings
from legal_pipeline.observability import get_logger
from legal_pipeline.workers import celery_app

logger = get_logger(__name__)

T = TypeVar("T")


def run_async(job: Callable[[async_sessionmaker], Awaitable[T]]) -> T:
    """Run job with a task-scoped session factory on a new event loop."""
    settings = get_settings()

    async def _runner() -> T:
        engine = create_async_engine(settings.database.async_database_url, poolclass=NullPool)
        try:
            return await job(build_session_factory(engine))
        finally:
            await engine.dispose()

    return asyncio.run(_runner())


@celery_app.task(name="legal_pipeline.workers.tasks.pipeline_tasks.run_chunk_worker")
def run_chunk_worker(concurrency_docs: int | None = None, source_table: str | None = None) -> dict:
    """
    Claim and process one batch of chunk jobs.

    Returns:
        dict: ChunkWorkerReport as JSON
    """
    settings = get_settings()

    async def _job(session_factory: async_sessionmaker):
        worker = ChunkWorker(session_factory, settings.jobs, chunking=settings.chunking)
        return await worker.run(concurrency_docs=concurrency_docs, source_table=source_table)

    report = run_async(_job)
    return report.model_dump(mode="json")


@celery_app.task(name="legal_pipeline.workers.tasks.pipeline_tasks.run_embed_worker")
def run_embed_worker(concurrency_docs: int | None = None) -> dict:
    """
    Claim and process one batch of embed jobs.

    Returns:
        dict: EmbedWorkerReport as JSON
    """
    settings = get_settings()

    async def _job(session_factory: async_sessionmaker):
        worker = EmbedWorker(
            session_factory,
            settings.jobs,
            provider=EmbeddingProvider(settings.embedding),
            config_service=EmbeddingConfigService(session_factory, settings.embedding),
        )
        return await worker.run(concurrency_docs=concurrency_docs)

    report = run_async(_job)
    return report.model_dump(mode="json")


@celery_app.task(name="legal_pipeline.workers.tasks.pipeline_tasks.recover_expired_leases")
def recover_expired_leases() -> int:
    """Return processing jobs with an expired lease to pending."""
    settings = get_settings()

    async def _job(session_factory: async_sessionmaker) -> int:
        async with session_factory() as session:
            recovered = await JobQueueService(session, settings.jobs).recover_expired_leases()
            await session.commit()
            return recovered

    return run_async(_job)


@celery_app.task(
    bind=True,
    name="legal_pipeline.workers.tasks.pipeline_tasks.enqueue_missing",
    max_retries=3,
    autoretry_for=(SQLAlchemyError,),
    retry_backoff=60,
    retry_backoff_max=600,
)
def enqueue_missing(self, source_table: str | None = None) -> dict:
    """
    Enqueue chunk and embed jobs for documents that need them.

    Returns:
        dict: Number of jobs created or requeued per job type
    """
    settings = get_settings()

    async def _job(session_factory: async_sessionmaker) -> dict:
        async with session_factory() as session:
            queue = JobQueueService(session, settings.jobs)
            chunk = await queue.enqueue_missing_chunks(source_table)
            embed = await queue.enqueue_missing_embeddings(source_table)
            await session.commit()
            return {"chunk": chunk, "embed": embed}

    result = run_async(_job)
    logger.info(f"{__name__}:enqueue_missing - {result}")
    return result
