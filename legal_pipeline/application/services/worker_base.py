"""
Shared run loop for lease-based workers.

A run recovers expired leases, claims a batch, processes claimed jobs in
small parallel groups with one session per job, and resolves every job
through the retry policy.

Dependencies: sqlalchemy, legal_pipeline.boundary.db
System role: Common worker mechanics for chunk and embed jobs
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
import logging
import time
import uuid

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from legal_pipeline.application.services.job_queue_service import JobQueueService
from legal_pipeline.boundary.db.base import utcnow
from legal_pipeline.boundary.db.CRUD import job_crud
from legal_pipeline.boundary.db.models import JobStatus, JobType, PipelineJobModel
from legal_pipeline.configs.jobs import JobSettings
from legal_pipeline.observability import get_logger, log_exception_with_context, log_with_context
from legal_pipeline.observability.correlation import correlation_scope

logger = get_logger(__name__)

# Errors echoed back in a run report
MAX_REPORTED_ERRORS = 20


@dataclass
class JobOutcome:
    """Result of processing one leased job."""

    ok: bool
    chunks: int = 0
    note: str | None = None
    error: str | None = None


@dataclass
class RunSummary:
    picked: int = 0
    processed_ok: int = 0
    processed_failed: int = 0
    recovered: int = 0
    chunks: int = 0
    pending_remaining: int = 0
    duration_ms: int = 0
    errors: list[str] = field(default_factory=list)


class LeaseLostError(Exception):
    """Raised when a resolution finds the job leased to someone else."""


class LeasedJobWorker(ABC):
    """
    Base class for workers draining one job type.

    Subclasses implement _process, which must resolve the job itself
    inside the transaction holding its writes.
    """

    job_type: JobType
    worker_prefix: str

    def __init__(
        self,
        session_factory: async_sessionmaker,
        settings: JobSettings,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.session_factory = session_factory
        self.settings = settings
        self.clock = clock
        self.worker_id = f"{self.worker_prefix}-{uuid.uuid4().hex[:12]}"

    @property
    @abstractmethod
    def lease_seconds(self) -> int: ...

    @abstractmethod
    async def _process(self, session: AsyncSession, job: PipelineJobModel) -> JobOutcome: ...

    async def _on_dead_letter(self, session: AsyncSession, job: PipelineJobModel) -> None:
        """Hook for bookkeeping when a job exhausts its attempts."""

    async def _resolve_success(
        self,
        session: AsyncSession,
        job: PipelineJobModel,
        note: str | None = None,
    ) -> None:
        resolved = await job_crud.resolve_success(
            session,
            job.id,
            self.worker_id,
            attempts=job.attempts + 1,
            now=self.clock(),
            note=note,
        )
        if not resolved:
            raise LeaseLostError(f"Lease on job {job.id} lost before completion")

    async def _run_one(self, job: PipelineJobModel) -> JobOutcome:
        with correlation_scope(f"job-{job.id}"):
            return await self._run_in_scope(job)

    async def _run_in_scope(self, job: PipelineJobModel) -> JobOutcome:
        try:
            # Leaving the session without commit discards partial writes
            async with self.session_factory() as session:
                outcome = await self._process(session, job)
                await session.commit()
                return outcome
        except LeaseLostError as e:
            log_with_context(
                logger,
                logging.WARNING,
                "Lease lost, writes discarded",
                job_id=str(job.id),
                worker_id=self.worker_id,
            )
            return JobOutcome(ok=False, error=str(e))
        except Exception as e:
            log_exception_with_context(
                logger,
                "Job processing failed",
                e,
                job_id=str(job.id),
                document_id=str(job.document_id),
                job_type=self.job_type.value,
            )
            await self._record_failure(job, e)
            return JobOutcome(ok=False, error=f"{job.document_id}: {e}")

    async def _record_failure(self, job: PipelineJobModel, error: Exception) -> None:
        async with self.session_factory() as session:
            status = await JobQueueService(session, self.settings).record_failure(
                job,
                self.worker_id,
                str(error) or type(error).__name__,
                now=self.clock(),
            )
            if status is JobStatus.DEAD_LETTER:
                await self._on_dead_letter(session, job)
            await session.commit()

    async def _claim(self, limit: int, source_table: str | None) -> tuple[list[PipelineJobModel], int]:
        now = self.clock()
        async with self.session_factory() as session:
            recovered = await JobQueueService(session, self.settings).recover_expired_leases(now)
            jobs = await job_crud.claim(
                session,
                self.job_type,
                limit,
                self.worker_id,
                self.lease_seconds,
                now,
                source_table,
            )
            await session.commit()
        return list(jobs), recovered

    async def _pending_remaining(self, source_table: str | None) -> int:
        async with self.session_factory() as session:
            return await job_crud.count_eligible(session, self.job_type, self.clock(), source_table)

    async def drain(self, limit: int, source_table: str | None = None) -> RunSummary:
        """
        One worker invocation.

        Args:
            limit: Maximum jobs to claim
            source_table: Restrict claims to one source table

        Returns:
            RunSummary of the invocation
        """
        started = time.perf_counter()
        summary = RunSummary()

        jobs, summary.recovered = await self._claim(limit, source_table)
        summary.picked = len(jobs)

        step = max(1, self.settings.parallel_batch)
        for offset in range(0, len(jobs), step):
            group = jobs[offset:offset + step]
            outcomes = await asyncio.gather(
                *(self._run_one(job) for job in group),
                return_exceptions=True,
            )
            for outcome in outcomes:
                if isinstance(outcome, Exception):
                    logger.error(f"{__name__}:drain - Failure bookkeeping failed: {outcome}")
                    outcome = JobOutcome(ok=False, error=str(outcome))
                if outcome.ok:
                    summary.processed_ok += 1
                    summary.chunks += outcome.chunks
                else:
                    summary.processed_failed += 1
                    if outcome.error and len(summary.errors) < MAX_REPORTED_ERRORS:
                        summary.errors.append(outcome.error)

        summary.pending_remaining = await self._pending_remaining(source_table)
        summary.duration_ms = int((time.perf_counter() - started) * 1000)

        log_with_context(
            logger,
            logging.INFO,
            "Worker run finished",
            worker_id=self.worker_id,
            job_type=self.job_type.value,
            picked=summary.picked,
            ok=summary.processed_ok,
            failed=summary.processed_failed,
            recovered=summary.recovered,
            duration_ms=summary.duration_ms,
        )
        return summary
