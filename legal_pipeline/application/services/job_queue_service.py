"""
Job queue service.

Retry policy and queue maintenance on top of the lease protocol in
JobCRUD: exponential backoff, dead-lettering, enqueue sweeps and
diagnostics.

Dependencies: sqlalchemy, legal_pipeline.boundary.db
System role: Scheduling policy for chunk and embed jobs
"""

from datetime import datetime, timedelta
import logging

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from legal_pipeline.boundary.db.base import utcnow
from legal_pipeline.boundary.db.CRUD import document_crud, job_crud
from legal_pipeline.boundary.db.models import JobStatus, JobType, PipelineJobModel
from legal_pipeline.configs.jobs import JobSettings
from legal_pipeline.core.chunking import CHUNKER_VERSION
from legal_pipeline.observability import get_logger, log_with_context

logger = get_logger(__name__)

# Stored last_error is capped so a stack dump cannot bloat the row
MAX_ERROR_CHARS = 2000


def backoff_seconds(attempt: int, base: int, cap: int) -> int:
    """Delay before the next try after the given failed attempt (1-based)."""
    return min(base * 2 ** max(attempt - 1, 0), cap)


class QueueDiagnostics(BaseModel):
    counts: dict[str, dict[str, int]]
    eligible: dict[str, int]
    documents_missing_chunks: int
    documents_missing_embeddings: int
    chunker_version: str


class JobQueueService:
    """
    Job queue policy.

    Callers own the transaction: no method here commits.
    """

    def __init__(self, db: AsyncSession, settings: JobSettings) -> None:
        self.db = db
        self.settings = settings

    async def record_failure(
        self,
        job: PipelineJobModel,
        worker_id: str,
        error: str,
        now: datetime | None = None,
    ) -> JobStatus | None:
        """
        Resolve a failed attempt as a retry with backoff or a dead letter.

        Args:
            job: The leased job as claimed
            worker_id: Lease holder
            error: Failure message stored in last_error
            now: Failure time

        Returns:
            The new status, or None if the lease was already lost
        """
        now = now or utcnow()
        attempt = job.attempts + 1
        message = error[:MAX_ERROR_CHARS]

        if attempt < job.max_attempts:
            status = JobStatus.PENDING
            delay = backoff_seconds(
                attempt,
                self.settings.backoff_base_seconds,
                self.settings.backoff_max_seconds,
            )
            next_run_at = now + timedelta(seconds=delay)
        else:
            status = JobStatus.DEAD_LETTER
            next_run_at = None

        resolved = await job_crud.resolve_failure(
            self.db,
            job.id,
            worker_id,
            attempts=attempt,
            status=status,
            error=message,
            next_run_at=next_run_at,
        )
        if not resolved:
            log_with_context(
                logger,
                logging.WARNING,
                "Lease lost before failure could be recorded",
                job_id=str(job.id),
                worker_id=worker_id,
            )
            return None

        log_with_context(
            logger,
            logging.WARNING if status is JobStatus.PENDING else logging.ERROR,
            "Job attempt failed",
            job_id=str(job.id),
            job_type=job.job_type.value,
            attempt=attempt,
            status=status.value,
            error=message,
        )
        return status

    async def recover_expired_leases(self, now: datetime | None = None) -> int:
        recovered = await job_crud.recover_expired_leases(self.db, now or utcnow())
        if recovered:
            log_with_context(logger, logging.WARNING, "Recovered expired leases", recovered=recovered)
        return recovered

    async def enqueue_missing_chunks(self, source_table: str | None = None) -> int:
        """Enqueue chunk jobs for documents without a current chunk set."""
        ids = await document_crud.get_ids_missing_chunk_set(self.db, CHUNKER_VERSION)
        return await job_crud.enqueue(
            self.db,
            ids,
            JobType.CHUNK,
            source_table=source_table or self.settings.default_source_table,
            max_attempts=self.settings.max_attempts,
        )

    async def enqueue_missing_embeddings(self, source_table: str | None = None) -> int:
        """Enqueue embed jobs for documents whose chunks lack vectors."""
        ids = await document_crud.get_ids_missing_embeddings(self.db)
        return await job_crud.enqueue(
            self.db,
            ids,
            JobType.EMBED,
            source_table=source_table or self.settings.default_source_table,
            max_attempts=self.settings.max_attempts,
        )

    async def reset_dead_letters(self, job_type: JobType | None = None) -> int:
        reset = await job_crud.reset_dead_letters(self.db, job_type)
        log_with_context(
            logger,
            logging.INFO,
            "Dead letters reset",
            job_type=job_type.value if job_type else "all",
            reset=reset,
        )
        return reset

    async def pending_remaining(self, job_type: JobType, source_table: str | None = None) -> int:
        return await job_crud.count_eligible(self.db, job_type, utcnow(), source_table)

    async def diagnostics(self) -> QueueDiagnostics:
        now = utcnow()
        missing_chunks = await document_crud.get_ids_missing_chunk_set(self.db, CHUNKER_VERSION)
        missing_embeddings = await document_crud.get_ids_missing_embeddings(self.db)
        return QueueDiagnostics(
            counts=await job_crud.counts_by_type_and_status(self.db),
            eligible={
                job_type.value: await job_crud.count_eligible(self.db, job_type, now)
                for job_type in JobType
            },
            documents_missing_chunks=len(missing_chunks),
            documents_missing_embeddings=len(missing_embeddings),
            chunker_version=CHUNKER_VERSION,
        )
