"""
Pipeline job CRUD operations.

Implements the lease protocol: atomic claim with FOR UPDATE SKIP LOCKED,
resolution guarded by the lease holder, and the expired-lease sweep.

Dependencies: sqlalchemy, legal_pipeline.boundary.db.models
System role: Job queue persistence for chunk and embed workers
"""

from datetime import datetime, timedelta
from typing import Sequence
from uuid import UUID

from sqlalchemy import Update, and_, func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from legal_pipeline.boundary.db.CRUD.base_crud import BaseCRUD
from legal_pipeline.boundary.db.models import (
    CLAIMABLE_STATUSES,
    JobStatus,
    JobType,
    PipelineJobModel,
)

# States an enqueue may move back to pending
REQUEUEABLE_STATUSES = (JobStatus.DONE, JobStatus.DEAD_LETTER)


def _eligible(job_type: JobType, now: datetime, source_table: str | None = None) -> list:
    conditions = [
        PipelineJobModel.job_type == job_type,
        PipelineJobModel.status.in_(CLAIMABLE_STATUSES),
        PipelineJobModel.attempts < PipelineJobModel.max_attempts,
        or_(PipelineJobModel.next_run_at.is_(None), PipelineJobModel.next_run_at <= now),
    ]
    if source_table is not None:
        conditions.append(PipelineJobModel.source_table == source_table)
    return conditions


class JobCRUD(BaseCRUD[PipelineJobModel]):
    """
    CRUD operations for PipelineJobModel.

    Every mutation of a processing job is conditioned on the worker_id
    holding its lease.
    """

    def __init__(self) -> None:
        super().__init__(PipelineJobModel)

    @staticmethod
    def build_claim_statement(
        job_type: JobType,
        limit: int,
        worker_id: str,
        lease_seconds: int,
        now: datetime,
        source_table: str | None = None,
    ) -> Update:
        """
        Single-statement claim of up to limit eligible jobs.

        The inner SELECT locks candidate rows with SKIP LOCKED so
        concurrent claimers receive disjoint sets.
        """
        candidates = (
            select(PipelineJobModel.id)
            .where(*_eligible(job_type, now, source_table))
            .order_by(PipelineJobModel.created_at)
            .limit(limit)
            .with_for_update(skip_locked=True)
        )
        return (
            update(PipelineJobModel)
            .where(PipelineJobModel.id.in_(candidates.scalar_subquery()))
            .values(
                status=JobStatus.PROCESSING,
                started_at=now,
                lease_expires_at=now + timedelta(seconds=lease_seconds),
                worker_id=worker_id,
            )
            .returning(PipelineJobModel)
            .execution_options(synchronize_session=False, populate_existing=True)
        )

    async def claim(
        self,
        session: AsyncSession,
        job_type: JobType,
        limit: int,
        worker_id: str,
        lease_seconds: int,
        now: datetime,
        source_table: str | None = None,
    ) -> Sequence[PipelineJobModel]:
        """
        Atomically lease up to limit eligible jobs to worker_id.

        Args:
            session: Async database session
            job_type: Queue to claim from
            limit: Maximum jobs to lease
            worker_id: Lease holder identity
            lease_seconds: Lease duration
            now: Claim time
            source_table: Restrict to documents of one table

        Returns:
            The claimed jobs, already in processing state
        """
        stmt = self.build_claim_statement(job_type, limit, worker_id, lease_seconds, now, source_table)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def _resolve(
        self,
        session: AsyncSession,
        job_id: UUID,
        holder: str,
        **values,
    ) -> bool:
        stmt = (
            update(PipelineJobModel)
            .where(
                PipelineJobModel.id == job_id,
                PipelineJobModel.worker_id == holder,
                PipelineJobModel.status == JobStatus.PROCESSING,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def resolve_success(
        self,
        session: AsyncSession,
        job_id: UUID,
        worker_id: str,
        attempts: int,
        now: datetime,
        note: str | None = None,
    ) -> bool:
        """
        Mark a leased job done.

        Returns:
            False when worker_id no longer holds the lease
        """
        return await self._resolve(
            session,
            job_id,
            worker_id,
            status=JobStatus.DONE,
            attempts=attempts,
            completed_at=now,
            lease_expires_at=None,
            last_error=note,
        )

    async def resolve_failure(
        self,
        session: AsyncSession,
        job_id: UUID,
        worker_id: str,
        attempts: int,
        status: JobStatus,
        error: str,
        next_run_at: datetime | None = None,
    ) -> bool:
        """
        Record a failed attempt as a retry or a dead letter.

        Returns:
            False when worker_id no longer holds the lease
        """
        return await self._resolve(
            session,
            job_id,
            worker_id,
            status=status,
            attempts=attempts,
            next_run_at=next_run_at,
            lease_expires_at=None,
            worker_id=None,
            last_error=error,
        )

    async def recover_expired_leases(self, session: AsyncSession, now: datetime) -> int:
        """
        Return processing jobs with an expired lease to pending.

        Returns:
            Number of jobs recovered
        """
        stmt = (
            update(PipelineJobModel)
            .where(
                PipelineJobModel.status == JobStatus.PROCESSING,
                PipelineJobModel.lease_expires_at < now,
            )
            .values(status=JobStatus.PENDING, lease_expires_at=None, worker_id=None)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    async def count_eligible(
        self,
        session: AsyncSession,
        job_type: JobType,
        now: datetime,
        source_table: str | None = None,
    ) -> int:
        """Jobs a worker could claim right now."""
        stmt = select(func.count()).select_from(PipelineJobModel).where(
            *_eligible(job_type, now, source_table)
        )
        result = await session.execute(stmt)
        return result.scalar_one()

    async def counts_by_type_and_status(self, session: AsyncSession) -> dict[str, dict[str, int]]:
        """Job counts keyed by job type, then status."""
        stmt = select(
            PipelineJobModel.job_type,
            PipelineJobModel.status,
            func.count(),
        ).group_by(PipelineJobModel.job_type, PipelineJobModel.status)
        result = await session.execute(stmt)

        counts: dict[str, dict[str, int]] = {}
        for job_type, status, count in result.all():
            counts.setdefault(job_type.value, {})[status.value] = count
        return counts

    async def reset_dead_letters(
        self,
        session: AsyncSession,
        job_type: JobType | None = None,
    ) -> int:
        """Move dead-lettered jobs back to pending with attempts reset."""
        stmt = (
            update(PipelineJobModel)
            .where(PipelineJobModel.status == JobStatus.DEAD_LETTER)
            .values(
                status=JobStatus.PENDING,
                attempts=0,
                next_run_at=None,
                last_error=None,
            )
            .execution_options(synchronize_session=False)
        )
        if job_type is not None:
            stmt = stmt.where(PipelineJobModel.job_type == job_type)
        result = await session.execute(stmt)
        return result.rowcount or 0

    async def enqueue(
        self,
        session: AsyncSession,
        document_ids: Sequence[UUID],
        job_type: JobType,
        source_table: str,
        max_attempts: int,
    ) -> int:
        """
        Ensure a pending job exists for each document.

        Missing jobs are created. Finished or dead-lettered jobs are moved
        back to pending with attempts reset; pending, failed and processing
        jobs are left alone.

        Returns:
            Number of jobs created or requeued
        """
        if not document_ids:
            return 0

        scope = and_(
            PipelineJobModel.document_id.in_(document_ids),
            PipelineJobModel.job_type == job_type,
            PipelineJobModel.source_table == source_table,
        )
        existing = await session.execute(select(PipelineJobModel.document_id).where(scope))
        existing_ids = set(existing.scalars().all())

        missing = [doc_id for doc_id in dict.fromkeys(document_ids) if doc_id not in existing_ids]
        if missing:
            await session.execute(
                insert(PipelineJobModel),
                [
                    {
                        "document_id": doc_id,
                        "source_table": source_table,
                        "job_type": job_type,
                        "status": JobStatus.PENDING,
                        "attempts": 0,
                        "max_attempts": max_attempts,
                    }
                    for doc_id in missing
                ],
            )

        requeued = await session.execute(
            update(PipelineJobModel)
            .where(scope, PipelineJobModel.status.in_(REQUEUEABLE_STATUSES))
            .values(
                status=JobStatus.PENDING,
                attempts=0,
                next_run_at=None,
                completed_at=None,
                last_error=None,
            )
            .execution_options(synchronize_session=False)
        )
        return len(missing) + (requeued.rowcount or 0)


job_crud = JobCRUD()
