"""
Pipeline job ORM model.

Durable queue rows for chunk and embed work. Workers claim rows under a
lease and resolve them; rows are never physically deleted.

Dependencies: sqlalchemy, legal_pipeline.boundary.db.base
System role: Lease-based job queue storage
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from legal_pipeline.boundary.db.base import Base, TimestampMixin, UUIDMixin


class JobType(str, enum.Enum):
    """
    Background job types.

    CHUNK: (Re)chunk a document's content_text
    EMBED: Compute vectors for a document's current chunks
    """

    CHUNK = "chunk"
    EMBED = "embed"


class JobStatus(str, enum.Enum):
    """
    Job lifecycle states.

    PENDING: Eligible once next_run_at has passed
    PROCESSING: Leased by worker_id until lease_expires_at
    DONE: Finished; last_error may hold a note
    FAILED: Failed attempt still eligible for retry
    DEAD_LETTER: Attempts exhausted; terminal until reset
    """

    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"
    DEAD_LETTER = "dead_letter"


CLAIMABLE_STATUSES = (JobStatus.PENDING, JobStatus.FAILED)


class PipelineJobModel(Base, UUIDMixin, TimestampMixin):
    """
    One job per (document_id, source_table, job_type).

    document_id carries no foreign key: source_table names the table the
    document lives in.

    Attributes:
        attempts: Completed attempts, success or failure
        max_attempts: Attempts before dead-lettering
        next_run_at: Earliest next claim; null means immediately
        lease_expires_at: End of the current worker's lease
        worker_id: Lease holder while processing
        last_error: Last failure message or success note
    """

    __tablename__ = "pipeline_jobs"
    __table_args__ = (
        UniqueConstraint(
            "document_id",
            "source_table",
            "job_type",
            name="uq_pipeline_jobs_doc_table_type",
        ),
        Index("ix_pipeline_jobs_claim", "job_type", "status", "next_run_at"),
    )

    document_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    source_table: Mapped[str] = mapped_column(String(64), nullable=False)
    job_type: Mapped[JobType] = mapped_column(
        Enum(JobType, native_enum=False),
        nullable=False,
    )
    status: Mapped[JobStatus] = mapped_column(
        Enum(JobStatus, native_enum=False),
        nullable=False,
        default=JobStatus.PENDING,
    )
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    next_run_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    lease_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    worker_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
