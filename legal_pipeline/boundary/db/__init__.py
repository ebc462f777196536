"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - LegalDocumentModel, LegalChunkModel, PipelineJobModel, AppSettingModel: Tables
  - JobStatus, JobType, EmbeddingStatus: Enum types for state tracking
  - document_crud, chunk_crud, job_crud, app_setting_crud: CRUD singletons

Dependencies: sqlalchemy, legal_pipeline.configs
System role: Database adapter for documents, chunk sets and the job queue
"""

from legal_pipeline.boundary.db.base import Base, JsonValue, TimestampMixin, UUIDMixin, utcnow
from legal_pipeline.boundary.db.connection import (
    build_session_factory,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from legal_pipeline.boundary.db.models import (
    AppSettingModel,
    EmbeddingStatus,
    JobStatus,
    JobType,
    LegalChunkModel,
    LegalDocumentModel,
    PipelineJobModel,
)
from legal_pipeline.boundary.db.CRUD import (
    BaseCRUD,
    app_setting_crud,
    chunk_crud,
    document_crud,
    job_crud,
)

__all__ = [
    # Base classes
    "Base",
    "JsonValue",
    "TimestampMixin",
    "UUIDMixin",
    "utcnow",
    # Connection
    "build_session_factory",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "AppSettingModel",
    "EmbeddingStatus",
    "JobStatus",
    "JobType",
    "LegalChunkModel",
    "LegalDocumentModel",
    "PipelineJobModel",
    # CRUD
    "BaseCRUD",
    "app_setting_crud",
    "chunk_crud",
    "document_crud",
    "job_crud",
]
