"""
Database models package.

Exports:
  - LegalDocumentModel, EmbeddingStatus: Document ORM model and embedding state
  - LegalChunkModel: Chunk ORM model
  - PipelineJobModel, JobStatus, JobType: Job queue ORM model and enums
  - AppSettingModel: Runtime settings

Dependencies: sqlalchemy, legal_pipeline.boundary.db.base
System role: Database model definitions for domain entities
"""

from legal_pipeline.boundary.db.models.app_setting_model import AppSettingModel
from legal_pipeline.boundary.db.models.chunk_model import LegalChunkModel
from legal_pipeline.boundary.db.models.document_model import EmbeddingStatus, LegalDocumentModel
from legal_pipeline.boundary.db.models.job_model import (
    CLAIMABLE_STATUSES,
    JobStatus,
    JobType,
    PipelineJobModel,
)

__all__ = [
    "AppSettingModel",
    "CLAIMABLE_STATUSES",
    "EmbeddingStatus",
    "JobStatus",
    "JobType",
    "LegalChunkModel",
    "LegalDocumentModel",
    "PipelineJobModel",
]
