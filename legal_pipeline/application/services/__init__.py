"""
Application services.

Exports:
  - IngestionService: normalize, chunk, QA gate and persist
  - JobQueueService: retry policy and queue maintenance
  - ChunkWorker, EmbedWorker: lease-based job processors
  - EmbeddingConfigService: cached active embedding model
  - DocumentService: lookup, JSONL export and audit
"""

from legal_pipeline.application.services.chunk_worker import ChunkWorker, ChunkWorkerReport
from legal_pipeline.application.services.document_service import AuditReport, DocumentService
from legal_pipeline.application.services.embed_worker import EmbedWorker, EmbedWorkerReport
from legal_pipeline.application.services.embedding_config_service import EmbeddingConfigService
from legal_pipeline.application.services.ingestion_service import (
    BulkIngestResult,
    BulkItemResult,
    DedupMode,
    IngestCommand,
    IngestionService,
    IngestResult,
    drain_notifications,
)
from legal_pipeline.application.services.job_queue_service import (
    JobQueueService,
    QueueDiagnostics,
    backoff_seconds,
)

__all__ = [
    "AuditReport",
    "BulkIngestResult",
    "BulkItemResult",
    "ChunkWorker",
    "ChunkWorkerReport",
    "DedupMode",
    "DocumentService",
    "EmbedWorker",
    "EmbedWorkerReport",
    "EmbeddingConfigService",
    "IngestCommand",
    "IngestResult",
    "IngestionService",
    "JobQueueService",
    "QueueDiagnostics",
    "backoff_seconds",
    "drain_notifications",
]
