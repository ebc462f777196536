"""
Embed worker.

Drains embed jobs: computes vectors for the chunks of each document's
current chunk set that still lack one.

Dependencies: sqlalchemy, legal_pipeline.boundary.embedding
System role: Background vectorization of chunk sets
"""

from collections.abc import Callable
from datetime import datetime

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from legal_pipeline.application.services.embedding_config_service import EmbeddingConfigService
from legal_pipeline.application.services.worker_base import JobOutcome, LeasedJobWorker
from legal_pipeline.boundary.db.base import utcnow
from legal_pipeline.boundary.db.CRUD import chunk_crud, document_crud
from legal_pipeline.boundary.db.models import EmbeddingStatus, JobType, PipelineJobModel
from legal_pipeline.boundary.embedding import EmbeddingProvider
from legal_pipeline.configs.jobs import JobSettings
from legal_pipeline.core.exceptions import DocumentNotFoundError
from legal_pipeline.observability import get_logger

logger = get_logger(__name__)


class EmbedWorkerReport(BaseModel):
    picked: int
    processed_ok: int
    processed_failed: int
    pending_remaining: int
    duration_ms: int
    chunks_embedded: int = 0
    model: str | None = None
    recovered: int = 0
    errors: list[str] = Field(default_factory=list)


class EmbedWorker(LeasedJobWorker):
    """Lease-based embed job processor."""

    job_type = JobType.EMBED
    worker_prefix = "embed"

    def __init__(
        self,
        session_factory: async_sessionmaker,
        settings: JobSettings,
        provider: EmbeddingProvider,
        config_service: EmbeddingConfigService,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        super().__init__(session_factory, settings, clock)
        self.provider = provider
        self.config_service = config_service
        self._model: str | None = None

    @property
    def lease_seconds(self) -> int:
        return self.settings.embed_lease_seconds

    async def _process(self, session: AsyncSession, job: PipelineJobModel) -> JobOutcome:
        document = await document_crud.get_by_id(session, job.document_id)
        if document is None:
            raise DocumentNotFoundError(str(job.document_id))

        chunks = await chunk_crud.get_unembedded(session, document.id, document.chunk_set_version)
        if not chunks:
            total = await chunk_crud.count_by_document(session, document.id, document.chunk_set_version)
            status = EmbeddingStatus.DONE if total else EmbeddingStatus.SKIPPED
            await document_crud.update_by_id(session, document.id, embedding_status=status)
            note = "nothing to embed"
            await self._resolve_success(session, job, note)
            return JobOutcome(ok=True, note=note)

        model = self._model or await self.config_service.get_model()
        vectors = await self.provider.embed_texts([chunk.chunk_text for chunk in chunks], model)

        embedded_at = self.clock()
        for chunk, vector in zip(chunks, vectors):
            await chunk_crud.set_embedding(session, chunk.id, vector, model, embedded_at)
        await document_crud.update_by_id(
            session,
            document.id,
            embedding_status=EmbeddingStatus.DONE,
        )
        await self._resolve_success(session, job)
        logger.info(
            f"{__name__}:_process - Embedded {len(chunks)} chunks of document {document.id} "
            f"with {model}"
        )
        return JobOutcome(ok=True, chunks=len(chunks))

    async def _on_dead_letter(self, session: AsyncSession, job: PipelineJobModel) -> None:
        await document_crud.update_by_id(
            session,
            job.document_id,
            embedding_status=EmbeddingStatus.FAILED,
        )

    async def run(self, concurrency_docs: int | None = None) -> EmbedWorkerReport:
        """
        Claim and process up to concurrency_docs embed jobs.

        The model is resolved once per run so every job of the run embeds
        with the same model.
        """
        limit = concurrency_docs or self.settings.embed_default_batch
        limit = max(1, min(limit, self.settings.embed_max_batch))
        self._model = await self.config_service.get_model()
        try:
            summary = await self.drain(limit)
        finally:
            model, self._model = self._model, None
        return EmbedWorkerReport(
            picked=summary.picked,
            processed_ok=summary.processed_ok,
            processed_failed=summary.processed_failed,
            pending_remaining=summary.pending_remaining,
            duration_ms=summary.duration_ms,
            chunks_embedded=summary.chunks,
            model=model,
            recovered=summary.recovered,
            errors=summary.errors,
        )
