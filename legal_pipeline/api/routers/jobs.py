"""
Job queue API endpoints.

Routes: POST /jobs/enqueue, GET /jobs/diagnostics, POST /jobs/recover

Dependencies: legal_pipeline.application.services.job_queue_service
System role: Job queue maintenance HTTP API
"""

from enum import Enum

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from legal_pipeline.api.deps import get_job_queue_service, require_internal_key
from legal_pipeline.api.routers.error_handling import handle_pipeline_errors
from legal_pipeline.application.services import JobQueueService, QueueDiagnostics
from legal_pipeline.boundary.db.models import JobType
from legal_pipeline.core.exceptions import PersistenceError

router = APIRouter(
    prefix="/jobs",
    tags=["jobs"],
    dependencies=[Depends(require_internal_key)],
)


class EnqueueAction(str, Enum):
    MISSING_CHUNKS = "enqueue_missing_chunks"
    MISSING_EMBEDDINGS = "enqueue_missing_embeddings"
    RESET_DEAD_LETTERS = "reset_dead_letters"


class EnqueueRequest(BaseModel):
    action: EnqueueAction
    job_type: JobType | None = None
    source_table: str | None = None


class EnqueueResponse(BaseModel):
    action: EnqueueAction
    affected: int


class RecoverResponse(BaseModel):
    recovered: int


@router.post("/enqueue", response_model=EnqueueResponse)
@handle_pipeline_errors
async def enqueue(
    request: EnqueueRequest,
    queue: JobQueueService = Depends(get_job_queue_service),
) -> EnqueueResponse:
    """
    Run one queue maintenance action.

    Actions:
        enqueue_missing_chunks: Chunk jobs for documents without a current chunk set
        enqueue_missing_embeddings: Embed jobs for documents with unembedded chunks
        reset_dead_letters: Dead-lettered jobs back to pending, optionally one job_type
    """
    try:
        if request.action is EnqueueAction.MISSING_CHUNKS:
            affected = await queue.enqueue_missing_chunks(request.source_table)
        elif request.action is EnqueueAction.MISSING_EMBEDDINGS:
            affected = await queue.enqueue_missing_embeddings(request.source_table)
        else:
            affected = await queue.reset_dead_letters(request.job_type)
        await queue.db.commit()
    except SQLAlchemyError as e:
        await queue.db.rollback()
        raise PersistenceError(f"Queue action {request.action.value} failed: {e}") from e
    return EnqueueResponse(action=request.action, affected=affected)


@router.get("/diagnostics", response_model=QueueDiagnostics)
@handle_pipeline_errors
async def diagnostics(queue: JobQueueService = Depends(get_job_queue_service)) -> QueueDiagnostics:
    """Job counts by type and status, plus documents awaiting work."""
    return await queue.diagnostics()


@router.post("/recover", response_model=RecoverResponse)
@handle_pipeline_errors
async def recover(queue: JobQueueService = Depends(get_job_queue_service)) -> RecoverResponse:
    """Return jobs with expired leases to pending."""
    recovered = await queue.recover_expired_leases()
    await queue.db.commit()
    return RecoverResponse(recovered=recovered)
