"""
Worker API endpoints.

Routes: POST /workers/chunk, POST /workers/embed

Each call runs one worker invocation inline and reports what it did.

Dependencies: legal_pipeline.application.services
System role: HTTP trigger for chunk and embed workers
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from legal_pipeline.api.deps import get_chunk_worker, get_embed_worker, require_internal_key
from legal_pipeline.api.routers.error_handling import handle_pipeline_errors
from legal_pipeline.application.services import (
    ChunkWorker,
    ChunkWorkerReport,
    EmbedWorker,
    EmbedWorkerReport,
)

router = APIRouter(
    prefix="/workers",
    tags=["workers"],
    dependencies=[Depends(require_internal_key)],
)


class ChunkWorkerRequest(BaseModel):
    concurrency_docs: int | None = Field(default=None, ge=1)
    source_table: str | None = None


class EmbedWorkerRequest(BaseModel):
    concurrency_docs: int | None = Field(default=None, ge=1)


@router.post("/chunk", response_model=ChunkWorkerReport)
@handle_pipeline_errors
async def run_chunk_worker(
    request: ChunkWorkerRequest | None = None,
    worker: ChunkWorker = Depends(get_chunk_worker),
) -> ChunkWorkerReport:
    """Claim and process one batch of chunk jobs."""
    request = request or ChunkWorkerRequest()
    return await worker.run(
        concurrency_docs=request.concurrency_docs,
        source_table=request.source_table,
    )


@router.post("/embed", response_model=EmbedWorkerReport)
@handle_pipeline_errors
async def run_embed_worker(
    request: EmbedWorkerRequest | None = None,
    worker: EmbedWorker = Depends(get_embed_worker),
) -> EmbedWorkerReport:
    """Claim and process one batch of embed jobs."""
    request = request or EmbedWorkerRequest()
    return await worker.run(concurrency_docs=request.concurrency_docs)
