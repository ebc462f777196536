"""
Ingest API endpoints.

Routes: POST /ingest, POST /ingest/bulk

Dependencies: legal_pipeline.application.services.ingestion_service
System role: Synchronous document ingestion HTTP API
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from legal_pipeline.api.deps import get_ingestion_service, require_internal_key
from legal_pipeline.api.routers.error_handling import handle_pipeline_errors
from legal_pipeline.application.services.ingestion_service import (
    BulkIngestResult,
    DedupMode,
    IngestCommand,
    IngestionService,
    IngestResult,
)

router = APIRouter(
    prefix="/ingest",
    tags=["ingest"],
    dependencies=[Depends(require_internal_key)],
)


class IngestRequest(BaseModel):
    """Single-document ingest body."""

    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName", min_length=1)
    mime_type: str = Field(default="text/plain", alias="mimeType")
    raw_text: str = Field(alias="rawText")
    source_url: str | None = Field(default=None, alias="sourceUrl")
    dedup_mode: DedupMode = Field(default=DedupMode.SKIP, alias="dedupMode")


class BulkIngestRequest(BaseModel):
    """Multi-document payload: JSON array, JSONL, HTML or raw text."""

    model_config = ConfigDict(populate_by_name=True)

    payload: str = Field(min_length=1)
    file_name: str = Field(default="input.txt", alias="fileName")
    mime_type: str = Field(default="text/plain", alias="mimeType")
    source_url: str | None = Field(default=None, alias="sourceUrl")
    dedup_mode: DedupMode = Field(default=DedupMode.SKIP, alias="dedupMode")


@router.post("", response_model=IngestResult)
@handle_pipeline_errors
async def ingest_document(
    request: IngestRequest,
    service: IngestionService = Depends(get_ingestion_service),
) -> IngestResult:
    """
    Normalize, chunk, QA-check and store one document.

    Raises:
        HTTPException(400): Missing or empty fields
        HTTPException(413): rawText over the size limit
        HTTPException(422): Normalization or QA gate failure
        HTTPException(500): Persistence failure
    """
    return await service.ingest(
        IngestCommand(
            file_name=request.file_name,
            mime_type=request.mime_type,
            raw_text=request.raw_text,
            source_url=request.source_url,
            dedup_mode=request.dedup_mode,
        )
    )


@router.post("/bulk", response_model=BulkIngestResult)
@handle_pipeline_errors
async def ingest_bulk(
    request: BulkIngestRequest,
    service: IngestionService = Depends(get_ingestion_service),
) -> BulkIngestResult:
    """Ingest every document found in a multi-document payload."""
    return await service.ingest_bulk(
        request.payload,
        file_name=request.file_name,
        mime_type=request.mime_type,
        dedup_mode=request.dedup_mode,
        source_url=request.source_url,
    )
