"""
Document API endpoints.

Routes:
- GET /documents/{id}/chunks.jsonl - JSONL export of the current chunk set
- GET /documents/{id}/audit - Chunk-set coverage and integrity metrics

Dependencies: legal_pipeline.application.services.document_service
System role: Document export HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from legal_pipeline.api.deps import get_document_service, require_internal_key
from legal_pipeline.api.routers.error_handling import handle_pipeline_errors
from legal_pipeline.application.services import AuditReport, DocumentService

router = APIRouter(
    prefix="/documents",
    tags=["documents"],
    dependencies=[Depends(require_internal_key)],
)

JSONL_MEDIA_TYPE = "application/x-ndjson"


@router.get("/{document_id}/chunks.jsonl", response_class=PlainTextResponse)
@handle_pipeline_errors
async def export_chunks(
    document_id: UUID,
    service: DocumentService = Depends(get_document_service),
) -> PlainTextResponse:
    """
    Export chunks as newline-delimited JSON.

    Raises:
        HTTPException(404): Document not found
    """
    lines = await service.export_jsonl(document_id)
    body = "\n".join(lines) + ("\n" if lines else "")
    return PlainTextResponse(body, media_type=JSONL_MEDIA_TYPE)


@router.get("/{document_id}/audit", response_model=AuditReport)
@handle_pipeline_errors
async def audit_document(
    document_id: UUID,
    service: DocumentService = Depends(get_document_service),
) -> AuditReport:
    """Coverage, gap, overlap and duplicate metrics for the current chunk set."""
    return await service.audit(document_id)
