"""API-specific dependencies."""

from .dependencies import (
    check_internal_key,
    get_chunk_worker,
    get_document_service,
    get_embed_worker,
    get_ingestion_service,
    get_job_queue_service,
    get_service_cache,
    get_session_factory,
    get_settings_dependency,
    require_internal_key,
)

__all__ = [
    "check_internal_key",
    "get_chunk_worker",
    "get_document_service",
    "get_embed_worker",
    "get_ingestion_service",
    "get_job_queue_service",
    "get_service_cache",
    "get_session_factory",
    "get_settings_dependency",
    "require_internal_key",
]
