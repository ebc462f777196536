"""API routers."""

from .documents import router as documents_router
from .health import router as health_router
from .ingest import router as ingest_router
from .jobs import router as jobs_router
from .workers import router as workers_router

__all__ = [
    "documents_router",
    "health_router",
    "ingest_router",
    "jobs_router",
    "workers_router",
]
