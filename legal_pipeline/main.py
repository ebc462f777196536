"""
HTTP entry point of the legal ingestion pipeline.

Mounts the ingest, worker, job, document and health routers under
/api/v1. Request schema errors are answered with 400 instead of FastAPI's
default 422, which is reserved for documents that fail validation.

Dependencies: fastapi, legal_pipeline.api, legal_pipeline.observability, legal_pipeline.configs
System role: Application initialization and configuration
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from legal_pipeline import __version__
from legal_pipeline.api import api_router
from legal_pipeline.api.deps import get_service_cache
from legal_pipeline.application.services import drain_notifications
from legal_pipeline.boundary.db import get_async_engine
from legal_pipeline.configs import get_settings
from legal_pipeline.core.chunking import CHUNKER_VERSION
from legal_pipeline.observability import configure_logging
from legal_pipeline.observability.middleware import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and report the auth mode; on exit flush notifications and dispose the pool."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(f"Application startup: chunker_version={CHUNKER_VERSION}")
    if not settings.security.internal_ingest_key:
        if settings.security.allow_unauth_ingest:
            logger.warning("INTERNAL_INGEST_KEY unset and ALLOW_UNAUTH_INGEST=true: internal endpoints are open")
        else:
            logger.error("INTERNAL_INGEST_KEY unset: internal endpoints will reject every request")

    yield

    await drain_notifications()
    get_service_cache().clear()
    await get_async_engine().dispose()
    logger.info("Application shutdown")


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client input errors (400)."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]


def create_app() -> FastAPI:
    """Build the pipeline API; the lifespan owns logging setup and pool disposal."""
    app = FastAPI(
        title="Legal Ingestion Pipeline API",
        description="Normalization, structural chunking and embedding of Armenian legal documents",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["content-type", "x-internal-key", "x-request-id"],
    )
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "legal_pipeline.main:app",
        host="0.0.0.0",
        port=8000,
    )
