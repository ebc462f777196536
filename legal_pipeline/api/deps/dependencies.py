"""
Dependency injection container.

Factory functions for FastAPI dependencies, plus the shared-secret guard
for internal endpoints.

Dependencies: fastapi, legal_pipeline.configs, legal_pipeline.application
System role: DI container for service injection
"""

import hmac

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from legal_pipeline.application.services import (
    ChunkWorker,
    DocumentService,
    EmbedWorker,
    EmbeddingConfigService,
    IngestionService,
    JobQueueService,
)
from legal_pipeline.boundary.db import get_async_db, get_async_session_factory
from legal_pipeline.boundary.embedding import EmbeddingProvider
from legal_pipeline.boundary.notifications import TableRendererNotifier
from legal_pipeline.configs import Settings, get_settings
from legal_pipeline.configs.security import SecuritySettings
from legal_pipeline.core.exceptions import AuthenticationError, ConfigurationError
from legal_pipeline.observability import get_logger

logger = get_logger(__name__)

INTERNAL_KEY_HEADER = "x-internal-key"


class ServiceCache:
    """Container for process-wide service instances."""

    def __init__(self):
        self._embedding_provider = None
        self._embedding_config = None

    def embedding_provider(self, settings: Settings) -> EmbeddingProvider:
        if self._embedding_provider is None:
            self._embedding_provider = EmbeddingProvider(settings.embedding)
        return self._embedding_provider

    def embedding_config(
        self,
        session_factory: async_sessionmaker,
        settings: Settings,
    ) -> EmbeddingConfigService:
        if self._embedding_config is None:
            self._embedding_config = EmbeddingConfigService(session_factory, settings.embedding)
        return self._embedding_config

    def clear(self) -> None:
        """Clear all cached instances."""
        self._embedding_provider = None
        self._embedding_config = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_session_factory() -> async_sessionmaker:
    """Session factory for services that open one session per job."""
    return get_async_session_factory()


def check_internal_key(provided: str | None, security: SecuritySettings) -> None:
    """
    Compare a presented key with the configured shared secret.

    Fails closed: without a configured key every caller is rejected
    unless allow_unauth_ingest is set.

    Raises:
        ConfigurationError: No key configured
        AuthenticationError: Key missing or wrong
    """
    expected = security.internal_ingest_key
    if not expected:
        if security.allow_unauth_ingest:
            return
        raise ConfigurationError("INTERNAL_INGEST_KEY is not configured")
    if not provided or not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise AuthenticationError("Missing or invalid internal key")


def require_internal_key(
    x_internal_key: str | None = Header(default=None, alias=INTERNAL_KEY_HEADER),
    settings: Settings = Depends(get_settings_dependency),
) -> None:
    """
    FastAPI guard for internal endpoints.

    Raises:
        HTTPException(500): No key configured
        HTTPException(401): Header missing or wrong
    """
    try:
        check_internal_key(x_internal_key, settings.security)
    except ConfigurationError as e:
        logger.error(f"{__name__}:require_internal_key - {e.message}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal key is not configured",
        )
    except AuthenticationError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def get_ingestion_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> IngestionService:
    """
    Get ingestion service instance.

    Args:
        db: Async database session (injected via Depends)
        settings: Application settings

    Returns:
        IngestionService: Ingestion orchestrator with table notifier
    """
    notifier = TableRendererNotifier(
        settings.notifications,
        internal_key=settings.security.internal_ingest_key,
    )
    return IngestionService(db=db, settings=settings, notifier=notifier)


def get_job_queue_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> JobQueueService:
    return JobQueueService(db=db, settings=settings.jobs)


def get_document_service(db: AsyncSession = Depends(get_async_db)) -> DocumentService:
    return DocumentService(db=db)


def get_chunk_worker(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    settings: Settings = Depends(get_settings_dependency),
) -> ChunkWorker:
    return ChunkWorker(session_factory, settings.jobs, chunking=settings.chunking)


def get_embed_worker(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    settings: Settings = Depends(get_settings_dependency),
) -> EmbedWorker:
    cache = get_service_cache()
    return EmbedWorker(
        session_factory,
        settings.jobs,
        provider=cache.embedding_provider(settings),
        config_service=cache.embedding_config(session_factory, settings),
    )
