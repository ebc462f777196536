"""
Embedding configuration service.

Resolves the active embedding model from the app_settings table with a
short TTL cache, falling back to the configured default.

Dependencies: sqlalchemy, legal_pipeline.boundary.db
System role: Runtime-switchable embedding model selection
"""

import time
from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from legal_pipeline.boundary.db.CRUD import app_setting_crud
from legal_pipeline.configs.embedding import EmbeddingSettings
from legal_pipeline.observability import get_logger

logger = get_logger(__name__)

EMBEDDING_SETTING_KEY = "embedding_provider"


class EmbeddingConfigService:
    """
    Cached model lookup.

    One instance is shared by the embed workers of a process; the cache
    lives on the instance.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        settings: EmbeddingSettings,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.session_factory = session_factory
        self.settings = settings
        self._clock = clock
        self._value: str | None = None
        self._fetched_at: float | None = None

    def invalidate(self) -> None:
        self._value = None
        self._fetched_at = None

    def _is_fresh(self) -> bool:
        return (
            self._fetched_at is not None
            and self._clock() - self._fetched_at < self.settings.config_ttl_seconds
        )

    async def get_model(self) -> str:
        """
        Active embedding model name.

        A stored {"model": ...} under the embedding_provider key wins over
        the configured default. Lookup failures keep the last known value.
        """
        if self._value is not None and self._is_fresh():
            return self._value

        model = self.settings.model
        try:
            async with self.session_factory() as session:
                stored = await app_setting_crud.get_value(session, EMBEDDING_SETTING_KEY)
        except SQLAlchemyError as e:
            logger.warning(f"{__name__}:get_model - app_settings lookup failed: {e}")
            return self._value or model

        if stored and isinstance(stored.get("model"), str) and stored["model"].strip():
            model = stored["model"].strip()

        self._value = model
        self._fetched_at = self._clock()
        return model
