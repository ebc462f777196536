"""
Pipeline settings aggregate.

Groups are built lazily with default_factory so each Settings() re-reads
the environment; tests pass explicit groups instead.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from legal_pipeline.configs.base import BaseSettings
from legal_pipeline.configs.celery_config import CelerySettings
from legal_pipeline.configs.chunking import ChunkingSettings
from legal_pipeline.configs.database import DatabaseSettings
from legal_pipeline.configs.embedding import EmbeddingSettings
from legal_pipeline.configs.jobs import JobSettings
from legal_pipeline.configs.notifications import NotificationSettings
from legal_pipeline.configs.security import SecuritySettings


class Settings(BaseSettings):
    """All settings groups of the API and the Celery workers."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    chunking: ChunkingSettings = Field(default_factory=ChunkingSettings)
    jobs: JobSettings = Field(default_factory=JobSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    celery: CelerySettings = Field(default_factory=CelerySettings)


@lru_cache
def get_settings() -> Settings:
    """Process-wide Settings, read once from the environment."""
    return Settings()
