"""
PostgreSQL settings.

The pipeline tables (legal_documents, legal_chunks, pipeline_jobs,
app_settings) live in one database. A full POSTGRES_URL wins over the
individual host/port/user fields, and postgres:// URLs are rewritten for
asyncpg.

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for ORM
"""

from pydantic import Field

from legal_pipeline.configs.base import BaseSettings, env_config

ASYNC_SCHEME = "postgresql+asyncpg://"


class DatabaseSettings(BaseSettings):
    """PostgreSQL connection and pool settings."""

    model_config = env_config("POSTGRES_")

    url: str | None = Field(default=None, description="Full connection URL; overrides the fields below")
    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    user: str = Field(default="postgres", description="PostgreSQL user")
    password: str = Field(default="postgres", description="PostgreSQL password")
    db: str = Field(default="legal_pipeline", description="PostgreSQL database name")
    ssl: bool = Field(default=False, description="Require TLS for the connection")

    pool_size: int = Field(default=10, description="API connection pool size")
    max_overflow: int = Field(default=20, description="Connections allowed beyond pool_size")
    pool_timeout: int = Field(default=30, description="Seconds to wait for a pooled connection")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    @property
    def async_database_url(self) -> str:
        """SQLAlchemy URL for the asyncpg driver."""
        if self.url:
            for prefix in ("postgres://", "postgresql://"):
                if self.url.startswith(prefix):
                    return ASYNC_SCHEME + self.url[len(prefix):]
            return self.url
        suffix = "?ssl=require" if self.ssl else ""
        return f"{ASYNC_SCHEME}{self.user}:{self.password}@{self.host}:{self.port}/{self.db}{suffix}"
