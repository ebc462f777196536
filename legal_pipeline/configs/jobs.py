"""
Job queue configuration settings.

Lease durations, retry budget, backoff and worker batch sizes for the
chunk and embed workers.

Dependencies: pydantic, pydantic_settings
System role: Job scheduling policy
"""

from pydantic import Field

from legal_pipeline.configs.base import BaseSettings, env_config


class JobSettings(BaseSettings):
    """Lease, retry and batching policy for pipeline jobs."""

    model_config = env_config("JOBS_")

    max_attempts: int = Field(default=5, description="Attempts before dead_letter")
    backoff_base_seconds: int = Field(default=120, description="Backoff after the first failure")
    backoff_max_seconds: int = Field(default=3600, description="Backoff ceiling")

    chunk_lease_seconds: int = Field(default=300, description="Chunk job lease")
    chunk_default_concurrency: int = Field(default=10, description="Documents claimed per run")
    chunk_max_concurrency: int = Field(default=20, description="Upper bound on concurrency_docs")
    chunk_max_input_chars: int = Field(
        default=200_000,
        description="Content beyond this is truncated before chunking",
    )
    chunk_min_content_chars: int = Field(
        default=100,
        description="Content shorter than this resolves done without chunks",
    )
    chunk_insert_batch_size: int = Field(default=100, description="Chunk rows per insert batch")

    embed_lease_seconds: int = Field(default=600, description="Embed job lease")
    embed_default_batch: int = Field(default=25, description="Documents claimed per run")
    embed_max_batch: int = Field(default=50, description="Upper bound on concurrency_docs")

    parallel_batch: int = Field(default=5, description="Jobs processed concurrently")
    default_source_table: str = Field(
        default="legal_documents",
        description="source_table recorded on enqueued jobs",
    )
