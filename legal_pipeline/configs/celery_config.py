"""
Celery settings.

One Redis instance carries the broker and the result backend on separate
databases. The beat schedule drives the chunk worker, the embed worker
and the expired-lease sweep.

Dependencies: pydantic, pydantic_settings
System role: Periodic worker scheduling
"""

from pydantic import Field

from legal_pipeline.configs.base import BaseSettings, env_config

TASKS_MODULE = "legal_pipeline.workers.tasks.pipeline_tasks"


class CelerySettings(BaseSettings):
    """Celery, Redis and beat configuration."""

    model_config = env_config("CELERY_")

    redis_host: str = Field(default="localhost", description="Redis host")
    redis_port: int = Field(default=6379, description="Redis port")
    broker_db: int = Field(default=0, description="Redis database for the broker")
    result_db: int = Field(default=1, description="Redis database for task results")
    timezone: str = Field(default="UTC", description="Celery timezone")

    chunk_worker_interval: float = Field(default=60.0, description="Seconds between chunk runs")
    embed_worker_interval: float = Field(default=60.0, description="Seconds between embed runs")
    lease_recovery_interval: float = Field(default=120.0, description="Seconds between expired-lease sweeps")
    task_time_limit: int = Field(
        default=900,
        description="Hard kill after this many seconds; kept above the longest job lease",
    )

    def _redis_url(self, db: int) -> str:
        return f"redis://{self.redis_host}:{self.redis_port}/{db}"

    @property
    def broker_url(self) -> str:
        return self._redis_url(self.broker_db)

    @property
    def result_backend_url(self) -> str:
        return self._redis_url(self.result_db)

    def beat_schedule(self) -> dict[str, dict]:
        """Periodic entries keyed by schedule name."""
        return {
            "run-chunk-worker": {
                "task": f"{TASKS_MODULE}.run_chunk_worker",
                "schedule": self.chunk_worker_interval,
            },
            "run-embed-worker": {
                "task": f"{TASKS_MODULE}.run_embed_worker",
                "schedule": self.embed_worker_interval,
            },
            "recover-expired-leases": {
                "task": f"{TASKS_MODULE}.recover_expired_leases",
                "schedule": self.lease_recovery_interval,
            },
        }
