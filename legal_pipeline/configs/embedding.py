"""
Embedding provider configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Embedding provider and call policy
"""

from pydantic import Field

from legal_pipeline.configs.base import BaseSettings, env_config


class EmbeddingSettings(BaseSettings):
    """Embedding provider configuration."""

    model_config = env_config("EMBEDDING_")

    model: str = Field(
        default="models/gemini-embedding-001",
        description="Default embedding model, overridable via app_settings",
    )
    dimensions: int = Field(default=1024, description="Output dimensionality")
    max_chars_per_text: int = Field(default=8000, description="Texts are truncated to this length")
    batch_size: int = Field(default=32, description="Texts per provider call")
    timeout_seconds: float = Field(default=60.0, description="Timeout per provider call")
    max_retries: int = Field(default=3, description="Provider call attempts")
    config_ttl_seconds: float = Field(
        default=30.0,
        description="How long the app_settings model override is cached",
    )
