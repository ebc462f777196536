"""
Table renderer notification settings.

Dependencies: pydantic, pydantic_settings
System role: Outbound notification configuration
"""

from pydantic import Field

from legal_pipeline.configs.base import BaseSettings, env_config


class NotificationSettings(BaseSettings):
    """Table renderer endpoint configuration."""

    model_config = env_config("TABLE_RENDERER_")

    url: str | None = Field(default=None, description="Table renderer endpoint; unset disables it")
    timeout_seconds: float = Field(default=10.0, description="Request timeout")
