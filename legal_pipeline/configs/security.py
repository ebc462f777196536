"""
Internal API security settings.

Shared-secret configuration for the internal ingest and worker endpoints.

Dependencies: pydantic, pydantic_settings
System role: Boundary authentication configuration
"""

from pydantic import Field

from legal_pipeline.configs.base import BaseSettings


class SecuritySettings(BaseSettings):
    """Internal shared-secret settings (no env prefix)."""

    internal_ingest_key: str | None = Field(
        default=None,
        description="Expected value of the x-internal-key header",
    )
    allow_unauth_ingest: bool = Field(
        default=False,
        description="Accept requests when no key is configured (local development only)",
    )
