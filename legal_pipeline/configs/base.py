"""
Shared settings base.

Every settings group reads the same .env file and ignores unknown keys, so
one file can carry the variables of all groups.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict

ENV_FILE = ".env"


def env_config(prefix: str = "") -> SettingsConfigDict:
    """Settings config for a group whose variables share a prefix."""
    return SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        env_prefix=prefix,
        case_sensitive=False,
        extra="ignore",
    )


class BaseSettings(PydanticBaseSettings):
    """Base class for the pipeline settings groups."""

    model_config = env_config()

    log_level: str = Field(
        default="INFO",
        description="Root log level for the API and Celery processes",
    )
