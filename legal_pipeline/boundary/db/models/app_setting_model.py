"""
Application setting ORM model.

Key/value rows for runtime configuration that can change without a
deploy, such as the active embedding model.

Dependencies: sqlalchemy, legal_pipeline.boundary.db.base
System role: Runtime configuration storage
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from legal_pipeline.boundary.db.base import Base, JsonValue, TimestampMixin


class AppSettingModel(Base, TimestampMixin):
    """Runtime setting keyed by name."""

    __tablename__ = "app_settings"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[dict] = mapped_column(JsonValue, nullable=False, default=dict)
