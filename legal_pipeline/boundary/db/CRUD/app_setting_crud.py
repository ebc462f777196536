"""
App setting CRUD operations.

Dependencies: sqlalchemy, legal_pipeline.boundary.db.models
System role: Runtime configuration reads and writes
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from legal_pipeline.boundary.db.CRUD.base_crud import BaseCRUD
from legal_pipeline.boundary.db.models import AppSettingModel


class AppSettingCRUD(BaseCRUD[AppSettingModel]):
    """CRUD operations for AppSettingModel, keyed by name."""

    def __init__(self) -> None:
        super().__init__(AppSettingModel)

    async def get_value(self, session: AsyncSession, key: str) -> dict | None:
        """JSON value stored under key, or None."""
        result = await session.execute(select(AppSettingModel.value).where(AppSettingModel.key == key))
        return result.scalar_one_or_none()

    async def set_value(self, session: AsyncSession, key: str, value: dict) -> AppSettingModel:
        """Insert or replace the value under key."""
        setting = await session.get(AppSettingModel, key)
        if setting is None:
            setting = AppSettingModel(key=key, value=value)
            session.add(setting)
        else:
            setting.value = value
        await session.flush()
        return setting


app_setting_crud = AppSettingCRUD()
