"""
Generic CRUD for the pipeline tables.

Methods flush but never commit; the caller owns the transaction so a
chunk-set swap or a job resolution can span several CRUD calls.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from legal_pipeline.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """Row operations keyed by the UUID primary key of ModelT."""

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    def _pk_is(self, id: UUID) -> ColumnElement[bool]:
        return self.model.id == id

    async def create(self, session: AsyncSession, **values) -> ModelT:
        """Add one row and return it with server defaults loaded."""
        row = self.model(**values)
        session.add(row)
        await session.flush()
        await session.refresh(row)
        return row

    async def bulk_insert(self, session: AsyncSession, rows: list[dict[str, Any]]) -> int:
        """
        Insert rows as a single executemany.

        Enum columns expect enum members, not their string values.

        Returns:
            Number of rows sent
        """
        if rows:
            await session.execute(insert(self.model), rows)
        return len(rows)

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        return await session.scalar(select(self.model).where(self._pk_is(id)))

    async def get_all(
        self,
        session: AsyncSession,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[ModelT]:
        stmt = select(self.model).offset(offset).limit(limit)
        return (await session.scalars(stmt)).all()

    async def count(self, session: AsyncSession) -> int:
        return await session.scalar(select(func.count()).select_from(self.model))

    async def update_by_id(self, session: AsyncSession, id: UUID, **values) -> ModelT | None:
        """Apply values to one row; None when the id does not exist."""
        stmt = update(self.model).where(self._pk_is(id)).values(**values).returning(self.model)
        return (await session.execute(stmt)).scalar_one_or_none()

    async def delete_by_id(self, session: AsyncSession, id: UUID) -> bool:
        result = await session.execute(delete(self.model).where(self._pk_is(id)))
        return result.rowcount > 0
