"""
Shared CRUD base for the portal's SQLAlchemy models.

Model-specific CRUD classes inherit the primary-key operations here and add
their own queries. Nothing in this layer commits; the calling service owns
the transaction and decides when a unit of work is durable.

Dependencies: sqlalchemy
System role: Foundation for the repository layer
"""

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from counselhub.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """Primary-key insert, lookup and patch for one mapped model."""

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **fields) -> ModelT:
        """
        Insert a row and return it with server defaults loaded.

        Args:
            session: Async database session
            **fields: Column values for the new row

        Returns:
            The flushed and refreshed instance
        """
        row = self.model(**fields)
        session.add(row)
        await session.flush()
        await session.refresh(row)
        return row

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        result = await session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def update_by_id(
        self,
        session: AsyncSession,
        id: UUID,
        **fields,
    ) -> ModelT | None:
        """
        Patch columns on one row, returning the updated row or None if absent.

        Unconditional; state-dependent writes go through the guarded
        helpers on the owning CRUD class instead.
        """
        stmt = (
            update(self.model)
            .where(self.model.id == id)
            .values(**fields)
            .returning(self.model)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
