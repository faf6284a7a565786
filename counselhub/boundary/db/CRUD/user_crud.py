"""
User CRUD operations.

Account lookups by login name, role listings and presence tracking.

Dependencies: sqlalchemy, counselhub.boundary.db.models.user_model
System role: Account persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from counselhub.boundary.db.models.user_model import UserModel, UserRole
from counselhub.boundary.db.CRUD.base_crud import BaseCRUD


class UserCRUD(BaseCRUD[UserModel]):
    """
    CRUD operations for UserModel.

    Extends BaseCRUD with login lookups, role-scoped listings and the
    row lock used while a counselor's load is recounted.
    """

    def __init__(self) -> None:
        """Initialize UserCRUD with UserModel."""
        super().__init__(UserModel)

    async def get_by_username(
        self,
        session: AsyncSession,
        username: str,
    ) -> UserModel | None:
        """
        Retrieve account by username (case-insensitive).

        Args:
            session: Async database session
            username: Login name

        Returns:
            UserModel if found, None otherwise
        """
        stmt = select(UserModel).where(func.lower(UserModel.username) == username.lower())
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(
        self,
        session: AsyncSession,
        email: str,
    ) -> UserModel | None:
        """Retrieve account by e-mail (case-insensitive)."""
        stmt = select(UserModel).where(func.lower(UserModel.email) == email.lower())
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_role(
        self,
        session: AsyncSession,
        role: UserRole,
        include_inactive: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[UserModel]:
        """
        Retrieve accounts with the given role, oldest first.

        Args:
            session: Async database session
            role: Role to filter by
            include_inactive: Include deactivated accounts
            limit: Maximum number of accounts to return
            offset: Number of accounts to skip

        Returns:
            Sequence of UserModels
        """
        stmt = select(UserModel).where(UserModel.role == role)
        if not include_inactive:
            stmt = stmt.where(UserModel.is_active.is_(True))
        stmt = stmt.order_by(UserModel.created_at, UserModel.id).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_eligible_counselors(self, session: AsyncSession) -> Sequence[UserModel]:
        """Retrieve active counselors that accept new sessions."""
        stmt = select(UserModel).where(
            UserModel.role == UserRole.COUNSELOR,
            UserModel.is_active.is_(True),
            UserModel.is_available.is_(True),
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def lock_for_assignment(
        self,
        session: AsyncSession,
        id: UUID,
    ) -> UserModel | None:
        """
        Retrieve a counselor row with SELECT ... FOR UPDATE.

        Holds the row lock until the surrounding transaction ends so a
        concurrent assignment cannot push the counselor past the cap.
        Backends without row locks ignore the clause.
        """
        stmt = (
            select(UserModel)
            .where(UserModel.id == id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def lock_counselors(
        self,
        session: AsyncSession,
        ids: Sequence[UUID],
    ) -> Sequence[UserModel]:
        """
        Lock several counselor rows at once, always in id order.

        Every assigner acquires the same rows in the same order, so two
        auto-assigns never wait on each other in a cycle.
        """
        if not ids:
            return []
        stmt = (
            select(UserModel)
            .where(UserModel.id.in_(ids))
            .order_by(UserModel.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def touch_last_active(
        self,
        session: AsyncSession,
        id: UUID,
        at: datetime,
    ) -> None:
        """Stamp the account's last activity time."""
        stmt = (
            update(UserModel)
            .where(UserModel.id == id)
            .values(last_active=at)
        )
        await session.execute(stmt)

    async def count_by_role(
        self,
        session: AsyncSession,
        role: UserRole,
        created_since: datetime | None = None,
    ) -> int:
        """Count active accounts with the role, optionally created after a time."""
        stmt = select(func.count(UserModel.id)).where(
            UserModel.role == role,
            UserModel.is_active.is_(True),
        )
        if created_since is not None:
            stmt = stmt.where(UserModel.created_at >= created_since)
        result = await session.execute(stmt)
        return result.scalar_one()


user_crud = UserCRUD()
