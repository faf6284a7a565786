"""
Account management service.

Dependencies: counselhub.boundary.db, counselhub.application.services.auth_service
System role: User and counselor account use cases
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from counselhub.application.services.auth_service import hash_password, verify_password
from counselhub.boundary.db.CRUD.user_crud import user_crud
from counselhub.boundary.db.models import UserModel, UserRole
from counselhub.core.exceptions import (
    DuplicateAccountError,
    PermissionDeniedError,
    UserNotFoundError,
    ValidationError,
)
from counselhub.models.user import UpdateUserRequest

logger = logging.getLogger(__name__)


class UserService:
    """User, counselor and admin account management."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_accounts(
        self,
        actor: UserModel,
        role: UserRole,
        include_inactive: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[UserModel]:
        """
        List accounts with a role.

        Counselor profiles are visible to everyone; member accounts only to
        counselors and admins. Deactivated accounts only to admins.
        """
        if role == UserRole.ADMIN and actor.role != UserRole.ADMIN:
            raise PermissionDeniedError("Only admins can list admin accounts")
        if role != UserRole.COUNSELOR and actor.role == UserRole.USER:
            raise PermissionDeniedError("Members cannot list other accounts")
        if actor.role != UserRole.ADMIN:
            include_inactive = False
        return await user_crud.list_by_role(
            self.db, role, include_inactive=include_inactive, limit=limit, offset=offset
        )

    async def get_account(
        self,
        actor: UserModel,
        account_id: UUID,
        role: UserRole | None = None,
    ) -> UserModel:
        """
        Retrieve an account, optionally requiring a role.

        Raises:
            UserNotFoundError: If unknown, deactivated (for non-admins) or of another role
            PermissionDeniedError: If a member asks for another member
        """
        account = await user_crud.get_by_id(self.db, account_id)
        if account is None or (role is not None and account.role != role):
            raise UserNotFoundError(account_id)
        if not account.is_active and actor.role != UserRole.ADMIN:
            raise UserNotFoundError(account_id)
        if (
            actor.role == UserRole.USER
            and account.id != actor.id
            and account.role != UserRole.COUNSELOR
        ):
            raise PermissionDeniedError("Members can only view their own account")
        return account

    def _ensure_can_modify(self, actor: UserModel, account: UserModel) -> None:
        if actor.id != account.id and actor.role != UserRole.ADMIN:
            raise PermissionDeniedError("You can only modify your own account")

    async def update_account(
        self,
        actor: UserModel,
        account_id: UUID,
        payload: UpdateUserRequest,
        role: UserRole | None = None,
    ) -> UserModel:
        """
        Apply a partial profile update.

        Changing the password requires the current one unless an admin
        updates someone else's account.

        Raises:
            PermissionDeniedError: If the actor is neither the owner nor an admin
            ValidationError: If the current password is missing or wrong
            DuplicateAccountError: If the new username or e-mail is taken
        """
        account = await self.get_account(actor, account_id, role)
        self._ensure_can_modify(actor, account)

        changes = payload.model_dump(exclude_unset=True, exclude={"password", "new_password"})

        if "username" in changes and changes["username"] != account.username:
            existing = await user_crud.get_by_username(self.db, changes["username"])
            if existing is not None and existing.id != account.id:
                raise DuplicateAccountError("username", changes["username"])
        if changes.get("email"):
            changes["email"] = changes["email"].strip().lower()
            existing = await user_crud.get_by_email(self.db, changes["email"])
            if existing is not None and existing.id != account.id:
                raise DuplicateAccountError("email", changes["email"])
        if "is_available" in changes and account.role != UserRole.COUNSELOR:
            raise ValidationError("Only counselors have an availability flag", field="is_available")

        if payload.new_password:
            admin_override = actor.role == UserRole.ADMIN and actor.id != account.id
            if not admin_override:
                if not payload.password:
                    raise ValidationError("Current password is required", field="password")
                if not verify_password(payload.password, account.password_hash):
                    raise ValidationError("Current password is incorrect", field="password")
            changes["password_hash"] = hash_password(payload.new_password)

        for key, value in changes.items():
            setattr(account, key, value)
        await self.db.commit()
        await self.db.refresh(account)

        logger.info(
            "Account updated",
            extra={"user_id": str(account.id), "fields": sorted(changes)},
        )
        return account

    async def deactivate_account(
        self,
        actor: UserModel,
        account_id: UUID,
        role: UserRole | None = None,
    ) -> None:
        """Deactivate an account; its sessions stay intact."""
        account = await self.get_account(actor, account_id, role)
        self._ensure_can_modify(actor, account)
        account.is_active = False
        account.is_available = False
        await self.db.commit()
        logger.info("Account deactivated", extra={"user_id": str(account.id), "by": str(actor.id)})
