"""
Authentication service.

Password hashing, JWT issuing/verification, login per role and account
registration.

Dependencies: passlib, python-jose, counselhub.boundary.db, counselhub.configs
System role: Authentication use case orchestration
"""

import logging
import secrets
from datetime import timedelta
from typing import Any
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from counselhub.boundary.db.base import utcnow
from counselhub.boundary.db.CRUD.user_crud import user_crud
from counselhub.boundary.db.models import UserModel, UserRole
from counselhub.configs import get_settings
from counselhub.configs.auth import AuthSettings
from counselhub.core.exceptions import (
    AuthenticationError,
    DuplicateAccountError,
    PermissionDeniedError,
)
from counselhub.models.auth import AuthResponse
from counselhub.models.user import UserResponse

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"
INVALID_CREDENTIALS = "Invalid username or password"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


class AuthService:
    """Login, registration and bearer token handling."""

    def __init__(
        self,
        db: AsyncSession,
        settings: AuthSettings | None = None,
    ) -> None:
        """
        Initialize auth service.

        Args:
            db: Async SQLAlchemy session
            settings: JWT configuration (defaults to application settings)
        """
        self.db = db
        self.settings = settings or get_settings().auth

    def _encode(self, user: UserModel, token_type: str, lifetime: timedelta) -> str:
        now = utcnow()
        claims = {
            "sub": str(user.id),
            "role": user.role.value,
            "type": token_type,
            "iat": int(now.timestamp()),
            "exp": int((now + lifetime).timestamp()),
        }
        return jwt.encode(claims, self.settings.secret_key, algorithm=self.settings.algorithm)

    def create_access_token(self, user: UserModel) -> str:
        return self._encode(
            user,
            ACCESS_TOKEN_TYPE,
            timedelta(minutes=self.settings.access_token_expire_minutes),
        )

    def create_refresh_token(self, user: UserModel) -> str:
        return self._encode(
            user,
            REFRESH_TOKEN_TYPE,
            timedelta(days=self.settings.refresh_token_expire_days),
        )

    def issue_tokens(self, user: UserModel) -> AuthResponse:
        """Build the login response for an account."""
        return AuthResponse(
            access_token=self.create_access_token(user),
            refresh_token=self.create_refresh_token(user),
            user=UserResponse.model_validate(user),
        )

    def decode_token(self, token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> dict[str, Any]:
        """
        Verify a JWT and return its claims.

        Raises:
            AuthenticationError: If the token is malformed, expired, or of the wrong type
        """
        try:
            claims = jwt.decode(
                token,
                self.settings.secret_key,
                algorithms=[self.settings.algorithm],
            )
        except JWTError as e:
            raise AuthenticationError("Invalid or expired token") from e
        if claims.get("type") != expected_type or not claims.get("sub"):
            raise AuthenticationError("Invalid or expired token")
        return claims

    async def resolve_token(self, token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> UserModel:
        """
        Load the active account a token was issued to.

        Raises:
            AuthenticationError: If the token is invalid or the account is gone
        """
        claims = self.decode_token(token, expected_type)
        try:
            user_id = UUID(claims["sub"])
        except ValueError as e:
            raise AuthenticationError("Invalid or expired token") from e
        user = await user_crud.get_by_id(self.db, user_id)
        if user is None or not user.is_active:
            raise AuthenticationError("Account no longer exists")
        return user

    async def login(self, username: str, password: str, role: UserRole) -> AuthResponse:
        """
        Verify credentials for a role-specific login endpoint.

        Raises:
            AuthenticationError: On unknown user, wrong password, wrong role or inactive account
        """
        user = await user_crud.get_by_username(self.db, username)
        if (
            user is None
            or not user.is_active
            or user.role != role
            or not verify_password(password, user.password_hash)
        ):
            logger.warning("Login rejected", extra={"username": username, "role": role.value})
            raise AuthenticationError(INVALID_CREDENTIALS)

        user.last_active = utcnow()
        await self.db.commit()
        logger.info("Login succeeded", extra={"user_id": str(user.id), "role": role.value})
        return self.issue_tokens(user)

    async def refresh(self, refresh_token: str) -> AuthResponse:
        """Exchange a refresh token for a new token pair."""
        user = await self.resolve_token(refresh_token, expected_type=REFRESH_TOKEN_TYPE)
        return self.issue_tokens(user)

    async def register(
        self,
        role: UserRole,
        username: str,
        password: str,
        email: str | None = None,
        **profile,
    ) -> AuthResponse:
        """
        Create an account and log it in.

        Args:
            role: Account role
            username: Unique login name
            password: Plain-text password (hashed before storage)
            email: Optional unique e-mail
            **profile: age_group, phone, specialties

        Raises:
            DuplicateAccountError: If username or e-mail is taken
        """
        username = username.strip()
        email = email.strip().lower() if email else None
        if await user_crud.get_by_username(self.db, username) is not None:
            raise DuplicateAccountError("username", username)
        if email and await user_crud.get_by_email(self.db, email) is not None:
            raise DuplicateAccountError("email", email)

        try:
            user = await user_crud.create(
                self.db,
                username=username,
                email=email,
                password_hash=hash_password(password),
                role=role,
                last_active=utcnow(),
                **{k: v for k, v in profile.items() if v is not None},
            )
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateAccountError("username", username) from e

        logger.info("Account registered", extra={"user_id": str(user.id), "role": role.value})
        return self.issue_tokens(user)

    async def register_admin(
        self,
        username: str,
        password: str,
        email: str,
        registration_code: str,
    ) -> AuthResponse:
        """
        Register an admin account.

        Raises:
            PermissionDeniedError: If the registration code does not match
        """
        if not secrets.compare_digest(registration_code, self.settings.admin_registration_code):
            logger.warning("Admin registration rejected", extra={"username": username})
            raise PermissionDeniedError("Invalid admin registration code")
        return await self.register(UserRole.ADMIN, username, password, email=email)
