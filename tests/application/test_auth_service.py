"""
Unit tests for AuthService.

Registration, role-specific login, token round trips and the admin
registration code, against in-memory SQLite.
"""

from datetime import timedelta

import pytest
from jose import jwt

from counselhub.application.services.auth_service import (
    AuthService,
    hash_password,
    verify_password,
)
from counselhub.boundary.db.base import utcnow
from counselhub.boundary.db.models import UserRole
from counselhub.configs.auth import AuthSettings
from counselhub.core.exceptions import (
    AuthenticationError,
    DuplicateAccountError,
    PermissionDeniedError,
)


@pytest.fixture
def auth_settings() -> AuthSettings:
    return AuthSettings(secret_key="test-secret", admin_registration_code="letmein")


@pytest.fixture
def service(test_async_db, auth_settings) -> AuthService:
    return AuthService(test_async_db, auth_settings)


class TestPasswordHashing:
    def test_hash_verifies_and_hides_password(self) -> None:
        hashed = hash_password("s3cret!")

        assert hashed != "s3cret!"
        assert verify_password("s3cret!", hashed)
        assert not verify_password("wrong", hashed)


class TestRegistration:
    """Test suite for register() and register_admin()."""

    @pytest.mark.asyncio
    async def test_register_returns_tokens_and_profile(self, service) -> None:
        # Act
        response = await service.register(
            UserRole.USER, " alice ", "pw12345", email="Alice@Example.com", age_group="18_25"
        )

        # Assert
        assert response.user.username == "alice"
        assert response.user.email == "alice@example.com"
        assert response.user.role == UserRole.USER
        assert response.access_token
        assert response.refresh_token
        assert response.token_type == "bearer"

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected(self, service) -> None:
        await service.register(UserRole.USER, "bob", "pw12345")

        with pytest.raises(DuplicateAccountError):
            await service.register(UserRole.COUNSELOR, "bob", "other-pw")

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, service) -> None:
        await service.register(UserRole.USER, "carol", "pw12345", email="c@example.com")

        with pytest.raises(DuplicateAccountError):
            await service.register(UserRole.USER, "carol2", "pw12345", email="C@example.com")

    @pytest.mark.asyncio
    async def test_admin_registration_requires_code(self, service) -> None:
        with pytest.raises(PermissionDeniedError):
            await service.register_admin("root", "pw12345", "root@example.com", "guess")

        response = await service.register_admin("root", "pw12345", "root@example.com", "letmein")

        assert response.user.role == UserRole.ADMIN


class TestLogin:
    """Test suite for login() and token handling."""

    @pytest.mark.asyncio
    async def test_login_with_matching_role(self, service) -> None:
        await service.register(UserRole.COUNSELOR, "dana", "pw12345")

        response = await service.login("dana", "pw12345", UserRole.COUNSELOR)

        assert response.user.username == "dana"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("username", "password", "role"),
        [
            ("erin", "wrong", UserRole.USER),
            ("nobody", "pw12345", UserRole.USER),
            ("erin", "pw12345", UserRole.COUNSELOR),
        ],
    )
    async def test_login_rejections_share_one_error(
        self, service, username, password, role
    ) -> None:
        await service.register(UserRole.USER, "erin", "pw12345")

        with pytest.raises(AuthenticationError) as exc_info:
            await service.login(username, password, role)

        assert exc_info.value.message == "Invalid username or password"

    @pytest.mark.asyncio
    async def test_access_token_resolves_to_account(self, service) -> None:
        registered = await service.register(UserRole.USER, "finn", "pw12345")

        user = await service.resolve_token(registered.access_token)

        assert user.id == registered.user.id

    @pytest.mark.asyncio
    async def test_refresh_token_is_not_an_access_token(self, service) -> None:
        registered = await service.register(UserRole.USER, "gail", "pw12345")

        with pytest.raises(AuthenticationError):
            await service.resolve_token(registered.refresh_token)

        refreshed = await service.refresh(registered.refresh_token)
        assert refreshed.user.id == registered.user.id

    @pytest.mark.asyncio
    async def test_expired_token_rejected(self, service, auth_settings) -> None:
        registered = await service.register(UserRole.USER, "hank", "pw12345")
        past = utcnow() - timedelta(hours=2)
        token = jwt.encode(
            {
                "sub": str(registered.user.id),
                "type": "access",
                "exp": int((past + timedelta(minutes=1)).timestamp()),
            },
            auth_settings.secret_key,
            algorithm=auth_settings.algorithm,
        )

        with pytest.raises(AuthenticationError):
            await service.resolve_token(token)

    @pytest.mark.asyncio
    async def test_token_signed_with_other_key_rejected(self, service) -> None:
        forged = jwt.encode({"sub": "x", "type": "access"}, "other-key", algorithm="HS256")

        with pytest.raises(AuthenticationError):
            service.decode_token(forged)
