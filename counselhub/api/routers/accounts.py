"""
Account API endpoints.

Routes (users and counselors share the same shape):
- POST /users, /counselors, /admins - Register and log in
- GET /users, /counselors, /admins - List accounts
- GET|PUT|DELETE /users/{id}, /counselors/{id} - Read, update, deactivate

/users/{id} addresses any account (every role edits its own profile
there); /counselors/{id} only counselor accounts.

Dependencies: counselhub.application.services, counselhub.models
System role: Account management HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from counselhub.api.deps import get_auth_service, get_current_user, get_user_service
from counselhub.api.routers.router_utils import handle_service_errors
from counselhub.application.services.auth_service import AuthService
from counselhub.application.services.user_service import UserService
from counselhub.boundary.db.models import UserModel, UserRole
from counselhub.models.auth import AuthResponse
from counselhub.models.common import OkResponse
from counselhub.models.user import (
    RegisterAdminRequest,
    RegisterCounselorRequest,
    RegisterUserRequest,
    UpdateUserRequest,
    UserResponse,
)

users_router = APIRouter(prefix="/users", tags=["users"])
counselors_router = APIRouter(prefix="/counselors", tags=["counselors"])
admins_router = APIRouter(prefix="/admins", tags=["admins"])


@users_router.post("", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@handle_service_errors
async def register_user(
    request: RegisterUserRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Register a member account.

    Raises:
        HTTPException(409): Username or e-mail already registered
    """
    return await auth_service.register(
        UserRole.USER,
        request.username,
        request.password,
        email=request.email,
        age_group=request.age_group,
        phone=request.phone,
    )


@counselors_router.post("", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@handle_service_errors
async def register_counselor(
    request: RegisterCounselorRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Register a counselor account."""
    return await auth_service.register(
        UserRole.COUNSELOR,
        request.username,
        request.password,
        email=request.email,
        specialties=request.specialties,
    )


@admins_router.post("", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@handle_service_errors
async def register_admin(
    request: RegisterAdminRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Register an admin account.

    Raises:
        HTTPException(403): Registration code does not match
    """
    return await auth_service.register_admin(
        request.username,
        request.password,
        request.email,
        request.registration_code,
    )


async def _list(
    role: UserRole,
    user: UserModel,
    user_service: UserService,
    include_inactive: bool,
    limit: int,
    offset: int,
) -> list[UserResponse]:
    accounts = await user_service.list_accounts(
        user, role, include_inactive=include_inactive, limit=limit, offset=offset
    )
    return [UserResponse.model_validate(a) for a in accounts]


@users_router.get("", response_model=list[UserResponse])
@handle_service_errors
async def list_users(
    include_inactive: bool = False,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: UserModel = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> list[UserResponse]:
    """List member accounts (counselors and admins)."""
    return await _list(UserRole.USER, user, user_service, include_inactive, limit, offset)


@counselors_router.get("", response_model=list[UserResponse])
@handle_service_errors
async def list_counselors(
    include_inactive: bool = False,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: UserModel = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> list[UserResponse]:
    """List counselor accounts."""
    return await _list(UserRole.COUNSELOR, user, user_service, include_inactive, limit, offset)


@admins_router.get("", response_model=list[UserResponse])
@handle_service_errors
async def list_admins(
    include_inactive: bool = False,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: UserModel = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> list[UserResponse]:
    """List admin accounts (admins only)."""
    return await _list(UserRole.ADMIN, user, user_service, include_inactive, limit, offset)


def _register_item_routes(router: APIRouter, role: UserRole | None) -> None:
    """Attach GET/PUT/DELETE /{account_id} to a router, scoped to a role."""

    @router.get("/{account_id}", response_model=UserResponse)
    @handle_service_errors
    async def get_account(
        account_id: UUID,
        user: UserModel = Depends(get_current_user),
        user_service: UserService = Depends(get_user_service),
    ) -> UserResponse:
        account = await user_service.get_account(user, account_id, role)
        return UserResponse.model_validate(account)

    @router.put("/{account_id}", response_model=UserResponse)
    @handle_service_errors
    async def update_account(
        account_id: UUID,
        request: UpdateUserRequest,
        user: UserModel = Depends(get_current_user),
        user_service: UserService = Depends(get_user_service),
    ) -> UserResponse:
        account = await user_service.update_account(user, account_id, request, role)
        return UserResponse.model_validate(account)

    @router.delete("/{account_id}", response_model=OkResponse)
    @handle_service_errors
    async def delete_account(
        account_id: UUID,
        user: UserModel = Depends(get_current_user),
        user_service: UserService = Depends(get_user_service),
    ) -> OkResponse:
        await user_service.deactivate_account(user, account_id, role)
        return OkResponse(message="Account deactivated")


_register_item_routes(users_router, None)
_register_item_routes(counselors_router, UserRole.COUNSELOR)
