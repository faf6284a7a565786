"""
Authentication API endpoints.

Routes:
- POST /auth/login/{role} - Log in as user, counselor or admin
- POST /auth/refresh - Exchange a refresh token
- GET /auth/me - Current account

Dependencies: counselhub.application.services.auth_service, counselhub.models
System role: Authentication HTTP API
"""

from fastapi import APIRouter, Depends

from counselhub.api.deps import get_auth_service, get_current_user
from counselhub.api.routers.router_utils import handle_service_errors
from counselhub.application.services.auth_service import AuthService
from counselhub.boundary.db.models import UserModel, UserRole
from counselhub.models.auth import AuthResponse, LoginRequest, RefreshRequest
from counselhub.models.user import UserResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login/{role}", response_model=AuthResponse)
@handle_service_errors
async def login(
    role: UserRole,
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Log in with username and password for a specific role.

    Raises:
        HTTPException(401): Wrong credentials or wrong role
    """
    return await auth_service.login(request.username, request.password, role)


@router.post("/refresh", response_model=AuthResponse)
@handle_service_errors
async def refresh(
    request: RefreshRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Issue a fresh token pair from a refresh token."""
    return await auth_service.refresh(request.refresh_token)


@router.get("/me", response_model=UserResponse)
async def me(user: UserModel = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(user)
