"""
Authentication schemas.

Dependencies: pydantic
System role: Login and token API contracts
"""

from pydantic import BaseModel, ConfigDict, Field

from counselhub.models.user import UserResponse


class LoginRequest(BaseModel):
    """Credentials for /auth/login/{role}."""

    username: str
    password: str


class RefreshRequest(BaseModel):
    """Refresh token exchange."""

    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(alias="refreshToken")


class AuthResponse(BaseModel):
    """Issued tokens plus the account they belong to."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken")
    refresh_token: str | None = Field(default=None, alias="refreshToken")
    token_type: str = "bearer"
    user: UserResponse
