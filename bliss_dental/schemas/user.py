from pydantic import Field
from datetime import datetime
from uuid import UUID

from bliss_dental.schemas.appointment import CamelModel


class RegisterRequest(CamelModel):
    """Schema for registering a patient."""
    name: str | None = Field(None, max_length=100, description="Patient name")
    email: str | None = Field(None, max_length=255, description="Login email")
    password: str | None = Field(None, description="Password, at least 6 characters")
    phone: str | None = Field(None, max_length=20, description="Contact phone")


class LoginRequest(CamelModel):
    email: str | None = None
    password: str | None = None


class UserResponse(CamelModel):
    """Schema for user response (never includes the password hash)."""
    id: UUID
    name: str
    email: str
    phone: str
    role: str
    created_at: datetime
    last_login: datetime | None = None


class AuthResponse(CamelModel):
    success: bool = True
    message: str
    token: str
    user: UserResponse


class ProfileResponse(CamelModel):
    success: bool = True
    user: UserResponse


class UserList(CamelModel):
    success: bool = True
    count: int
    users: list[UserResponse]


class EmailCheckResponse(CamelModel):
    success: bool = True
    exists: bool
