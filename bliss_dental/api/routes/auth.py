"""Auth routes - patient registration, login and profile."""

from fastapi import APIRouter

from bliss_dental.api.deps import BearerToken, ClockDep, DBSession
from bliss_dental.schemas.user import (
    AuthResponse,
    EmailCheckResponse,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    UserList,
    UserResponse,
)
from bliss_dental.services.auth_service import AuthService, create_access_token

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(data: RegisterRequest, db: DBSession, clock: ClockDep):
    """Register a new patient."""
    service = AuthService(db, clock)
    user = await service.register(data)
    return AuthResponse(
        message="Registration successful",
        token=create_access_token(user),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, db: DBSession, clock: ClockDep):
    service = AuthService(db, clock)
    user = await service.login(data)
    return AuthResponse(
        message="Login successful",
        token=create_access_token(user),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=ProfileResponse)
async def get_profile(token: BearerToken, db: DBSession, clock: ClockDep):
    """Get the profile of the token holder."""
    service = AuthService(db, clock)
    user = await service.profile(token)
    return ProfileResponse(user=UserResponse.model_validate(user))


@router.get("/users", response_model=UserList)
async def list_users(db: DBSession, clock: ClockDep):
    """List all users (for testing)."""
    service = AuthService(db, clock)
    users = await service.list_users()
    return UserList(
        count=len(users),
        users=[UserResponse.model_validate(u) for u in users],
    )


@router.get("/check-email/{email}", response_model=EmailCheckResponse)
async def check_email(email: str, db: DBSession, clock: ClockDep):
    service = AuthService(db, clock)
    return EmailCheckResponse(exists=await service.email_exists(email))
