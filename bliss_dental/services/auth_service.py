"""Auth service - patient registration, login and access tokens."""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from bliss_dental.clock import Clock
from bliss_dental.config import settings
from bliss_dental.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from bliss_dental.models.user import User, UserRole
from bliss_dental.repositories.users import UserRepository
from bliss_dental.schemas.user import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
# bcrypt only reads the first 72 bytes and refuses anything longer
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    encoded = password.encode()
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(encoded, password_hash.encode())


def create_access_token(user: User) -> str:
    expires = datetime.now(timezone.utc) + timedelta(days=settings.jwt_expire_days)
    claims = {"sub": str(user.id), "role": user.role, "exp": expires}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> UUID:
    """Return the user id carried by a token."""
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
        return UUID(payload["sub"])
    except (JWTError, KeyError, ValueError) as e:
        logger.warning(f"Rejected access token: {e}")
        raise AuthenticationError("Invalid token") from e


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Service class for patient accounts."""

    def __init__(self, db: AsyncSession, clock: Clock):
        self.repository = UserRepository(db)
        self.clock = clock

    async def register(self, data: RegisterRequest) -> User:
        if not data.name or not data.email or not data.password:
            raise ValidationError("Name, email, and password are required")
        if len(data.password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if len(data.password.encode()) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            )

        email = normalize_email(data.email)
        if await self.repository.find_by_email(email):
            raise ConflictError("User already exists with this email")

        user = User(
            name=data.name.strip(),
            email=email,
            password_hash=hash_password(data.password),
            phone=(data.phone or "").strip(),
            role=UserRole.PATIENT.value,
            created_at=self.clock.now(),
        )
        user = await self.repository.save(user)
        logger.info(f"Registered patient {user.id}")
        return user

    async def login(self, data: LoginRequest) -> User:
        if not data.email or not data.password:
            raise ValidationError("Email and password are required")

        user = await self.repository.find_by_email(normalize_email(data.email))
        if not user or not verify_password(data.password, user.password_hash):
            raise AuthenticationError("Invalid email or password")

        user.last_login = self.clock.now()
        return await self.repository.save(user)

    async def profile(self, token: str) -> User:
        user = await self.repository.find_by_id(decode_access_token(token))
        if not user:
            raise NotFoundError("User not found")
        return user

    async def list_users(self) -> list[User]:
        return await self.repository.list_all()

    async def email_exists(self, email: str) -> bool:
        return await self.repository.find_by_email(normalize_email(email)) is not None
