"""User repository - storage access for patient accounts."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from bliss_dental.exceptions import ConflictError
from bliss_dental.models.user import User


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, user_id: UUID) -> User | None:
        return await self.db.get(User, user_id)

    async def find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def list_all(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())

    async def save(self, user: User) -> User:
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError as e:
            raise ConflictError("User already exists with this email") from e
        await self.db.refresh(user)
        return user
