from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import DuplicateUserError, IUserRepository
from src.domain.entities import User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (case-insensitive)"""
        stmt = select(User).where(func.lower(User.email) == email.lower())
        result = await self.session.exec(stmt)
        return result.first()

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, user: User) -> User:
        """Create a new user"""
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as e:
            # users.email is unique
            raise DuplicateUserError(user.email) from e
        await self.session.refresh(user)
        return user
