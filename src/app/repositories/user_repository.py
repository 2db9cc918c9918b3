from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import User


class DuplicateUserError(Exception):
    """An account already exists for the email"""


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """
        Create a new user

        Raises:
            DuplicateUserError: email already taken
        """
        pass
