from abc import ABC, abstractmethod

from src.domain.entities import Session


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def create(self, session_obj: Session) -> Session:
        """Create a new session"""
        pass
