from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from src.domain.entities import AppInvitation, InvitationStatus
from src.domain.invitation_query import InvitationQuery


class IInvitationRepository(ABC):
    """Invitation repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, invitation_id: str) -> Optional[AppInvitation]:
        """Get invitation by ID"""
        pass

    @abstractmethod
    async def get_pending_by_inviter_and_email(
        self, inviter_id: str, email: str
    ) -> Optional[AppInvitation]:
        """Get pending invitation by inviter and email"""
        pass

    @abstractmethod
    async def list_by_inviter(
        self, inviter_id: str, query: InvitationQuery
    ) -> Tuple[List[AppInvitation], int]:
        """List invitations created by an inviter, returning (page, total)"""
        pass

    @abstractmethod
    async def create(self, invitation: AppInvitation) -> AppInvitation:
        """Create a new invitation"""
        pass

    @abstractmethod
    async def update(self, invitation: AppInvitation) -> AppInvitation:
        """Update existing invitation"""
        pass

    @abstractmethod
    async def transition_status(
        self,
        invitation: AppInvitation,
        to_status: InvitationStatus,
        expected: InvitationStatus = InvitationStatus.pending,
    ) -> bool:
        """
        Compare-and-set the invitation status.

        Returns True when the stored status was `expected` and is now
        `to_status`, False when another writer got there first.
        """
        pass
