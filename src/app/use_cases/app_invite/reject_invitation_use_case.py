"""
Reject Invitation Use Case

Handles an invitee declining a personal invitation.
"""

import logging
from typing import Optional

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import InvitationStatus
from src.libs.result import Error, Result, Return

from .dtos import InvitationResponse
from .errors import (
    AppInviteErrorCode,
    invitation_expired,
    invitation_not_found,
    invitation_not_pending,
)
from .invitation_lifecycle import expire_if_due

logger = logging.getLogger(__name__)


class RejectInvitationUseCase:
    """
    Use case for rejecting invitations.

    Business Rules:
    - Only personal invitations can be rejected
    - Only pending, unexpired invitations can be rejected
    - Invitees usually have no account yet, so a caller is optional; a
      signed-in caller must own the invited email
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, invitation_id: str, user_id: Optional[str] = None
    ) -> Result[InvitationResponse]:
        """
        Execute reject invitation use case.

        Args:
            invitation_id: ID of the invitation to reject
            user_id: Signed-in caller, if any

        Returns:
            Result with the rejected InvitationResponse, or Error
        """
        async with self.uow:
            invitation = await self.uow.invitations.get_by_id(invitation_id)
            if invitation is None:
                return Return.err(invitation_not_found())

            if not invitation.is_personal:
                return Return.err(
                    Error(
                        AppInviteErrorCode.INVITATION_NOT_PERSONAL,
                        "Only personal invitations can be rejected",
                    )
                )

            if invitation.status != InvitationStatus.pending:
                return Return.err(invitation_not_pending(invitation.status))

            if user_id is not None:
                user = await self.uow.users.get_by_id(user_id)
                if user is None or user.email.lower() != invitation.email.lower():
                    return Return.err(
                        Error(
                            AppInviteErrorCode.FORBIDDEN,
                            "This invitation was not sent to you",
                        )
                    )

            if await expire_if_due(self.uow, invitation):
                return Return.err(invitation_expired())

            if not await self.uow.invitations.transition_status(
                invitation, InvitationStatus.rejected
            ):
                return Return.err(invitation_not_pending())

            await self.uow.commit()

        logger.info("Invitation %s rejected", invitation.id)
        return Return.ok(InvitationResponse.from_entity(invitation))
