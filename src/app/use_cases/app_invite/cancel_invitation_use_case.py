"""
Cancel Invitation Use Case

Handles withdrawing a pending invitation.
"""

import logging

from src.app.services.app_invite_options import AppInviteOptions
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


class CancelInvitationUseCase:
    """
    Use case for canceling invitations.

    Business Rules:
    - allow_user_to_cancel_invitation decides who may cancel; by default
      only the inviter, and it can be disabled entirely
    - Only pending, unexpired invitations can be canceled
    """

    def __init__(self, uow: UnitOfWork, options: AppInviteOptions):
        self.uow = uow
        self.options = options

    async def execute(
        self, invitation_id: str, user_id: str
    ) -> Result[InvitationResponse]:
        """
        Execute cancel invitation use case.

        Args:
            invitation_id: ID of the invitation to cancel
            user_id: User ID of the caller

        Returns:
            Result with the canceled InvitationResponse, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(
                    Error(AppInviteErrorCode.USER_NOT_FOUND, "User not found")
                )

            invitation = await self.uow.invitations.get_by_id(invitation_id)
            if invitation is None:
                return Return.err(invitation_not_found())

            if not await self.options.may_cancel(user, invitation):
                return Return.err(
                    Error(
                        AppInviteErrorCode.FORBIDDEN,
                        "You are not allowed to cancel this invitation",
                    )
                )

            if invitation.status != InvitationStatus.pending:
                return Return.err(invitation_not_pending(invitation.status))

            if await expire_if_due(self.uow, invitation):
                return Return.err(invitation_expired())

            if not await self.uow.invitations.transition_status(
                invitation, InvitationStatus.canceled
            ):
                return Return.err(invitation_not_pending())

            await self.uow.commit()

        logger.info("Invitation %s canceled by user %s", invitation.id, user.id)
        return Return.ok(InvitationResponse.from_entity(invitation))
