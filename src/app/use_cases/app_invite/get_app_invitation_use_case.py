"""
Get App Invitation Use Case

Loads an invitation for display, e.g. on the invitee's landing page.
"""

from src.app.services.invitation_email import InviterInfo
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Result, Return

from .dtos import AppInvitationDetailResponse
from .errors import invitation_not_found
from .invitation_lifecycle import expire_if_due


class GetAppInvitationUseCase:
    """
    Use case for reading a single invitation.

    Business Rules:
    - Unknown IDs fail with INVITATION_NOT_FOUND
    - A pending invitation past its expiry is reported (and stored) as expired
    - Includes the inviter's public identity
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, invitation_id: str) -> Result[AppInvitationDetailResponse]:
        async with self.uow:
            invitation = await self.uow.invitations.get_by_id(invitation_id)
            if invitation is None:
                return Return.err(invitation_not_found())

            await expire_if_due(self.uow, invitation)

            inviter = await self.uow.users.get_by_id(invitation.inviter_id)
            inviter_info = None
            if inviter is not None:
                inviter_info = InviterInfo(
                    id=inviter.id, email=inviter.email, name=inviter.name
                )

            return Return.ok(
                AppInvitationDetailResponse.from_entity(invitation, inviter=inviter_info)
            )
