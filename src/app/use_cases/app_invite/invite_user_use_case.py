"""
Invite User Use Case

Handles issuing personal and public invitations to join the application.
"""

import logging
from datetime import timedelta

from src.app.services.app_invite_options import AppInviteOptions
from src.app.services.invitation_email import (
    InvitationEmailData,
    InviterInfo,
    deliver_invitation_email,
)
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.domain_whitelist import DomainWhitelist
from src.domain.entities import AppInvitation, InvitationStatus, InvitationType
from src.libs.result import Error, Result, Return

from .dtos import InviteUserCommand, InviteUserResponse
from .errors import AppInviteErrorCode

logger = logging.getLogger(__name__)


class InviteUserUseCase:
    """
    Use case for inviting users to the application.

    Business Rules:
    - Invitation type is personal when an email is given, public otherwise
    - allow_user_to_create_invitation decides who may invite, per type
    - Domain whitelist is only accepted on public invitations
    - One live pending invitation per (inviter, email): duplicates fail
      unless resend is set, which refreshes the existing invitation
    - Personal invitations are emailed after commit; a failed email is
      reported but keeps the invitation
    """

    def __init__(self, uow: UnitOfWork, options: AppInviteOptions):
        self.uow = uow
        self.options = options

    async def execute(self, command: InviteUserCommand) -> Result[InviteUserResponse]:
        """
        Execute invite user use case.

        Args:
            command: InviteUserCommand with inviter, optional email/name,
                resend flag and optional domain whitelist

        Returns:
            Result with InviteUserResponse DTO, or Error
        """
        email = command.email.strip() if command.email else None
        invitation_type = InvitationType.personal if email else InvitationType.public
        whitelist = DomainWhitelist.parse(command.domain_whitelist)

        if invitation_type == InvitationType.personal:
            if whitelist.is_restricted():
                return Return.err(
                    Error(
                        AppInviteErrorCode.INVALID_DOMAIN_WHITELIST,
                        "A domain whitelist can only be set on public invitations",
                    )
                )
            if self.options.send_invitation_email is None:
                return Return.err(
                    Error(
                        AppInviteErrorCode.EMAIL_SENDER_NOT_CONFIGURED,
                        "send_invitation_email must be configured to send personal invitations",
                    )
                )

        async with self.uow:
            inviter = await self.uow.users.get_by_id(command.inviter_id)
            if inviter is None:
                return Return.err(
                    Error(AppInviteErrorCode.USER_NOT_FOUND, "User not found")
                )

            if not await self.options.may_create(inviter, invitation_type):
                return Return.err(
                    Error(
                        AppInviteErrorCode.FORBIDDEN,
                        "You are not allowed to create invitations",
                    )
                )

            now = utc_now()
            expires_at = now + timedelta(seconds=self.options.invitation_expires_in)
            resent = False

            invitation = None
            if email:
                existing = await self.uow.invitations.get_pending_by_inviter_and_email(
                    inviter.id, email
                )
                if existing is not None and existing.is_expired(now):
                    # Stale pending record, retire it and issue a fresh one
                    await self.uow.invitations.transition_status(
                        existing, InvitationStatus.expired
                    )
                    existing = None

                if existing is not None:
                    if not command.resend:
                        return Return.err(
                            Error(
                                AppInviteErrorCode.ALREADY_INVITED,
                                "A pending invitation already exists for this email",
                            )
                        )
                    existing.expires_at = expires_at
                    existing.created_at = now
                    if command.name:
                        existing.name = command.name
                    invitation = await self.uow.invitations.update(existing)
                    resent = True

            if invitation is None:
                invitation = await self.uow.invitations.create(
                    AppInvitation(
                        name=command.name,
                        email=email,
                        inviter_id=inviter.id,
                        status=InvitationStatus.pending,
                        domain_whitelist=whitelist.serialize(),
                        expires_at=expires_at,
                        created_at=now,
                    )
                )

            await self.uow.commit()

        logger.info(
            "%s %s invitation %s by user %s",
            "Resent" if resent else "Created",
            invitation_type.value,
            invitation.id,
            inviter.id,
        )

        email_sent = None
        if email:
            email_sent = await deliver_invitation_email(
                self.options.send_invitation_email,
                InvitationEmailData(
                    invitation_id=invitation.id,
                    email=email,
                    name=invitation.name,
                    inviter=InviterInfo(
                        id=inviter.id, email=inviter.email, name=inviter.name
                    ),
                    expires_at=invitation.expires_at,
                    url=self.options.accept_url(invitation.id),
                    resend=resent,
                ),
            )

        return Return.ok(
            InviteUserResponse.from_entity(invitation, email_sent=email_sent)
        )
