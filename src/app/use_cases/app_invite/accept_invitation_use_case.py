"""
Accept Invitation Use Case

Handles redeeming an invitation: creates the invitee's account and,
when auto sign-in is enabled, signs them in.
"""

import logging
import secrets
from datetime import timedelta

import bcrypt

from src.api.utils.jwt import create_access_token
from src.app.repositories.user_repository import DuplicateUserError
from src.app.services.app_invite_options import AppInviteOptions, InvalidFieldError
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import InvitationStatus, Session, User
from src.libs.result import Error, Result, Return

from .dtos import (
    AcceptInvitationCommand,
    AcceptInvitationResponse,
    InvitationResponse,
    UserInfo,
)
from .errors import (
    AppInviteErrorCode,
    invitation_expired,
    invitation_not_found,
    invitation_not_pending,
    user_already_exists,
)
from .invitation_lifecycle import expire_if_due

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
SESSION_LIFETIME = timedelta(days=30)


class AcceptInvitationUseCase:
    """
    Use case for accepting invitations.

    Business Rules:
    - Only pending invitations can be accepted
    - Expired invitations are marked expired and rejected
    - Personal: a provided email must match the invited email
    - Public: an email is required and must satisfy the domain whitelist
    - The invitee must not already have an account
    - Invitation name takes precedence over the provided name
    - pending -> accepted is a compare-and-set, so concurrent accepts
      cannot both succeed
    - With auto sign-in a session is created and tokens are returned
    """

    def __init__(self, uow: UnitOfWork, options: AppInviteOptions):
        self.uow = uow
        self.options = options

    async def execute(
        self, command: AcceptInvitationCommand
    ) -> Result[AcceptInvitationResponse]:
        """
        Execute accept invitation use case.

        Args:
            command: AcceptInvitationCommand with invitation id, invitee
                email/name/password and additional user fields

        Returns:
            Result with AcceptInvitationResponse DTO, or Error
        """
        async with self.uow:
            invitation = await self.uow.invitations.get_by_id(command.invitation_id)
            if invitation is None:
                return Return.err(invitation_not_found())

            if invitation.status != InvitationStatus.pending:
                return Return.err(invitation_not_pending(invitation.status))

            if await expire_if_due(self.uow, invitation):
                return Return.err(invitation_expired())

            provided_email = command.email.strip() if command.email else None

            if invitation.is_personal:
                if provided_email and provided_email.lower() != invitation.email.lower():
                    return Return.err(
                        Error(
                            AppInviteErrorCode.EMAIL_MISMATCH,
                            "Email does not match the invitation",
                        )
                    )
                email = invitation.email
            else:
                if not provided_email:
                    return Return.err(
                        Error(
                            AppInviteErrorCode.EMAIL_REQUIRED,
                            "An email is required to accept a public invitation",
                        )
                    )
                if not invitation.allowed_domains.allows(provided_email):
                    return Return.err(
                        Error(
                            AppInviteErrorCode.DOMAIN_NOT_ALLOWED,
                            "Email domain is not allowed for this invitation",
                        )
                    )
                email = provided_email

            if await self.uow.users.get_by_email(email) is not None:
                return Return.err(user_already_exists())

            if command.password is not None and len(command.password) < MIN_PASSWORD_LENGTH:
                return Return.err(
                    Error(
                        AppInviteErrorCode.INVALID_PASSWORD,
                        f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
                    )
                )

            try:
                additional_fields = self.options.resolve_additional_fields(
                    command.additional_fields
                )
            except InvalidFieldError as e:
                return Return.err(Error(AppInviteErrorCode.INVALID_FIELD, str(e)))

            if not await self.uow.invitations.transition_status(
                invitation, InvitationStatus.accepted
            ):
                return Return.err(invitation_not_pending())

            password_hash = None
            if command.password:
                password_hash = bcrypt.hashpw(
                    command.password.encode("utf-8"), bcrypt.gensalt(rounds=12)
                ).decode("utf-8")

            try:
                user = await self.uow.users.create(
                    User(
                        email=email,
                        name=invitation.name or command.name,
                        password_hash=password_hash,
                        # The invitation link proves ownership of a personal email
                        email_verified=invitation.is_personal,
                        additional_fields=additional_fields or None,
                    )
                )
            except DuplicateUserError:
                # Lost a race with a concurrent acceptance for the same email
                await self.uow.rollback()
                return Return.err(user_already_exists())

            refresh_token = None
            if self.options.auto_sign_in:
                refresh_token = secrets.token_urlsafe(32)
                refresh_token_hash = bcrypt.hashpw(
                    refresh_token.encode("utf-8"), bcrypt.gensalt(rounds=12)
                ).decode("utf-8")
                await self.uow.sessions.create(
                    Session(
                        user_id=user.id,
                        refresh_token_hash=refresh_token_hash,
                        expires_at=utc_now() + SESSION_LIFETIME,
                    )
                )

            await self.uow.commit()

        logger.info("Invitation %s accepted by user %s", invitation.id, user.id)

        access_token = None
        if refresh_token is not None:
            access_token = create_access_token(
                user_id=user.id,
                expires_delta=timedelta(
                    minutes=self.options.access_token_expires_minutes
                ),
            )

        return Return.ok(
            AcceptInvitationResponse(
                invitation=InvitationResponse.from_entity(invitation),
                user=UserInfo.from_entity(user),
                access_token=access_token,
                refresh_token=refresh_token,
            )
        )
