from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.services.app_invite_options import AppInviteOptions
from src.app.services.invitation_email import LoggingInvitationEmailSender
from src.domain.base import generate_uuid
from src.domain.entities import InvitationStatus, User


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.create = AsyncMock(side_effect=lambda user: user)

    uow.sessions = MagicMock()
    uow.sessions.create = AsyncMock(side_effect=lambda session_obj: session_obj)

    async def transition_status(invitation, to_status, expected=InvitationStatus.pending):
        if invitation.status != expected:
            return False
        invitation.status = to_status
        return True

    uow.invitations = MagicMock()
    uow.invitations.get_by_id = AsyncMock(return_value=None)
    uow.invitations.get_pending_by_inviter_and_email = AsyncMock(return_value=None)
    uow.invitations.list_by_inviter = AsyncMock(return_value=([], 0))
    uow.invitations.create = AsyncMock(side_effect=lambda invitation: invitation)
    uow.invitations.update = AsyncMock(side_effect=lambda invitation: invitation)
    uow.invitations.transition_status = AsyncMock(side_effect=transition_status)

    return uow


@pytest.fixture
def email_sender():
    return LoggingInvitationEmailSender()


@pytest.fixture
def options(email_sender):
    return AppInviteOptions(send_invitation_email=email_sender)


@pytest.fixture
def inviter():
    return User(id=generate_uuid(), email="owner@acme.com", name="Owner")
