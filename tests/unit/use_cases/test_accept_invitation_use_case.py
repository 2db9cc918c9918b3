from datetime import timedelta

import bcrypt
import pytest

from src.api.utils.jwt import verify_jwt
from src.app.repositories.user_repository import DuplicateUserError
from src.app.services.app_invite_options import AdditionalField, AppInviteOptions
from src.app.use_cases.app_invite import AcceptInvitationCommand, AcceptInvitationUseCase
from src.domain.entities import InvitationStatus, User
from tests.fixtures.factories import make_invitation


@pytest.mark.asyncio
async def test_accept_personal_invitation(mock_uow, options, inviter):
    """Personal invitation: account created, session created, tokens issued"""
    invitation = make_invitation(inviter.id, email="new@example.com", name="Invited Name")
    mock_uow.invitations.get_by_id.return_value = invitation

    use_case = AcceptInvitationUseCase(mock_uow, options)
    result = await use_case.execute(
        AcceptInvitationCommand(
            invitation_id=invitation.id,
            name="Provided Name",
            password="SecurePass123!",
        )
    )

    assert result.is_ok()
    response = result.value
    assert invitation.status == InvitationStatus.accepted
    assert response.invitation.status == "accepted"

    # Invitation name wins over the provided one
    created_user = mock_uow.users.create.call_args[0][0]
    assert created_user.email == "new@example.com"
    assert created_user.name == "Invited Name"
    assert created_user.email_verified is True
    assert bcrypt.checkpw(b"SecurePass123!", created_user.password_hash.encode("utf-8"))
    assert response.user.email == "new@example.com"

    # Auto sign-in
    mock_uow.sessions.create.assert_called_once()
    session_obj = mock_uow.sessions.create.call_args[0][0]
    assert session_obj.user_id == created_user.id
    assert response.refresh_token is not None
    assert bcrypt.checkpw(
        response.refresh_token.encode("utf-8"), session_obj.refresh_token_hash.encode("utf-8")
    )
    assert verify_jwt(response.access_token)["user_id"] == created_user.id

    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_provided_name_used_when_invitation_has_none(mock_uow, options, inviter):
    invitation = make_invitation(inviter.id, email="new@example.com")
    mock_uow.invitations.get_by_id.return_value = invitation

    result = await AcceptInvitationUseCase(mock_uow, options).execute(
        AcceptInvitationCommand(invitation_id=invitation.id, name="Provided Name")
    )

    assert result.is_ok()
    assert result.value.user.name == "Provided Name"
    # No password given: account without one
    assert mock_uow.users.create.call_args[0][0].password_hash is None


@pytest.mark.asyncio
async def test_accept_without_auto_sign_in(mock_uow, inviter, email_sender):
    options = AppInviteOptions(send_invitation_email=email_sender, auto_sign_in=False)
    invitation = make_invitation(inviter.id, email="new@example.com")
    mock_uow.invitations.get_by_id.return_value = invitation

    result = await AcceptInvitationUseCase(mock_uow, options).execute(
        AcceptInvitationCommand(invitation_id=invitation.id)
    )

    assert result.is_ok()
    assert result.value.access_token is None
    assert result.value.refresh_token is None
    mock_uow.sessions.create.assert_not_called()


@pytest.mark.asyncio
async def test_invitation_not_found(mock_uow, options):
    result = await AcceptInvitationUseCase(mock_uow, options).execute(
        AcceptInvitationCommand(invitation_id="missing")
    )

    assert result.is_err()
    assert result.error.code == "INVITATION_NOT_FOUND"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status",
    [
        InvitationStatus.accepted,
        InvitationStatus.rejected,
        InvitationStatus.canceled,
        InvitationStatus.expired,
    ],
)
async def test_terminal_status_cannot_be_accepted(mock_uow, options, inviter, status):
    invitation = make_invitation(inviter.id, email="new@example.com", status=status)
    mock_uow.invitations.get_by_id.return_value = invitation

    result = await AcceptInvitationUseCase(mock_uow, options).execute(
        AcceptInvitationCommand(invitation_id=invitation.id)
    )

    assert result.is_err()
    assert result.error.code == "INVITATION_NOT_PENDING"
    assert invitation.status == status
    mock_uow.users.create.assert_not_called()


@pytest.mark.asyncio
async def test_expired_invitation(mock_uow, options, inviter):
    """Accepting past expiry fails and leaves the invitation expired"""
    invitation = make_invitation(
        inviter.id, email="new@example.com", expires_in=-timedelta(hours=1)
    )
    mock_uow.invitations.get_by_id.return_value = invitation

    result = await AcceptInvitationUseCase(mock_uow, options).execute(
        AcceptInvitationCommand(invitation_id=invitation.id)
    )

    assert result.is_err()
    assert result.error.code == "INVITATION_EXPIRED"
    assert invitation.status == InvitationStatus.expired
    mock_uow.invitations.transition_status.assert_called_once_with(
        invitation, InvitationStatus.expired
    )
    mock_uow.commit.assert_called_once()
    mock_uow.users.create.assert_not_called()


@pytest.mark.asyncio
async def test_email_mismatch(mock_uow, options, inviter):
    invitation = make_invitation(inviter.id, email="new@example.com")
    mock_uow.invitations.get_by_id.return_value = invitation

    result = await AcceptInvitationUseCase(mock_uow, options).execute(
        AcceptInvitationCommand(invitation_id=invitation.id, email="other@example.com")
    )

    assert result.is_err()
    assert result.error.code == "EMAIL_MISMATCH"
    assert invitation.status == InvitationStatus.pending


@pytest.mark.asyncio
async def test_matching_email_is_case_insensitive(mock_uow, options, inviter):
    invitation = make_invitation(inviter.id, email="new@example.com")
    mock_uow.invitations.get_by_id.return_value = invitation

    result = await AcceptInvitationUseCase(mock_uow, options).execute(
        AcceptInvitationCommand(invitation_id=invitation.id, email="New@Example.com")
    )

    assert result.is_ok()
    assert result.value.user.email == "new@example.com"


@pytest.mark.asyncio
async def test_public_invitation_requires_email(mock_uow, options, inviter):
    invitation = make_invitation(inviter.id)
    mock_uow.invitations.get_by_id.return_value = invitation

    result = await AcceptInvitationUseCase(mock_uow, options).execute(
        AcceptInvitationCommand(invitation_id=invitation.id)
    )

    assert result.is_err()
    assert result.error.code == "EMAIL_REQUIRED"


@pytest.mark.asyncio
async def test_public_invitation_domain_whitelist(mock_uow, options, inviter):
    """a.com,b.com whitelist: c.com is refused, a.com is accepted"""
    invitation = make_invitation(inviter.id, domain_whitelist="a.com,b.com")
    mock_uow.invitations.get_by_id.return_value = invitation
    use_case = AcceptInvitationUseCase(mock_uow, options)

    result = await use_case.execute(
        AcceptInvitationCommand(invitation_id=invitation.id, email="x@c.com")
    )
    assert result.is_err()
    assert result.error.code == "DOMAIN_NOT_ALLOWED"
    assert invitation.status == InvitationStatus.pending

    result = await use_case.execute(
        AcceptInvitationCommand(invitation_id=invitation.id, email="x@a.com")
    )
    assert result.is_ok()
    assert invitation.status == InvitationStatus.accepted
    assert result.value.user.email == "x@a.com"
    # Public invitation: email ownership not proven
    assert result.value.user.email_verified is False


@pytest.mark.asyncio
async def test_public_invitation_without_whitelist_accepts_anyone(mock_uow, options, inviter):
    invitation = make_invitation(inviter.id)
    mock_uow.invitations.get_by_id.return_value = invitation

    result = await AcceptInvitationUseCase(mock_uow, options).execute(
        AcceptInvitationCommand(invitation_id=invitation.id, email="anyone@anywhere.org")
    )

    assert result.is_ok()


@pytest.mark.asyncio
async def test_existing_account(mock_uow, options, inviter):
    invitation = make_invitation(inviter.id, email="taken@example.com")
    mock_uow.invitations.get_by_id.return_value = invitation
    mock_uow.users.get_by_email.return_value = User(id="u1", email="taken@example.com")

    result = await AcceptInvitationUseCase(mock_uow, options).execute(
        AcceptInvitationCommand(invitation_id=invitation.id)
    )

    assert result.is_err()
    assert result.error.code == "USER_ALREADY_EXISTS"
    assert invitation.status == InvitationStatus.pending


@pytest.mark.asyncio
async def test_account_created_concurrently(mock_uow, options, inviter):
    """Email taken between the lookup and the insert"""
    invitation = make_invitation(inviter.id, domain_whitelist="example.com")
    mock_uow.invitations.get_by_id.return_value = invitation
    mock_uow.users.create.side_effect = DuplicateUserError("x@example.com")

    result = await AcceptInvitationUseCase(mock_uow, options).execute(
        AcceptInvitationCommand(invitation_id=invitation.id, email="x@example.com")
    )

    assert result.is_err()
    assert result.error.code == "USER_ALREADY_EXISTS"
    mock_uow.rollback.assert_awaited_once()
    mock_uow.commit.assert_not_called()
    mock_uow.sessions.create.assert_not_called()


@pytest.mark.asyncio
async def test_short_password(mock_uow, options, inviter):
    invitation = make_invitation(inviter.id, email="new@example.com")
    mock_uow.invitations.get_by_id.return_value = invitation

    result = await AcceptInvitationUseCase(mock_uow, options).execute(
        AcceptInvitationCommand(invitation_id=invitation.id, password="short")
    )

    assert result.is_err()
    assert result.error.code == "INVALID_PASSWORD"


@pytest.mark.asyncio
async def test_lost_race_reports_not_pending(mock_uow, options, inviter):
    """When another accept wins the compare-and-set, this one fails"""
    invitation = make_invitation(inviter.id, email="new@example.com")
    mock_uow.invitations.get_by_id.return_value = invitation
    mock_uow.invitations.transition_status.side_effect = None
    mock_uow.invitations.transition_status.return_value = False

    result = await AcceptInvitationUseCase(mock_uow, options).execute(
        AcceptInvitationCommand(invitation_id=invitation.id)
    )

    assert result.is_err()
    assert result.error.code == "INVITATION_NOT_PENDING"
    mock_uow.users.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_second_accept_fails(mock_uow, options, inviter):
    invitation = make_invitation(inviter.id, email="new@example.com")
    mock_uow.invitations.get_by_id.return_value = invitation
    use_case = AcceptInvitationUseCase(mock_uow, options)

    first = await use_case.execute(AcceptInvitationCommand(invitation_id=invitation.id))
    second = await use_case.execute(AcceptInvitationCommand(invitation_id=invitation.id))

    assert first.is_ok()
    assert second.is_err()
    assert second.error.code == "INVITATION_NOT_PENDING"
    mock_uow.users.create.assert_called_once()


@pytest.mark.asyncio
async def test_additional_fields(mock_uow, inviter, email_sender):
    options = AppInviteOptions(
        send_invitation_email=email_sender,
        additional_fields={
            "company": AdditionalField(type="string", required=True),
            "seats": AdditionalField(type="number", default=1),
            "newsletter": AdditionalField(type="boolean"),
        },
    )
    invitation = make_invitation(inviter.id, email="new@example.com")
    mock_uow.invitations.get_by_id.return_value = invitation
    use_case = AcceptInvitationUseCase(mock_uow, options)

    result = await use_case.execute(
        AcceptInvitationCommand(invitation_id=invitation.id, additional_fields={})
    )
    assert result.is_err()
    assert result.error.code == "INVALID_FIELD"
    assert "company" in result.error.message

    result = await use_case.execute(
        AcceptInvitationCommand(
            invitation_id=invitation.id, additional_fields={"company": "Acme"}
        )
    )
    assert result.is_ok()
    assert result.value.user.additional_fields == {"company": "Acme", "seats": 1}


@pytest.mark.asyncio
async def test_unknown_additional_field(mock_uow, options, inviter):
    invitation = make_invitation(inviter.id, email="new@example.com")
    mock_uow.invitations.get_by_id.return_value = invitation

    result = await AcceptInvitationUseCase(mock_uow, options).execute(
        AcceptInvitationCommand(invitation_id=invitation.id, additional_fields={"role": "admin"})
    )

    assert result.is_err()
    assert result.error.code == "INVALID_FIELD"
