"""
App Invite Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the app invite domain.
Provides type safety and clear contracts between layers.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from src.app.services.invitation_email import InviterInfo
from src.domain.entities import AppInvitation, User


# ============================================================================
# Command DTOs
# ============================================================================


class InviteUserCommand(BaseModel):
    """Intent to invite someone, personal when email is set"""

    inviter_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    resend: bool = False
    domain_whitelist: Optional[Union[str, List[str]]] = None


class AcceptInvitationCommand(BaseModel):
    """Intent to redeem an invitation and create an account"""

    invitation_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    password: Optional[str] = None
    additional_fields: Dict[str, Any] = Field(default_factory=dict)


# ============================================================================
# Response DTOs
# ============================================================================


class InvitationResponse(BaseModel):
    """Invitation record as exposed to clients"""

    id: str
    name: Optional[str]
    email: Optional[str]
    inviter_id: str
    status: str
    domain_whitelist: Optional[str]
    expires_at: str
    created_at: str

    @classmethod
    def from_entity(cls, invitation: AppInvitation, **extra):
        return cls(
            id=invitation.id,
            name=invitation.name,
            email=invitation.email,
            inviter_id=invitation.inviter_id,
            status=invitation.status.value,
            domain_whitelist=invitation.domain_whitelist,
            expires_at=invitation.expires_at.isoformat(),
            created_at=invitation.created_at.isoformat(),
            **extra,
        )


class InviteUserResponse(InvitationResponse):
    """Response for invite user use case

    email_sent is None for public invitations.
    """

    email_sent: Optional[bool] = None


class AppInvitationDetailResponse(InvitationResponse):
    """Response for get app invitation use case"""

    inviter: Optional[InviterInfo] = None


class UserInfo(BaseModel):
    """Account created when an invitation is accepted"""

    id: str
    email: str
    name: Optional[str]
    email_verified: bool
    additional_fields: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_entity(cls, user: User) -> "UserInfo":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            email_verified=user.email_verified,
            additional_fields=user.additional_fields or {},
        )


class AcceptInvitationResponse(BaseModel):
    """Response for accept invitation use case

    Tokens are only issued when auto sign-in is enabled.
    """

    invitation: InvitationResponse
    user: UserInfo
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


class ListInvitationsResponse(BaseModel):
    """Response for list invitations use case"""

    invitations: List[InvitationResponse]
    total: int
    limit: int
    offset: int
