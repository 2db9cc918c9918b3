"""
AppInvitation Entity

Invitations to join the application, personal (bound to an email) or
public (open to anyone, optionally restricted by email domain).
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import generate_uuid, utc_now
from src.domain.domain_whitelist import DomainWhitelist

from .enums import InvitationStatus, InvitationType


class AppInvitation(SQLModel, table=True):
    """
    AppInvitation entity - an invitation to join the application.

    Business Rules:
    - email set => personal invitation, email unset => public invitation
    - domain_whitelist only applies to public invitations
    - status only moves forward from pending; all other states are terminal
    - expires after invitation_expires_in seconds (48h by default)
    - never physically deleted
    """

    __tablename__ = "appInvitation"

    id: str = Field(default_factory=generate_uuid, primary_key=True, max_length=36)

    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255, index=True)

    inviter_id: str = Field(foreign_key="users.id", nullable=False, index=True)

    status: InvitationStatus = Field(default=InvitationStatus.pending)

    # Comma-separated, see DomainWhitelist
    domain_whitelist: Optional[str] = Field(default=None, max_length=1024)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )

    __table_args__ = (
        Index("idx_app_invitation_expires_at", "expires_at"),
        Index("idx_app_invitation_inviter_email", "inviter_id", "email"),
        Index("idx_app_invitation_status", "status"),
    )

    @property
    def invitation_type(self) -> InvitationType:
        return InvitationType.personal if self.email else InvitationType.public

    @property
    def is_personal(self) -> bool:
        return self.invitation_type == InvitationType.personal

    @property
    def allowed_domains(self) -> DomainWhitelist:
        return DomainWhitelist.parse(self.domain_whitelist)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utc_now()) >= self.expires_at
