"""
Use Cases

Organized into domain folders:
- app_invite/: Invitation lifecycle and queries
"""

from .app_invite import (
    AcceptInvitationUseCase,
    CancelInvitationUseCase,
    GetAppInvitationUseCase,
    InviteUserUseCase,
    ListInvitationsUseCase,
    RejectInvitationUseCase,
)

__all__ = [
    "InviteUserUseCase",
    "AcceptInvitationUseCase",
    "RejectInvitationUseCase",
    "CancelInvitationUseCase",
    "GetAppInvitationUseCase",
    "ListInvitationsUseCase",
]
