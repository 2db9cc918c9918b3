"""
App Invite Use Cases

Invitation lifecycle (invite, accept, reject, cancel) and queries.
"""

from .accept_invitation_use_case import AcceptInvitationUseCase
from .cancel_invitation_use_case import CancelInvitationUseCase
from .dtos import (
    AcceptInvitationCommand,
    AcceptInvitationResponse,
    AppInvitationDetailResponse,
    InvitationResponse,
    InviteUserCommand,
    InviteUserResponse,
    ListInvitationsResponse,
    UserInfo,
)
from .errors import AppInviteErrorCode
from .get_app_invitation_use_case import GetAppInvitationUseCase
from .invite_user_use_case import InviteUserUseCase
from .list_invitations_use_case import ListInvitationsUseCase
from .reject_invitation_use_case import RejectInvitationUseCase

__all__ = [
    "InviteUserUseCase",
    "AcceptInvitationUseCase",
    "RejectInvitationUseCase",
    "CancelInvitationUseCase",
    "GetAppInvitationUseCase",
    "ListInvitationsUseCase",
    "InviteUserCommand",
    "AcceptInvitationCommand",
    "InvitationResponse",
    "InviteUserResponse",
    "AppInvitationDetailResponse",
    "AcceptInvitationResponse",
    "ListInvitationsResponse",
    "UserInfo",
    "AppInviteErrorCode",
]
