"""
App Invite Error Codes

Stable codes carried by Error results of the app invite use cases.
"""

from enum import Enum

from src.libs.result import Error


class AppInviteErrorCode(str, Enum):
    FORBIDDEN = "FORBIDDEN"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    ALREADY_INVITED = "ALREADY_INVITED"
    INVITATION_NOT_FOUND = "INVITATION_NOT_FOUND"
    INVITATION_NOT_PENDING = "INVITATION_NOT_PENDING"
    INVITATION_EXPIRED = "INVITATION_EXPIRED"
    INVITATION_NOT_PERSONAL = "INVITATION_NOT_PERSONAL"
    EMAIL_MISMATCH = "EMAIL_MISMATCH"
    EMAIL_REQUIRED = "EMAIL_REQUIRED"
    DOMAIN_NOT_ALLOWED = "DOMAIN_NOT_ALLOWED"
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    INVALID_FIELD = "INVALID_FIELD"
    INVALID_QUERY = "INVALID_QUERY"
    INVALID_DOMAIN_WHITELIST = "INVALID_DOMAIN_WHITELIST"
    EMAIL_SENDER_NOT_CONFIGURED = "EMAIL_SENDER_NOT_CONFIGURED"

    def __str__(self) -> str:
        return self.value


def invitation_not_found() -> Error:
    return Error(AppInviteErrorCode.INVITATION_NOT_FOUND, "Invitation not found")


def invitation_not_pending(status=None) -> Error:
    message = "Invitation is no longer pending"
    if status is not None:
        message = f"{message} (status: {status.value})"
    return Error(AppInviteErrorCode.INVITATION_NOT_PENDING, message)


def invitation_expired() -> Error:
    return Error(AppInviteErrorCode.INVITATION_EXPIRED, "This invitation has expired")


def user_already_exists() -> Error:
    return Error(
        AppInviteErrorCode.USER_ALREADY_EXISTS,
        "An account already exists for this email",
    )
