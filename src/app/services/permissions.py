"""
Invitation Permissions

Authorization predicates configured by the host. A predicate is either a
static boolean or a (sync or async) callable; both are wrapped into an
InvitationPermission at configuration time so use cases only ever call
`await permission.allows(user, subject)`.
"""

import inspect
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Union

from src.domain.entities import AppInvitation, User

PermissionCallback = Callable[..., Union[bool, Awaitable[bool]]]


class InvitationPermission(ABC):
    """Decides whether a user may act on a subject"""

    @abstractmethod
    async def allows(self, user: User, subject: Any) -> bool:
        pass


PermissionSetting = Union[None, bool, PermissionCallback, InvitationPermission]


class ConstantPermission(InvitationPermission):
    """Always answers the configured value"""

    def __init__(self, allowed: bool):
        self.allowed = allowed

    async def allows(self, user: User, subject: Any) -> bool:
        return self.allowed

    def __repr__(self) -> str:
        return f"ConstantPermission({self.allowed})"


class CallbackPermission(InvitationPermission):
    """Delegates to a host callback, awaiting it when it is a coroutine"""

    def __init__(self, callback: PermissionCallback):
        self.callback = callback

    async def allows(self, user: User, subject: Any) -> bool:
        result = self.callback(user, subject)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)

    def __repr__(self) -> str:
        return f"CallbackPermission({self.callback!r})"


class InviterOnlyPermission(InvitationPermission):
    """Only the user who issued the invitation"""

    async def allows(self, user: User, subject: AppInvitation) -> bool:
        return subject.inviter_id == user.id

    def __repr__(self) -> str:
        return "InviterOnlyPermission()"


def build_permission(
    setting: PermissionSetting, default: InvitationPermission
) -> InvitationPermission:
    """
    Turn a configuration value into an InvitationPermission.

    Args:
        setting: None (use default), a bool, a callable or a permission
        default: Permission used when setting is None

    Raises:
        TypeError: setting is none of the above
    """
    if setting is None:
        return default
    if isinstance(setting, InvitationPermission):
        return setting
    if isinstance(setting, bool):
        return ConstantPermission(setting)
    if callable(setting):
        return CallbackPermission(setting)
    raise TypeError(f"Unsupported permission setting: {setting!r}")
