"""
Invitation Email

The host application supplies `send_invitation_email`, a sync or async
callable receiving InvitationEmailData. Delivery is best-effort: a failing
sender is logged and reported, it never undoes the invitation.
"""

import inspect
import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Union

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class InviterInfo(BaseModel):
    """Public identity of the inviting user"""

    id: str
    email: str
    name: Optional[str] = None


class InvitationEmailData(BaseModel):
    """Payload handed to the send_invitation_email callback"""

    invitation_id: str
    email: str
    name: Optional[str] = None
    inviter: InviterInfo
    expires_at: datetime
    url: Optional[str] = None
    resend: bool = False


SendInvitationEmail = Callable[[InvitationEmailData], Union[None, Awaitable[None]]]


async def deliver_invitation_email(
    sender: SendInvitationEmail, data: InvitationEmailData
) -> bool:
    """
    Invoke the sender and report whether it succeeded.

    Returns:
        True when the callback returned normally, False when it raised
    """
    try:
        outcome = sender(data)
        if inspect.isawaitable(outcome):
            await outcome
    except Exception:
        logger.exception(
            "Failed to send invitation email for invitation %s", data.invitation_id
        )
        return False
    return True


class LoggingInvitationEmailSender:
    """
    Development sender that logs invitation emails instead of sending them.

    Sent payloads are kept in memory for inspection.
    """

    def __init__(self):
        self.sent: List[InvitationEmailData] = []

    async def __call__(self, data: InvitationEmailData) -> None:
        self.sent.append(data)
        logger.info(
            "Invitation email to %s from %s (invitation %s, url %s)",
            data.email,
            data.inviter.email,
            data.invitation_id,
            data.url,
        )
