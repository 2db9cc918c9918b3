"""
Invitation lifecycle helpers shared by the transition use cases.
"""

import logging
from datetime import datetime
from typing import Optional

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import AppInvitation, InvitationStatus

logger = logging.getLogger(__name__)


async def expire_if_due(
    uow: UnitOfWork, invitation: AppInvitation, now: Optional[datetime] = None
) -> bool:
    """
    Lazily move a pending invitation past its expiry to expired.

    The status change is committed immediately so it survives the error
    the caller is about to return.

    Returns:
        True when the invitation is (now) expired
    """
    if invitation.status != InvitationStatus.pending:
        return invitation.status == InvitationStatus.expired
    if not invitation.is_expired(now or utc_now()):
        return False

    if await uow.invitations.transition_status(invitation, InvitationStatus.expired):
        await uow.commit()
        logger.info("Invitation %s expired", invitation.id)
    return True
