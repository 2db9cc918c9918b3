"""
App Invite Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    FilterOperator,
    InvitationStatus,
    InvitationType,
    SearchOperator,
    SortDirection,
)

# Export all entities
from .user import User
from .invitation import AppInvitation
from .session import Session

__all__ = [
    # Enums
    "InvitationStatus",
    "InvitationType",
    "SearchOperator",
    "FilterOperator",
    "SortDirection",
    # Entities
    "User",
    "AppInvitation",
    "Session",
]
