"""
App Invite Domain Enums

All enumeration types used across domain entities and the query layer.
"""

from enum import Enum


class InvitationStatus(str, Enum):
    """Invitation status

    pending is the only non-terminal state.
    """

    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    canceled = "canceled"
    expired = "expired"


class InvitationType(str, Enum):
    """Personal invitations are bound to an email, public ones are not"""

    personal = "personal"
    public = "public"


class SearchOperator(str, Enum):
    contains = "contains"
    starts_with = "starts_with"
    ends_with = "ends_with"


class FilterOperator(str, Enum):
    eq = "eq"
    ne = "ne"
    lt = "lt"
    lte = "lte"
    gt = "gt"
    gte = "gte"


class SortDirection(str, Enum):
    asc = "asc"
    desc = "desc"
