"""
Session Entity

Stores refresh tokens for signed-in users.
"""

from datetime import datetime

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import generate_uuid, utc_now


class Session(SQLModel, table=True):
    """
    Session entity - stores refresh tokens for authentication.

    Business Rules:
    - Refresh tokens are hashed (bcrypt)
    - Created on auto sign-in after accepting an invitation
    - Expires after 30 days
    """

    __tablename__ = "sessions"

    id: str = Field(default_factory=generate_uuid, primary_key=True, max_length=36)

    user_id: str = Field(foreign_key="users.id", nullable=False, index=True)

    refresh_token_hash: str = Field(max_length=60)  # Bcrypt output

    # Timestamps
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    __table_args__ = (
        Index("idx_session_expires_at", "expires_at"),
    )
