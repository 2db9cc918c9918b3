"""
User Entity

Accounts of the host application. Inviters are users, and accepting an
invitation creates one.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlmodel import JSON, Column, DateTime, Field, SQLModel

from src.domain.base import generate_uuid, utc_now


class User(SQLModel, table=True):
    """
    User entity - an account of the host application.

    Business Rules:
    - Email must be unique across all users
    - Password is optional (accounts created from an invitation may set it later)
    - Password stored as bcrypt hash (cost factor 12)
    - additional_fields carries host-defined attributes captured on acceptance
    """

    __tablename__ = "users"

    id: str = Field(default_factory=generate_uuid, primary_key=True, max_length=36)
    email: str = Field(unique=True, index=True, max_length=255)
    name: Optional[str] = Field(default=None, max_length=255)
    password_hash: Optional[str] = Field(default=None, max_length=60)  # Bcrypt output is 60 chars

    email_verified: bool = Field(default=False)

    additional_fields: Optional[Dict[str, Any]] = Field(
        default=None, sa_column=Column(JSON)
    )

    # Timestamps
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )
