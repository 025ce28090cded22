"""
Profile Model Module

This module defines the Profile model: the authenticated principal that owns
notes and receives shares.
"""
from typing import Optional
from sqlmodel import SQLModel, Field
import uuid
from datetime import datetime, timezone


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Profile(SQLModel, table=True):
    """
    Profile model representing authenticated principals.

    Profiles are identified by UUID and authenticated via email/password. The
    email doubles as the lookup key when an owner shares a note.

    Attributes:
        id: Unique identifier (UUID) automatically generated for each profile
        email: Email address, used for sign-in and share lookup (unique, indexed)
        password: Hashed password (bcrypt)
        full_name: Display name
        created_at: ISO timestamp when the profile was created
    """
    __tablename__ = "profiles"

    # Primary key - auto-generated UUID for global uniqueness
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # Authentication fields
    email: str = Field(unique=True, index=True, nullable=False)
    password: Optional[str] = None  # Hashed password (bcrypt)

    full_name: Optional[str] = None

    # Audit timestamp
    created_at: Optional[str] = Field(default_factory=utc_now_iso)
