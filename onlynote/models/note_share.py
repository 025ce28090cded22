"""
NoteShare Table Model

This module defines the NoteShare table recording which principals an owner
has granted access to their note, and with which role.
"""
from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field

from onlynote.models.profile import utc_now_iso


class ShareRole(str, Enum):
    """Role a grant confers on its grantee."""
    READER = "reader"
    WRITER = "writer"


class NoteShare(SQLModel, table=True):
    """
    A (note, grantee, role) grant.

    The composite primary key (note_id, shared_with) is the upsert key:
    sharing the same note with the same grantee again updates the role
    instead of adding a second row.

    Attributes:
        note_id: Foreign key to the note being shared
        shared_with: Foreign key to the profile the note is shared with
        role: reader or writer
        created_at: ISO timestamp of the first grant
        updated_at: ISO timestamp of the last role change
    """
    __tablename__ = "note_shares"

    note_id: int = Field(foreign_key="notes.id", primary_key=True)
    shared_with: str = Field(foreign_key="profiles.id", primary_key=True, index=True)
    role: ShareRole = Field(default=ShareRole.READER, nullable=False)

    created_at: Optional[str] = Field(default_factory=utc_now_iso)
    updated_at: Optional[str] = Field(default_factory=utc_now_iso)
