"""
Note Model Module

This module defines the Note model. Each principal owns at most one note,
which holds the JSON-serialized stroke paths of their drawing.
"""
from typing import Optional
from sqlmodel import SQLModel, Field

from onlynote.models.profile import utc_now_iso


class Note(SQLModel, table=True):
    """
    Note table model.

    `user_id` is unique: saving again as the same owner updates this row,
    it never inserts a second one. `revision` increases by one on every write.
    """
    __tablename__ = "notes"

    # Primary key
    id: Optional[int] = Field(default=None, primary_key=True)

    # Ownership - one note per profile
    user_id: str = Field(foreign_key="profiles.id", unique=True, index=True, nullable=False)

    # Serialized ordered list of stroke-path objects
    content: str = Field(default="[]", nullable=False)

    # Audit timestamps; updated_at is the last-write time
    created_at: Optional[str] = Field(default_factory=utc_now_iso)
    updated_at: Optional[str] = Field(default_factory=utc_now_iso)
    revision: int = Field(default=1, nullable=False)
