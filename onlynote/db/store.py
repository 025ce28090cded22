"""
Remote Store Module

RemoteStore is the client for the relational store behind OnlyNote: profile
lookup plus row-level reads and upserts over `notes` and `note_shares`.
It wraps one SQLModel session and is handed explicitly to the services that
need it.
"""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from onlynote.models.note import Note
from onlynote.models.note_share import NoteShare, ShareRole
from onlynote.models.profile import Profile, utc_now_iso

logger = logging.getLogger(__name__)


class RemoteStore:
    """Row-level CRUD over profiles, notes and note_shares."""

    def __init__(self, db: Session):
        self.db = db

    # --- profiles -------------------------------------------------------

    def get_profile(self, profile_id: str) -> Optional[Profile]:
        return self.db.get(Profile, profile_id)

    def get_profile_by_email(self, email: str) -> Optional[Profile]:
        statement = select(Profile).where(func.lower(Profile.email) == email.strip().lower())
        return self.db.exec(statement).first()

    def add_profile(self, profile: Profile) -> Profile:
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)
        return profile

    # --- notes ----------------------------------------------------------

    def get_note(self, note_id: int) -> Optional[Note]:
        return self.db.get(Note, note_id)

    def get_note_by_owner(self, owner_id: str) -> Optional[Note]:
        return self.db.exec(select(Note).where(Note.user_id == owner_id)).first()

    def upsert_note(self, owner_id: str, content: str) -> Note:
        """
        Insert or update the note owned by `owner_id`.

        The unique owner key is the conflict target: an existing row is
        updated in place and its revision bumped.
        """
        note = self.get_note_by_owner(owner_id)
        if note is not None:
            return self.update_note_content(note, content)

        now = utc_now_iso()
        note = Note(user_id=owner_id, content=content, created_at=now, updated_at=now, revision=1)
        self.db.add(note)
        try:
            self.db.commit()
        except IntegrityError:
            # Another writer inserted the owner's row first; fall through to update it
            self.db.rollback()
            existing = self.get_note_by_owner(owner_id)
            if existing is None:
                raise
            logger.info("Note insert for %s hit the owner key, updating instead", owner_id)
            return self.update_note_content(existing, content)
        self.db.refresh(note)
        return note

    def update_note_content(self, note: Note, content: str) -> Note:
        note.content = content
        note.updated_at = utc_now_iso()
        note.revision = (note.revision or 0) + 1
        self.db.add(note)
        self.db.commit()
        self.db.refresh(note)
        return note

    # --- note_shares ----------------------------------------------------

    def get_grant(self, note_id: int, grantee_id: str) -> Optional[NoteShare]:
        return self.db.get(NoteShare, (note_id, grantee_id))

    def grants_for(self, grantee_id: str) -> List[NoteShare]:
        """Grants naming `grantee_id`, most recently updated first."""
        statement = (
            select(NoteShare)
            .where(NoteShare.shared_with == grantee_id)
            .order_by(NoteShare.updated_at.desc(), NoteShare.note_id.desc())
        )
        return list(self.db.exec(statement).all())

    def grants_on(self, note_id: int) -> List[NoteShare]:
        statement = (
            select(NoteShare)
            .where(NoteShare.note_id == note_id)
            .order_by(NoteShare.created_at)
        )
        return list(self.db.exec(statement).all())

    def upsert_grant(self, note_id: int, grantee_id: str, role: ShareRole) -> NoteShare:
        """
        Insert or update the grant keyed by (note_id, grantee_id).

        Re-granting the same role leaves the row untouched.
        """
        grant = self.get_grant(note_id, grantee_id)
        if grant is not None:
            if grant.role == role:
                return grant
            grant.role = role
            grant.updated_at = utc_now_iso()
            self.db.add(grant)
            self.db.commit()
            self.db.refresh(grant)
            return grant

        now = utc_now_iso()
        grant = NoteShare(note_id=note_id, shared_with=grantee_id, role=role, created_at=now, updated_at=now)
        self.db.add(grant)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            existing = self.get_grant(note_id, grantee_id)
            if existing is None:
                raise
            existing.role = role
            existing.updated_at = utc_now_iso()
            self.db.add(existing)
            self.db.commit()
            grant = existing
        self.db.refresh(grant)
        return grant

    def delete_grant(self, note_id: int, grantee_id: str) -> bool:
        grant = self.get_grant(note_id, grantee_id)
        if grant is None:
            return False
        self.db.delete(grant)
        self.db.commit()
        return True
