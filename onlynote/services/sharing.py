"""
Sharing Service

Lets an owner grant, change or revoke another principal's role on the
owner's note, addressing the grantee by email.
"""
import logging
from typing import List, Tuple

from onlynote.core.errors import GranteeNotFound, NoNoteToShare, SelfShare
from onlynote.db.store import RemoteStore
from onlynote.models.note import Note
from onlynote.models.note_share import NoteShare, ShareRole
from onlynote.models.profile import Profile

logger = logging.getLogger(__name__)


class SharingManager:
    def __init__(self, store: RemoteStore):
        self.store = store

    def _target(self, owner: Profile, grantee_email: str) -> Tuple[Note, Profile]:
        grantee = self.store.get_profile_by_email(grantee_email)
        if grantee is None:
            raise GranteeNotFound(f"No profile with email {grantee_email}")

        note = self.store.get_note_by_owner(owner.id)
        if note is None:
            raise NoNoteToShare("Save a note before sharing it")

        if grantee.id == owner.id:
            raise SelfShare("Cannot share a note with its owner")
        return note, grantee

    def share(self, owner: Profile, grantee_email: str, role: ShareRole) -> Tuple[NoteShare, Profile]:
        """
        Grant `role` on the owner's note to the profile registered as `grantee_email`.

        Sharing again with the same grantee replaces the role; the same role
        twice is a no-op.

        Raises:
            GranteeNotFound: If no profile has that email
            NoNoteToShare: If the owner has never saved a note
            SelfShare: If the email belongs to the owner
        """
        role = ShareRole(role)
        note, grantee = self._target(owner, grantee_email)
        grant = self.store.upsert_grant(note.id, grantee.id, role)
        logger.info("Note %s shared with %s as %s", note.id, grantee.id, role.value)
        return grant, grantee

    def revoke(self, owner: Profile, grantee_email: str) -> bool:
        """Remove the grantee's grant; False if there was none."""
        note, grantee = self._target(owner, grantee_email)
        removed = self.store.delete_grant(note.id, grantee.id)
        if removed:
            logger.info("Share of note %s with %s revoked", note.id, grantee.id)
        return removed

    def list_shares(self, owner: Profile) -> List[Tuple[NoteShare, Profile]]:
        note = self.store.get_note_by_owner(owner.id)
        if note is None:
            return []
        out = []
        for grant in self.store.grants_on(note.id):
            grantee = self.store.get_profile(grant.shared_with)
            if grantee is not None:
                out.append((grant, grantee))
        return out
