"""
Access Resolution Service

Decides which drawing a principal sees and whether they may save it:
ownership first, then the most recently updated share grant, else nothing.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from onlynote.core.errors import NotFound, ParseError, PermissionDenied
from onlynote.db.store import RemoteStore
from onlynote.models.note import Note
from onlynote.models.profile import Profile
from onlynote.sketch.paths import StrokePath, dump_paths, parse_paths, validate_paths

logger = logging.getLogger(__name__)


class AccessRole(str, Enum):
    """Effective privilege of a principal on the note they see."""
    WRITER = "writer"
    READER = "reader"
    NONE = "none"


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of resolving a principal's access.

    `paths` is None when there is no note, or when the stored content could
    not be parsed.
    """
    role: AccessRole
    paths: Optional[List[StrokePath]] = None
    note_id: Optional[int] = None
    owner_id: Optional[str] = None
    updated_at: Optional[str] = None
    revision: Optional[int] = None


EMPTY = Resolution(role=AccessRole.NONE)


def _load_content(note: Note) -> Optional[List[StrokePath]]:
    try:
        return parse_paths(note.content)
    except ParseError:
        logger.warning("Stored content of note %s is not valid stroke-path JSON", note.id)
        return None


class AccessResolver:
    """
    Resolves and enforces note access for a principal.

    Owners always write their own note. A principal without a note of their
    own sees the note of their most recently updated grant (ties go to the
    higher note id) with that grant's role. Writer-by-grant saves go to the
    shared note, not to a note of the grantee's own.
    """

    def __init__(self, store: RemoteStore):
        self.store = store

    def resolve(self, principal: Profile) -> Resolution:
        note = self.store.get_note_by_owner(principal.id)
        if note is not None:
            return Resolution(
                role=AccessRole.WRITER,
                paths=_load_content(note),
                note_id=note.id,
                owner_id=note.user_id,
                updated_at=note.updated_at,
                revision=note.revision,
            )

        for grant in self.store.grants_for(principal.id):
            shared = self.store.get_note(grant.note_id)
            if shared is None:
                # Dangling grant; the next one may still be valid
                logger.warning("Grant for %s points at missing note %s", principal.id, grant.note_id)
                continue
            return Resolution(
                role=AccessRole(grant.role),
                paths=_load_content(shared),
                note_id=shared.id,
                owner_id=shared.user_id,
                updated_at=shared.updated_at,
                revision=shared.revision,
            )

        return EMPTY

    def require_view(self, principal: Profile) -> Resolution:
        resolution = self.resolve(principal)
        if resolution.role == AccessRole.NONE:
            raise NotFound("No own or shared note")
        return resolution

    def save(self, principal: Profile, paths: List[StrokePath]) -> Note:
        """
        Persist `paths` to the note the principal resolves to.

        Raises:
            PermissionDenied: Unless the resolved role is writer
            ParseError: If `paths` is not a list of stroke-path objects
        """
        content = dump_paths(validate_paths(paths))
        resolution = self.resolve(principal)
        if resolution.role != AccessRole.WRITER:
            logger.info("Save refused for %s with role %s", principal.id, resolution.role.value)
            raise PermissionDenied(f"Role '{resolution.role.value}' cannot save")

        if resolution.owner_id == principal.id:
            return self.store.upsert_note(principal.id, content)

        shared = self.store.get_note(resolution.note_id)
        if shared is None:
            raise NotFound("Shared note disappeared")
        logger.info("Principal %s saving shared note %s", principal.id, shared.id)
        return self.store.update_note_content(shared, content)

    def create(self, principal: Profile, paths: List[StrokePath]) -> Note:
        """
        First cloud save: create (or overwrite) the principal's own note.

        Any principal may own one note, so this is never refused.
        """
        content = dump_paths(validate_paths(paths))
        return self.store.upsert_note(principal.id, content)
