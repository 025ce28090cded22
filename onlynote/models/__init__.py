from .profile import Profile
from .note import Note
from .note_share import NoteShare, ShareRole

__all__ = [
    "Profile",
    "Note",
    "NoteShare", "ShareRole",
]
