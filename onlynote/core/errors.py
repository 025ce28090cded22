"""
Domain Errors Module

Exceptions raised by the access, sharing and sketch layers. The HTTP endpoints
translate them into HTTPException responses; none of them is fatal.
"""


class OnlyNoteError(Exception):
    """Base class for all OnlyNote errors."""


class ParseError(OnlyNoteError):
    """Cached or imported drawing content is not a JSON list of stroke paths."""


class AuthError(OnlyNoteError):
    """Credentials or token could not be validated."""


class PermissionDenied(OnlyNoteError):
    """A save was attempted without the writer role."""


class GranteeNotFound(OnlyNoteError):
    """No profile matches the email a note was to be shared with."""


class NoNoteToShare(OnlyNoteError):
    """The owner has never saved a note, so there is nothing to share."""


class NotFound(OnlyNoteError):
    """The principal neither owns a note nor holds a grant on one."""


class SelfShare(OnlyNoteError):
    """An owner tried to share their note with themselves."""
