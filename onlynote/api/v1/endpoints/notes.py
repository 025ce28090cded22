"""
Note Endpoints Module

This module exposes the signed-in principal's drawing: the note they own, or
failing that the note shared with them. Saving requires the writer role.
"""
import logging
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import Response

from onlynote.api import deps
from onlynote.core.errors import NotFound, ParseError, PermissionDenied
from onlynote.models.note import Note
from onlynote.models.profile import Profile
from onlynote.schemas.note import NoteSave, NoteSaved, NoteView
from onlynote.services.access import AccessResolver, Resolution
from onlynote.sketch.paths import dump_paths, parse_paths

logger = logging.getLogger(__name__)

router = APIRouter()


def _view(resolution: Resolution) -> NoteView:
    return NoteView(
        note_id=resolution.note_id,
        owner_id=resolution.owner_id,
        role=resolution.role,
        paths=resolution.paths,
        updated_at=resolution.updated_at,
        revision=resolution.revision,
    )


def _saved(note: Note) -> NoteSaved:
    return NoteSaved(note_id=note.id, owner_id=note.user_id, updated_at=note.updated_at, revision=note.revision)


def _save(resolver: AccessResolver, current_user: Profile, payload: NoteSave) -> NoteSaved:
    try:
        note = resolver.save(current_user, payload.paths)
    except PermissionDenied as exc:
        raise HTTPException(status_code=403, detail=str(exc))
    except NotFound:
        raise HTTPException(status_code=404, detail="Note not found")
    return _saved(note)


@router.get("/current", response_model=NoteView)
def read_current_note(
    resolver: AccessResolver = Depends(deps.get_resolver),
    current_user: Profile = Depends(deps.get_current_user),
):
    """
    Resolve the principal's drawing.

    Returns the owned note with role writer, otherwise the most recently
    shared note with the grant's role.

    Raises:
        HTTPException 404: If the principal owns no note and holds no grant
    """
    try:
        resolution = resolver.require_view(current_user)
    except NotFound:
        raise HTTPException(status_code=404, detail="Note not found")
    return _view(resolution)


@router.post("", response_model=NoteSaved, status_code=status.HTTP_201_CREATED)
def create_note(
    payload: NoteSave,
    resolver: AccessResolver = Depends(deps.get_resolver),
    current_user: Profile = Depends(deps.get_current_user),
):
    """
    Create the principal's own note, or overwrite it if it already exists.
    """
    return _saved(resolver.create(current_user, payload.paths))


@router.put("/current", response_model=NoteSaved)
def save_current_note(
    payload: NoteSave,
    resolver: AccessResolver = Depends(deps.get_resolver),
    current_user: Profile = Depends(deps.get_current_user),
):
    """
    Save stroke paths to the resolved note.

    Owners write their own note; writers by grant write the shared note.

    Raises:
        HTTPException 403: If the resolved role is reader or none
    """
    return _save(resolver, current_user, payload)


@router.get("/current/export")
def export_current_note(
    resolver: AccessResolver = Depends(deps.get_resolver),
    current_user: Profile = Depends(deps.get_current_user),
):
    """Download the resolved drawing's stroke paths as drawing.json."""
    try:
        resolution = resolver.require_view(current_user)
    except NotFound:
        raise HTTPException(status_code=404, detail="Note not found")
    return Response(
        content=dump_paths(resolution.paths or []),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="drawing.json"'},
    )


@router.post("/current/import", response_model=NoteSaved)
async def import_current_note(
    file: UploadFile = File(...),
    resolver: AccessResolver = Depends(deps.get_resolver),
    current_user: Profile = Depends(deps.get_current_user),
):
    """
    Replace the resolved drawing with an uploaded stroke-path JSON file.

    Raises:
        HTTPException 400: If the file is not a JSON array of stroke objects
        HTTPException 403: If the resolved role is reader or none
    """
    raw = await file.read()
    try:
        paths = parse_paths(raw.decode("utf-8"))
    except (ParseError, UnicodeDecodeError) as exc:
        logger.warning("Rejected drawing import from %s: %s", current_user.id, exc)
        raise HTTPException(status_code=400, detail="Invalid drawing JSON")
    return _save(resolver, current_user, NoteSave(paths=paths))
