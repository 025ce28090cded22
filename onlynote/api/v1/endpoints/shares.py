"""
Share Endpoints Module

Owners grant other principals reader or writer access to their note by email,
list the grants on it, and revoke them.
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status

from onlynote.api import deps
from onlynote.core.errors import GranteeNotFound, NoNoteToShare, SelfShare
from onlynote.models.note_share import NoteShare
from onlynote.models.profile import Profile
from onlynote.schemas.note import ShareCreate, ShareRead
from onlynote.services.sharing import SharingManager

router = APIRouter()


def _read(grant: NoteShare, grantee: Profile) -> ShareRead:
    return ShareRead(
        note_id=grant.note_id,
        shared_with=grant.shared_with,
        email=grantee.email,
        role=grant.role,
        created_at=grant.created_at,
        updated_at=grant.updated_at,
    )


@router.get("", response_model=List[ShareRead])
def list_shares(
    sharing: SharingManager = Depends(deps.get_sharing),
    current_user: Profile = Depends(deps.get_current_user),
):
    """List the grants on the principal's own note."""
    return [_read(grant, grantee) for grant, grantee in sharing.list_shares(current_user)]


@router.post("", response_model=ShareRead, status_code=status.HTTP_201_CREATED)
def create_share(
    share_in: ShareCreate,
    sharing: SharingManager = Depends(deps.get_sharing),
    current_user: Profile = Depends(deps.get_current_user),
):
    """
    Share the principal's note with another profile.

    Sharing again with the same email updates the role.

    Raises:
        HTTPException 404: If no profile has that email
        HTTPException 409: If the principal has no note yet
        HTTPException 400: If the email is the principal's own
    """
    try:
        grant, grantee = sharing.share(current_user, str(share_in.email), share_in.role)
    except GranteeNotFound:
        raise HTTPException(status_code=404, detail="Grantee not found")
    except NoNoteToShare:
        raise HTTPException(status_code=409, detail="No note to share")
    except SelfShare:
        raise HTTPException(status_code=400, detail="Cannot share a note with yourself")
    return _read(grant, grantee)


@router.delete("/{email}")
def revoke_share(
    email: str,
    sharing: SharingManager = Depends(deps.get_sharing),
    current_user: Profile = Depends(deps.get_current_user),
):
    """
    Revoke the grant held by `email` on the principal's note.

    Raises:
        HTTPException 404: If the grantee or the grant does not exist
        HTTPException 409: If the principal has no note
    """
    try:
        removed = sharing.revoke(current_user, email)
    except (GranteeNotFound, SelfShare):
        raise HTTPException(status_code=404, detail="Share not found")
    except NoNoteToShare:
        raise HTTPException(status_code=409, detail="No note to share")
    if not removed:
        raise HTTPException(status_code=404, detail="Share not found")
    return {"status": "success", "detail": "Share revoked"}
