from typing import Any, Dict, List, Optional
from pydantic import BaseModel, EmailStr

from onlynote.models.note_share import ShareRole
from onlynote.services.access import AccessRole


class NoteSave(BaseModel):
    """Stroke paths to persist, in drawing order."""
    paths: List[Dict[str, Any]]


class NoteView(BaseModel):
    note_id: int
    owner_id: str
    role: AccessRole
    paths: Optional[List[Dict[str, Any]]] = None
    updated_at: Optional[str] = None
    revision: Optional[int] = None


class NoteSaved(BaseModel):
    note_id: int
    owner_id: str
    updated_at: Optional[str] = None
    revision: int


class ShareCreate(BaseModel):
    email: EmailStr
    role: ShareRole = ShareRole.READER


class ShareRead(BaseModel):
    note_id: int
    shared_with: str
    email: str
    role: ShareRole
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
