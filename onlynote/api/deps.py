"""
API Dependencies Module

This module provides FastAPI dependency functions for authentication and for
building the store-backed services per request. Authentication accepts both
bearer tokens (for API clients) and HTTP-only cookies (for browser clients).
"""
import logging
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from onlynote.core.config import settings
from onlynote.core.errors import AuthError
from onlynote.core.security import decode_access_token
from onlynote.db.session import get_db
from onlynote.db.store import RemoteStore
from onlynote.models.profile import Profile
from onlynote.services.access import AccessResolver
from onlynote.services.sharing import SharingManager

logger = logging.getLogger(__name__)

# auto_error=False allows us to check cookies as a fallback
reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login",
    auto_error=False  # Don't raise error immediately if Authorization header is missing
)


def get_store(db: Session = Depends(get_db)) -> RemoteStore:
    return RemoteStore(db)


def get_resolver(store: RemoteStore = Depends(get_store)) -> AccessResolver:
    return AccessResolver(store)


def get_sharing(store: RemoteStore = Depends(get_store)) -> SharingManager:
    return SharingManager(store)


def get_current_user(
    request: Request,
    store: RemoteStore = Depends(get_store),
    token: Optional[str] = Depends(reusable_oauth2)
) -> Profile:
    """
    Dependency that retrieves and validates the current principal.

    Supports dual authentication methods:
    1. Bearer token in Authorization header (for API clients)
    2. HTTP-only cookie (for browser clients)

    Raises:
        HTTPException 401: If no token is provided, or it names no profile
        HTTPException 403: If the token is invalid or expired
    """
    # Try Authorization header first, then fall back to cookie
    if not token:
        token = request.cookies.get("access_token")
        # Cookie format is "Bearer <token>", so we need to extract the token
        if token and token.startswith("Bearer "):
            token = token[len("Bearer "):]

    # Require authentication
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        email = decode_access_token(token)
    except AuthError as exc:
        logger.warning("Rejected token: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Could not validate credentials",
        )

    # Look up the principal in the database
    profile = store.get_profile_by_email(email)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown principal",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return profile
