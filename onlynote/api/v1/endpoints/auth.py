"""
Authentication Endpoints Module

This module provides authentication endpoints for registration, sign-in and
sign-out. The system supports both JWT bearer token authentication and
HTTP-only cookie-based authentication for browser clients.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status, Response
from fastapi.security import OAuth2PasswordRequestForm
from datetime import timedelta
from onlynote.api import deps
from onlynote.db.store import RemoteStore
from onlynote.models.profile import Profile
from onlynote.core.security import verify_password, get_password_hash, create_access_token
from onlynote.core.config import settings
from onlynote.schemas.auth import Token, UserRegister
from onlynote.schemas.user import ProfileRead

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=ProfileRead, status_code=status.HTTP_201_CREATED)
def register_user(user_in: UserRegister, store: RemoteStore = Depends(deps.get_store)):
    """
    Register a new profile.

    Creates a profile with the provided email and password. The password is
    hashed before storage and the email is stored lower-cased, since it is
    also the key owners use to share notes.

    Raises:
        HTTPException 400: If a profile with this email already exists
    """
    email = str(user_in.email).lower()
    if store.get_profile_by_email(email):
        raise HTTPException(
            status_code=400,
            detail="User with this email already exists."
        )

    profile = Profile(
        email=email,
        password=get_password_hash(user_in.password),  # Hash password using bcrypt
        full_name=user_in.full_name,
    )
    return store.add_profile(profile)


@router.post("/login", response_model=Token)
def login(
    response: Response,
    store: RemoteStore = Depends(deps.get_store),
    form_data: OAuth2PasswordRequestForm = Depends(),
):
    """
    Authenticate a principal and issue an access token.

    The token is returned and also set as an HTTP-only cookie for browser
    clients. OAuth2PasswordRequestForm uses the 'username' field, which we
    treat as the email.

    Raises:
        HTTPException 401: If credentials are invalid
    """
    profile = store.get_profile_by_email(form_data.username)

    if not profile or not verify_password(form_data.password, profile.password):
        logger.info("Failed sign-in for %s", form_data.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        subject=profile.email, expires_delta=access_token_expires
    )

    # httponly=True keeps the cookie away from page scripts
    response.set_cookie(
        key="access_token",
        value=f"Bearer {access_token}",
        httponly=True,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax"
    )

    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/logout")
def logout(response: Response):
    """
    Sign out by clearing the authentication cookie.

    API clients can simply discard their token.
    """
    response.delete_cookie("access_token")
    return {"status": "success", "detail": "Signed out"}


@router.get("/me", response_model=ProfileRead)
def read_me(current_user: Profile = Depends(deps.get_current_user)):
    """Return the signed-in principal."""
    return current_user
