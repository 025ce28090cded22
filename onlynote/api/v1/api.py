from fastapi import APIRouter
from onlynote.api.v1.endpoints import auth, health, notes, shares

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])

# Resource endpoints
api_router.include_router(notes.router, prefix="/notes", tags=["notes"])
api_router.include_router(shares.router, prefix="/shares", tags=["shares"])
