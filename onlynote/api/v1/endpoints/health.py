from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from typing import Any
import logging

from onlynote.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=dict[str, Any])
def health_check(db: Session = Depends(get_db)) -> Any:
    """
    Health check endpoint, including a round trip to the store.
    """
    try:
        db.connection().execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as exc:
        logger.error("Store health check failed: %s", exc)
        database = "unavailable"
    return {"status": "ok", "database": database}
