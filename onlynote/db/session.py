from typing import Generator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine

from onlynote.core.config import Settings


def build_engine(settings: Settings) -> Engine:
    """
    Create the engine for the configured database.

    The engine is owned by whoever builds it (the application factory or a
    test); nothing here keeps a process-wide handle.
    """
    db_url = settings.database_url

    # SQLite fix for multithreading
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}

    return create_engine(db_url, connect_args=connect_args, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
    # Import models so their tables are registered on the metadata
    import onlynote.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    with Session(request.app.state.engine) as session:
        yield session
