import os

# onlynote.main builds a module-level app on import; keep it off the disk
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from onlynote.core.config import Settings
from onlynote.db.session import build_engine, init_db
from onlynote.db.store import RemoteStore
from onlynote.models.profile import Profile
from onlynote.services.access import AccessResolver
from onlynote.services.sharing import SharingManager


@pytest.fixture()
def engine(tmp_path):
    engine = build_engine(Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'store.db'}"))
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def store(engine):
    with Session(engine) as session:
        yield RemoteStore(session)


@pytest.fixture()
def resolver(store):
    return AccessResolver(store)


@pytest.fixture()
def sharing(store):
    return SharingManager(store)


@pytest.fixture()
def make_profile(store):
    def _make(email: str) -> Profile:
        return store.add_profile(Profile(email=email))
    return _make


@pytest.fixture()
def client(tmp_path):
    from onlynote.main import create_app

    app = create_app(Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'api.db'}"))
    with TestClient(app) as c:
        yield c
