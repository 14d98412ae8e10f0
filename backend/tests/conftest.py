import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")

import pytest
from fastapi.testclient import TestClient #fake http client that calls the FastAPI routes without a real server
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from timetabler.api.deps import get_db, get_event_publisher
from timetabler.db.base import Base
from timetabler.main import app
import timetabler.models  # noqa: F401

from fakes import RecordingPublisher


@pytest.fixture()
def session_factory():
    engine = create_engine( #isolated in-memory DB per test
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def publisher():
    return RecordingPublisher()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def recording_client(client, publisher):
    app.dependency_overrides[get_event_publisher] = lambda: publisher
    return client
