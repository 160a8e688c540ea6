import os
import tempfile

import pytest

# Point the store and the log files at a throwaway directory before any
# project module is imported.
_TMP_DIR = tempfile.mkdtemp(prefix="venue_calendar_tests_")
os.environ["VENUE_CALENDAR_DB_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["VENUE_CALENDAR_LOG_DIR"] = os.path.join(_TMP_DIR, "logs")
os.environ["VENUE_CALENDAR_SEED_DIR"] = ""


@pytest.fixture
def db_session():
    from database import Base, SessionLocal, engine

    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        SessionLocal.remove()


@pytest.fixture
def client(db_session):
    from fastapi.testclient import TestClient
    from api.main import app

    with TestClient(app) as c:
        yield c

