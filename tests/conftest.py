"""
pytest configuration: an in-memory SQLite registry per test.
"""
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# must be set before app.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from app.database import Base, get_db, init_db  # noqa: E402
from app.main import app  # noqa: E402

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ALICE = "o6_alice_openid"
BOB = "o6_bob_openid"


@pytest.fixture
def db_session():
    init_db(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"x-wx-openid": ALICE}


@pytest.fixture
def other_headers():
    return {"x-wx-openid": BOB}


@pytest.fixture
def uncle():
    return {
        "id": "mom_bro_1",
        "name": "uncle",
        "path": ["mother", "brother"],
    }
