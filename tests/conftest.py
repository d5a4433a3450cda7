"""Shared test fixtures."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from todoay.config import get_db
from todoay.main import create_app
from todoay.models import Base

# In-memory SQLite shared by the whole session; each test rolls back.
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine():
    eng = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)


@pytest.fixture()
def db_session(engine):
    """Yield a session whose work is discarded after the test."""
    connection = engine.connect()
    transaction = connection.begin()
    Session = sessionmaker(bind=connection)
    session = Session()
    yield session
    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture()
def app(db_session):
    application = create_app()

    def override_get_db():
        yield db_session

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture()
def client(app):
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


# ---------------------------------------------------------------------------
# Convenience helpers
# ---------------------------------------------------------------------------

VALID_EMAIL = "todo@example.com"
VALID_PASSWORD = "Secr3t!pass"
VALID_NICKNAME = "todoer"


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def registered_account(client):
    resp = client.post(
        "/auth/sign-up",
        json={"email": VALID_EMAIL, "password": VALID_PASSWORD, "nickname": VALID_NICKNAME},
    )
    assert resp.status_code == 204, resp.text
    return {"email": VALID_EMAIL, "password": VALID_PASSWORD, "nickname": VALID_NICKNAME}


@pytest.fixture()
def tokens(client, registered_account):
    """Log in and return the token pair."""
    resp = client.post(
        "/auth/login",
        json={"email": VALID_EMAIL, "password": VALID_PASSWORD},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture()
def auth_headers(tokens):
    return bearer(tokens["accessToken"])
