import os

# Settings are read at import time, so the environment must be ready first
os.environ["ENV"] = "testing"
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session
from typing import Generator

from main import app
from core.database import Base, Database
from models.users import User
from services.auth_service import AuthService
from services.credential_store import CredentialStore
from services.google_oauth import GoogleOAuthClient
from utils.deps import get_db, get_google_client
from utils.hashing import get_password_hash

# SYNC SQLite for testing (matches sync service layer)
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

database = Database(SQLALCHEMY_DATABASE_URL)

TEST_PASSWORD = "TestPassword123!"

GOOGLE_PROFILE = {
    "name": "Jane Doe",
    "email": "jane@example.com",
    "picture": "https://example.com/jane.png",
}


class FakeGoogle:
    """
    Stands in for Google's token and userinfo endpoints via httpx.MockTransport.

    Set *_status / *_json to change a reply, or *_error to make the call raise.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.token_status = 200
        self.token_json = {"access_token": "google-access-token", "token_type": "Bearer"}
        self.token_error = None
        self.userinfo_status = 200
        self.userinfo_json = dict(GOOGLE_PROFILE)
        self.userinfo_error = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.host == "oauth2.googleapis.com":
            if self.token_error is not None:
                raise self.token_error
            return httpx.Response(self.token_status, json=self.token_json)

        if self.userinfo_error is not None:
            raise self.userinfo_error
        return httpx.Response(self.userinfo_status, json=self.userinfo_json)


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """
    Creates a fresh, empty database for each test.
    """
    database.create_all()

    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=database.engine)


@pytest.fixture
def store(session: Session) -> CredentialStore:
    return CredentialStore(session)


@pytest.fixture
def fake_google() -> FakeGoogle:
    return FakeGoogle()


@pytest.fixture
async def google_client(fake_google: FakeGoogle):
    google = GoogleOAuthClient(
        client_id="test-client-id",
        client_secret="test-client-secret",
        redirect_uri="http://localhost:3000",
        timeout=1.0,
        transport=httpx.MockTransport(fake_google.handler),
    )
    yield google
    await google.aclose()


@pytest.fixture
def auth_service(store: CredentialStore, google_client: GoogleOAuthClient) -> AuthService:
    return AuthService(store, google=google_client)


@pytest.fixture
def verified_user(session: Session) -> User:
    user = User(
        email="user@example.com",
        hash=get_password_hash(TEST_PASSWORD),
        profile_picture_url=None,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
async def client(session: Session, google_client: GoogleOAuthClient):
    """
    HTTP client bound to the app, with the test database and fake Google
    injected through dependency overrides.
    """
    def override_get_db():
        try:
            yield session
        finally:
            pass  # Session cleanup handled by session fixture

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_google_client] = lambda: google_client

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
