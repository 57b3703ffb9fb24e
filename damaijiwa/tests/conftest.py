"""Shared fixtures: in-memory database, fake model and fake identity provider."""
import os

# Must be set before any damaijiwa module reads settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_HTTPS_ONLY"] = "false"
os.environ["APP_URL"] = "http://testserver"
os.environ.pop("OPENAI_API_KEY", None)

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from damaijiwa.core.database import Base, SessionLocal, engine
from damaijiwa.core.exceptions import AuthenticationError, UpstreamError
from damaijiwa.main import app
from damaijiwa.schemas.user import GoogleIdentity
from damaijiwa.services.chat_service import chat_service
from damaijiwa.services.google_oauth_service import GoogleOAuthService
from damaijiwa.services.session_service import get_oauth_service


class FakeGenerator:
    """Stands in for OpenAIService and records every call."""

    def __init__(self, reply: str = "Aku di sini untuk mendengarkan.") -> None:
        self.reply = reply
        self.error: Exception | None = None
        self.calls: list[dict] = []

    async def generate_response(self, category, history, user_message) -> str:
        self.calls.append({
            "category": category,
            "history": list(history),
            "user_message": user_message,
        })
        if self.error is not None:
            raise self.error
        return self.reply


class FakeOAuth(GoogleOAuthService):
    """Identity provider that maps codes to canned identities."""

    def __init__(self) -> None:
        super().__init__(client_id="test-client", client_secret="test-secret")
        self.identities: dict[str, GoogleIdentity] = {}

    async def exchange_code(self, code: str) -> GoogleIdentity:
        if code not in self.identities:
            raise AuthenticationError("Token exchange failed", "invalid_grant")
        return self.identities[code]


@pytest.fixture(autouse=True)
def reset_database() -> Iterator[None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_generator(monkeypatch: pytest.MonkeyPatch) -> FakeGenerator:
    generator = FakeGenerator()
    monkeypatch.setattr(chat_service, "generator", generator)
    return generator


@pytest.fixture
def failing_generator(fake_generator: FakeGenerator) -> FakeGenerator:
    fake_generator.error = UpstreamError("Response generator failed", "boom")
    return fake_generator


@pytest.fixture
def fake_oauth() -> Iterator[FakeOAuth]:
    oauth = FakeOAuth()
    app.dependency_overrides[get_oauth_service] = lambda: oauth
    yield oauth
    app.dependency_overrides.pop(get_oauth_service, None)


@pytest.fixture
def client(fake_generator: FakeGenerator, fake_oauth: FakeOAuth) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def anon_client(client: TestClient) -> TestClient:
    """Client whose session is bound to a fresh anonymous user."""
    response = client.post("/api/auth/anonymous")
    assert response.status_code == 200
    return client
