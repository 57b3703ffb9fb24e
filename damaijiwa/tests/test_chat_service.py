"""Tests for the conversation orchestrator."""
import pytest
from sqlalchemy.orm import Session

from damaijiwa.core.exceptions import UpstreamError
from damaijiwa.repositories.chat_repository import chat_repository
from damaijiwa.repositories.user_repository import user_repository
from damaijiwa.schemas.chat import Category, ChatTurn
from damaijiwa.schemas.user import UserResponse
from damaijiwa.services.chat_service import FALLBACK_REPLY, GREETING_PROMPT, ChatService

from conftest import FakeGenerator


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator(reply="Ceritakan lebih banyak.")


@pytest.fixture
def service(generator: FakeGenerator) -> ChatService:
    return ChatService(generator=generator)


@pytest.fixture
def user_id(db: Session) -> str:
    return user_repository.create_anonymous(db, "anon_service").id


async def test__start_journey__persists_single_greeting(
    db: Session, service: ChatService, generator: FakeGenerator, user_id: str,
) -> None:
    history = await service.start_journey(db, user_id, Category.TRAUMA)

    assert history == [ChatTurn(role="model", text="Ceritakan lebih banyak.")]
    stored = chat_repository.read(db, user_id, "Trauma")
    assert [(m.role, m.text) for m in stored] == [("model", "Ceritakan lebih banyak.")]
    assert generator.calls[0]["history"] == []
    assert generator.calls[0]["user_message"] == GREETING_PROMPT.format(category="Trauma")


async def test__start_journey__replays_existing_history(
    db: Session, service: ChatService, generator: FakeGenerator, user_id: str,
) -> None:
    chat_repository.append(db, user_id, "Sosial", "model", "Halo!")
    chat_repository.append(db, user_id, "Sosial", "user", "Saya kesepian.")

    history = await service.start_journey(db, user_id, Category.SOSIAL)

    assert [t.text for t in history] == ["Halo!", "Saya kesepian."]
    assert generator.calls == []


async def test__turn__appends_user_then_model(
    db: Session, service: ChatService, generator: FakeGenerator, user_id: str,
) -> None:
    prior = [ChatTurn(role="model", text="Halo!")]

    reply = await service.turn(db, user_id, Category.EKONOMI, prior, "Gaji saya kurang.")

    assert reply == "Ceritakan lebih banyak."
    stored = chat_repository.read(db, user_id, "Ekonomi")
    assert [(m.role, m.text) for m in stored] == [
        ("user", "Gaji saya kurang."),
        ("model", "Ceritakan lebih banyak."),
    ]
    assert generator.calls[0]["category"] == Category.EKONOMI
    assert generator.calls[0]["history"] == prior


async def test__send_message__forwards_stored_history(
    db: Session, service: ChatService, generator: FakeGenerator, user_id: str,
) -> None:
    await service.start_journey(db, user_id, Category.PERCINTAAN)

    await service.send_message(db, user_id, Category.PERCINTAAN, "Saya patah hati.")

    sent_history = generator.calls[-1]["history"]
    assert [t.role for t in sent_history] == ["model"]
    assert generator.calls[-1]["user_message"] == "Saya patah hati."


async def test__turn__generator_failure_persists_fallback(
    db: Session, service: ChatService, generator: FakeGenerator, user_id: str,
) -> None:
    generator.error = UpstreamError("Response generator failed")

    reply = await service.turn(db, user_id, Category.KELUARGA, [], "Orang tua saya bertengkar.")

    assert reply == FALLBACK_REPLY
    stored = chat_repository.read(db, user_id, "Keluarga")
    assert stored[-1].role == "model"
    assert stored[-1].text == FALLBACK_REPLY


async def test__turn__unexpected_generator_error_also_falls_back(
    db: Session, service: ChatService, generator: FakeGenerator, user_id: str,
) -> None:
    generator.error = RuntimeError("socket closed")

    reply = await service.turn(db, user_id, Category.TRAUMA, [], "halo")

    assert reply == FALLBACK_REPLY


class TestShouldPromptLogin:
    """Login nudge for anonymous users, counted from stored user turns."""

    def _seed(self, db: Session, user_id: str, user_turns: int, category: str = "Keluarga") -> None:
        chat_repository.append(db, user_id, category, "model", "Halo!")
        for i in range(user_turns):
            chat_repository.append(db, user_id, category, "user", f"pesan {i}")
            chat_repository.append(db, user_id, category, "model", f"balasan {i}")

    def test__anonymous_below_threshold(self, db: Session, service: ChatService, user_id: str) -> None:
        self._seed(db, user_id, 3)
        user = UserResponse(id=user_id, is_anonymous=True)
        assert service.should_prompt_login(db, user, Category.KELUARGA, threshold=4) is False

    def test__anonymous_at_threshold(self, db: Session, service: ChatService, user_id: str) -> None:
        self._seed(db, user_id, 4)
        user = UserResponse(id=user_id, is_anonymous=True)
        assert service.should_prompt_login(db, user, Category.KELUARGA, threshold=4) is True

    def test__model_turns_do_not_count(self, db: Session, service: ChatService, user_id: str) -> None:
        for i in range(6):
            chat_repository.append(db, user_id, "Keluarga", "model", f"balasan {i}")
        user = UserResponse(id=user_id, is_anonymous=True)
        assert service.should_prompt_login(db, user, Category.KELUARGA, threshold=4) is False

    def test__counted_per_category(self, db: Session, service: ChatService, user_id: str) -> None:
        self._seed(db, user_id, 5, category="Trauma")
        user = UserResponse(id=user_id, is_anonymous=True)
        assert service.should_prompt_login(db, user, Category.KELUARGA, threshold=4) is False

    def test__signed_in_user_never_prompted(self, db: Session, service: ChatService) -> None:
        signed_in = user_repository.upsert(db, "google-1", name="Sari").id
        self._seed(db, signed_in, 10)
        user = UserResponse(id=signed_in, is_anonymous=False)
        assert service.should_prompt_login(db, user, Category.KELUARGA, threshold=4) is False
