from typing import List, Optional, Sequence
import logging
from sqlalchemy.orm import Session
from damaijiwa.core.config import settings
from damaijiwa.core.exceptions import UpstreamError
from damaijiwa.repositories.chat_repository import chat_repository
from damaijiwa.schemas.chat import Category, ChatTurn
from damaijiwa.schemas.user import UserResponse
from damaijiwa.services.openai_service import OpenAIService, openai_service

logger = logging.getLogger("chat_service")

FALLBACK_REPLY = "Maaf, ada gangguan koneksi. Mari kita coba lagi."

GREETING_PROMPT = (
    "Halo, saya memilih kategori {category}. "
    "Bisa bantu saya memulai perjalanan untuk berdamai dengan masalah ini?"
)

class ChatService:
    def __init__(self, generator: Optional[OpenAIService] = None):
        self.generator = generator or openai_service

    def get_chat_history(self, db: Session, user_id: str, category: Category) -> List[ChatTurn]:
        messages = chat_repository.read(db, user_id, Category(category).value)
        return [ChatTurn.model_validate(m) for m in messages]

    def save_turn(self, db: Session, user_id: str, category: Category, role: str, text: str) -> ChatTurn:
        message = chat_repository.append(db, user_id, Category(category).value, role, text)
        return ChatTurn.model_validate(message)

    async def generate_reply(self, category: Category, history: Sequence[ChatTurn], user_text: str) -> str:
        """Call the generator; any failure becomes the fixed apology."""
        try:
            return await self.generator.generate_response(category, history, user_text)
        except UpstreamError as e:
            logger.error(f"Generator failed for {category}: {e.message} ({e.details})")
        except Exception as e:
            logger.exception(f"Unexpected generator error for {category}: {e}")
        return FALLBACK_REPLY

    async def turn(
        self,
        db: Session,
        user_id: str,
        category: Category,
        history: Sequence[ChatTurn],
        user_text: str,
    ) -> str:
        # 1. Persist the user turn
        self.save_turn(db, user_id, category, "user", user_text)
        # 2. Ask the model (or fall back)
        reply = await self.generate_reply(category, history, user_text)
        # 3. Persist the reply, separate commit from step 1
        self.save_turn(db, user_id, category, "model", reply)
        return reply

    async def send_message(self, db: Session, user_id: str, category: Category, user_text: str) -> str:
        history = self.get_chat_history(db, user_id, category)
        return await self.turn(db, user_id, category, history, user_text)

    async def start_journey(self, db: Session, user_id: str, category: Category) -> List[ChatTurn]:
        """Return the stored conversation, opening it with a greeting when empty."""
        history = self.get_chat_history(db, user_id, category)
        if history:
            return history
        prompt = GREETING_PROMPT.format(category=Category(category).value)
        greeting = await self.generate_reply(category, [], prompt)
        # only the model side of the greeting is kept
        return [self.save_turn(db, user_id, category, "model", greeting)]

    def should_prompt_login(
        self,
        db: Session,
        user: UserResponse,
        category: Category,
        threshold: Optional[int] = None,
    ) -> bool:
        if not user.is_anonymous:
            return False
        if threshold is None:
            threshold = settings.login_prompt_after
        sent = chat_repository.count(db, user.id, Category(category).value, role="user")
        return sent >= threshold

chat_service = ChatService()
