from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from .base import BaseRepository
from damaijiwa.core.exceptions import PersistenceError
from damaijiwa.models.user import ChatMessage

class ChatRepository(BaseRepository[ChatMessage]):
    """Append-only message log, one linear conversation per (user, category)."""

    def __init__(self):
        super().__init__(ChatMessage)

    def append(self, db: Session, user_id: str, category: str, role: str, text: str) -> ChatMessage:
        if not role or not category:
            raise ValueError("role and category are required")
        return self.create(db, {
            "user_id": user_id,
            "category": category,
            "role": role,
            "text": text,
        })

    def read(self, db: Session, user_id: str, category: str) -> List[ChatMessage]:
        # created_at has second resolution, id keeps insertion order inside a second
        try:
            return db.query(ChatMessage).filter(
                ChatMessage.user_id == user_id,
                ChatMessage.category == category,
            ).order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc()).all()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to fetch history", str(e)) from e

    def count(self, db: Session, user_id: str, category: str, role: Optional[str] = None) -> int:
        try:
            query = db.query(func.count(ChatMessage.id)).filter(
                ChatMessage.user_id == user_id,
                ChatMessage.category == category,
            )
            if role:
                query = query.filter(ChatMessage.role == role)
            return query.scalar() or 0
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to count history", str(e)) from e

chat_repository = ChatRepository()
