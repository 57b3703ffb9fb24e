from sqlalchemy import Column, String, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from .base import BaseModel

class User(BaseModel):
    __tablename__ = "users"

    # anon_<hex> for anonymous visitors, Google "sub" claim for OAuth users
    id = Column(String(255), primary_key=True, index=True)
    email = Column(String(255))
    name = Column(String(255))
    picture = Column(Text)
    is_anonymous = Column(Boolean, nullable=False, default=False)

    messages = relationship("ChatMessage", back_populates="user")

class ChatMessage(BaseModel):
    __tablename__ = "chat_history"

    user_id = Column(String(255), ForeignKey("users.id"), nullable=False, index=True)
    category = Column(String(50), nullable=False, index=True)
    role = Column(String(10), nullable=False)  # user, model
    text = Column(Text, nullable=False)

    user = relationship("User", back_populates="messages")
