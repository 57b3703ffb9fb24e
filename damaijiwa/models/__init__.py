from .base import BaseModel
from .user import User, ChatMessage

__all__ = ["BaseModel", "User", "ChatMessage"]
