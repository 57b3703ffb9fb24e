from sqlalchemy.orm import Session
from typing import Optional
from .base import BaseRepository
from damaijiwa.models.user import User

class UserRepository(BaseRepository[User]):
    def __init__(self):
        super().__init__(User)

    def create_anonymous(self, db: Session, user_id: str) -> User:
        return self.create(db, {"id": user_id, "is_anonymous": True})

    def upsert(
        self,
        db: Session,
        user_id: str,
        email: Optional[str] = None,
        name: Optional[str] = None,
        picture: Optional[str] = None,
    ) -> User:
        """Insert an OAuth user or overwrite the profile of an existing one."""
        existing = self.get_by_id(db, user_id)
        if existing:
            existing.email = email
            existing.name = name
            existing.picture = picture
            existing.is_anonymous = False
            self.commit(db, existing)
            return existing
        return self.create(db, {
            "id": user_id,
            "email": email,
            "name": name,
            "picture": picture,
            "is_anonymous": False,
        })

user_repository = UserRepository()
