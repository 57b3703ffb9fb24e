import uuid
import logging
from sqlalchemy.orm import Session
from typing import Optional
from damaijiwa.repositories.user_repository import user_repository
from damaijiwa.schemas.user import UserResponse, GoogleIdentity

logger = logging.getLogger("user_service")

class UserService:
    def new_anonymous_id(self) -> str:
        return f"anon_{uuid.uuid4().hex}"

    def create_anonymous_user(self, db: Session) -> UserResponse:
        db_user = user_repository.create_anonymous(db, self.new_anonymous_id())
        logger.info(f"Created anonymous user {db_user.id}")
        return UserResponse.model_validate(db_user)

    def upsert_google_user(self, db: Session, identity: GoogleIdentity) -> UserResponse:
        db_user = user_repository.upsert(
            db,
            identity.sub,
            email=identity.email,
            name=identity.name,
            picture=identity.picture,
        )
        return UserResponse.model_validate(db_user)

    def get_user_by_id(self, db: Session, user_id: str) -> Optional[UserResponse]:
        db_user = user_repository.get_by_id(db, user_id)
        if db_user:
            return UserResponse.model_validate(db_user)
        return None

user_service = UserService()
