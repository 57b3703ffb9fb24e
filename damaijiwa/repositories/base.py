import logging
from typing import Generic, TypeVar, Type, Optional, Dict, Any
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from damaijiwa.core.exceptions import PersistenceError
from damaijiwa.models.base import BaseModel

ModelType = TypeVar("ModelType", bound=BaseModel)

logger = logging.getLogger("repository")

class BaseRepository(Generic[ModelType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    def get_by_id(self, db: Session, id: Any) -> Optional[ModelType]:
        try:
            return db.get(self.model, id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read {self.model.__tablename__}", str(e)) from e

    def create(self, db: Session, obj_in: Dict[str, Any]) -> ModelType:
        db_obj = self.model(**obj_in)
        db.add(db_obj)
        self.commit(db, db_obj)
        return db_obj

    def commit(self, db: Session, db_obj: Optional[ModelType] = None) -> None:
        try:
            db.commit()
            if db_obj is not None:
                db.refresh(db_obj)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Commit on {self.model.__tablename__} failed: {e}")
            raise PersistenceError(f"Failed to save {self.model.__tablename__}", str(e)) from e
