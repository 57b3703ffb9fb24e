import logging
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from damaijiwa.core.database import Base, engine
from damaijiwa.core.exceptions import PersistenceError
from damaijiwa.core.logging_config import setup_logging
import damaijiwa.models  # noqa: F401

logger = logging.getLogger("init_db")

def init_database():
    try:
        # Create all tables
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        raise PersistenceError("Error initializing database", str(e)) from e

    tables = inspect(engine).get_table_names()
    logger.info(f"Database ready at {engine.url}, tables: {tables}")
    return tables

if __name__ == "__main__":
    setup_logging()
    init_database()
