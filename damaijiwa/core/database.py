from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from .config import settings

IN_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:"}

def build_engine(database_url: str):
    """In-memory SQLite shares a single connection across sessions."""
    kwargs = {}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in IN_MEMORY_URLS:
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)

engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Declarative base shared by all models
Base = declarative_base()

# Request-scoped session dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
