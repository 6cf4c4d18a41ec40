"""Database engine and session factory for the ledger store"""

from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from ledger_engine.config import settings
from ledger_engine.infrastructure.database.models import Base


def engine_options(database_url: str) -> Dict[str, Any]:
    """Pool settings for server databases; SQLite (local runs, tests) gets none"""
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": 5,
        "max_overflow": 5,
        "pool_recycle": 1800,
    }


engine = create_engine(settings.database_url, **engine_options(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_schema(bind: Engine = engine) -> None:
    """Create missing tables; migrations are owned by the persistence service"""
    Base.metadata.create_all(bind=bind)


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; callers commit, anything left open is rolled back"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
