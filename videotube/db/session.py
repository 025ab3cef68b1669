# ============================================================================
# FILE: videotube/db/session.py
# ============================================================================
from typing import Iterator
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from videotube.config import settings


def _connect_args(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False, "timeout": settings.DATABASE_TIMEOUT_SECONDS}
    if database_url.startswith("postgresql"):
        return {
            "connect_timeout": settings.DATABASE_TIMEOUT_SECONDS,
            "options": f"-c statement_timeout={settings.DATABASE_TIMEOUT_SECONDS * 1000}",
        }
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args(settings.DATABASE_URL),
    pool_pre_ping=True,
    echo=settings.DEBUG,
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def get_db() -> Iterator[Session]:
    """Request-scoped database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
