# ============================================================================
# FILE: videotube/db/init_db.py
# ============================================================================
from videotube.db.base import Base
# Import every model so the metadata and relationships are complete
from videotube.db.models import comment, like, playlist, subscription, tweet, user, video  # noqa: F401

def init_db(engine) -> None:
    """Create database tables (SQLite/dev; use migrations in production)"""
    Base.metadata.create_all(bind=engine)
