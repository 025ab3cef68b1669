# ============================================================================
# FILE: videotube/db/base.py
# ============================================================================
import uuid
from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_id() -> str:
    """Opaque 32-char hex identifier for every stored document"""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the naive DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
