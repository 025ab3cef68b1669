# ============================================================================
# FILE: videotube/db/models/tweet.py
# ============================================================================
from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from videotube.db.base import Base, new_id, utcnow

class Tweet(Base):
    __tablename__ = "tweets"

    id = Column(String(32), primary_key=True, default=new_id)
    owner_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    owner = relationship("User")
