# ============================================================================
# FILE: videotube/db/models/video.py
# ============================================================================
from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from videotube.db.base import Base, new_id, utcnow

class Video(Base):
    """Published video with its media asset references"""
    __tablename__ = "videos"

    id = Column(String(32), primary_key=True, default=new_id)
    owner_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)

    video_url = Column(String, nullable=False)
    video_asset_id = Column(String, nullable=False)
    thumbnail_url = Column(String, nullable=False)
    thumbnail_asset_id = Column(String, nullable=False)

    duration = Column(Float, default=0.0, nullable=False)  # seconds
    views = Column(Integer, default=0, nullable=False)
    is_published = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    owner = relationship("User", back_populates="videos")
    comments = relationship("Comment", back_populates="video")
