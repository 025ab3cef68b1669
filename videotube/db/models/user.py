# ============================================================================
# FILE: videotube/db/models/user.py
# ============================================================================
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship
from videotube.db.base import Base, new_id, utcnow

class User(Base):
    """User model holding credentials, session state and channel profile"""
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    refresh_token = Column(String, nullable=True)

    avatar_url = Column(String, nullable=False)
    avatar_asset_id = Column(String, nullable=True)
    cover_image_url = Column(String, nullable=True)
    cover_image_asset_id = Column(String, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    videos = relationship("Video", back_populates="owner")
    playlists = relationship("Playlist", back_populates="owner")
    history = relationship(
        "WatchHistory",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="WatchHistory.watched_at.desc()",
    )

class WatchHistory(Base):
    """Ordered set of videos a user has watched"""
    __tablename__ = "watch_history"
    __table_args__ = (UniqueConstraint("user_id", "video_id", name="uq_watch_history_user_video"),)

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    video_id = Column(String(32), ForeignKey("videos.id"), nullable=False)
    watched_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    user = relationship("User", back_populates="history")
    video = relationship("Video")
