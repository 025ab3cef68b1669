# ============================================================================
# FILE: videotube/db/models/playlist.py
# ============================================================================
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from videotube.db.base import Base, new_id, utcnow

class Playlist(Base):
    """Playlist model for user-created playlists"""
    __tablename__ = "playlists"

    id = Column(String(32), primary_key=True, default=new_id)
    owner_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    owner = relationship("User", back_populates="playlists")
    entries = relationship(
        "PlaylistVideo",
        back_populates="playlist",
        cascade="all, delete-orphan",
        order_by="PlaylistVideo.added_at",
    )

    @property
    def video_ids(self):
        return [entry.video_id for entry in self.entries]

class PlaylistVideo(Base):
    """Junction table keeping playlist videos unique and ordered"""
    __tablename__ = "playlist_videos"
    __table_args__ = (UniqueConstraint("playlist_id", "video_id", name="uq_playlist_video"),)

    id = Column(String(32), primary_key=True, default=new_id)
    playlist_id = Column(String(32), ForeignKey("playlists.id"), nullable=False, index=True)
    video_id = Column(String(32), ForeignKey("videos.id"), nullable=False)
    added_at = Column(DateTime, default=utcnow)

    # Relationships
    playlist = relationship("Playlist", back_populates="entries")
    video = relationship("Video")
