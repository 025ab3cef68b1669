# ============================================================================
# FILE: videotube/services/playlist_service.py
# ============================================================================
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from videotube.core.exceptions import NotFoundError
from videotube.db.models.playlist import Playlist, PlaylistVideo
from videotube.db.models.user import User
from videotube.db.models.video import Video
from videotube.schemas.playlist import PlaylistCreate, PlaylistDetail, PlaylistSummary, PlaylistUpdate
from videotube.services import projections
from videotube.services.guard import guarded_mutation, load_or_404, loader_for, validate_id
import logging

logger = logging.getLogger(__name__)

load_playlist = loader_for(Playlist)
load_video = loader_for(Video)
load_user = loader_for(User)

class PlaylistService:
    """Service layer for playlist operations"""

    def create_playlist(self, db: Session, owner: User, playlist_data: PlaylistCreate) -> Playlist:
        """Create a new playlist for a user"""
        try:
            playlist = Playlist(
                owner_id=owner.id,
                name=playlist_data.name.strip(),
                description=playlist_data.description.strip(),
            )
            db.add(playlist)
            db.commit()
            db.refresh(playlist)
            logger.info(f"Playlist created: {playlist.id} for user {owner.id}")
            return playlist
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating playlist: {e}")
            raise

    def get_user_playlists(self, db: Session, user_id: str) -> List[PlaylistSummary]:
        """Get all playlists for a user"""
        owner = load_or_404(db, load_user, user_id, "user")
        return projections.playlist_summaries(db, owner.id)

    def get_playlist(self, db: Session, playlist_id: str, viewer: Optional[User]) -> PlaylistDetail:
        """Get a specific playlist with its visible videos"""
        playlist = load_or_404(db, load_playlist, playlist_id, "playlist")
        return projections.playlist_detail(db, playlist, viewer)

    def update_playlist(self, db: Session, playlist_id: str, actor: User, update_data: PlaylistUpdate) -> Playlist:
        """Update playlist details"""
        def apply(db: Session, playlist: Playlist) -> Playlist:
            if update_data.name is not None:
                playlist.name = update_data.name.strip()
            if update_data.description is not None:
                playlist.description = update_data.description.strip()
            return playlist

        return guarded_mutation(db, load_playlist, playlist_id, actor, apply, "playlist")

    def delete_playlist(self, db: Session, playlist_id: str, actor: User) -> Playlist:
        """Delete a playlist (its video entries go with it)"""
        def remove(db: Session, playlist: Playlist) -> Playlist:
            db.delete(playlist)
            return playlist

        return guarded_mutation(db, load_playlist, playlist_id, actor, remove, "playlist")

    def add_video_to_playlist(self, db: Session, playlist_id: str, video_id: str, actor: User) -> Playlist:
        """Add a video to a playlist; adding it twice leaves a single entry"""
        validate_id(video_id, "video")

        def add(db: Session, playlist: Playlist) -> Playlist:
            video = load_or_404(db, load_video, video_id, "video")
            if video.id in playlist.video_ids:
                logger.info(f"Video already in playlist {playlist.id}: {video.id}")
                return playlist
            playlist.entries.append(PlaylistVideo(video_id=video.id))
            return playlist

        try:
            return guarded_mutation(db, load_playlist, playlist_id, actor, add, "playlist")
        except IntegrityError:
            # Added concurrently by another request
            return load_or_404(db, load_playlist, playlist_id, "playlist")

    def remove_video_from_playlist(self, db: Session, playlist_id: str, video_id: str, actor: User) -> Playlist:
        """Remove a video from a playlist"""
        validate_id(video_id, "video")

        def remove(db: Session, playlist: Playlist) -> Playlist:
            entry = next((e for e in playlist.entries if e.video_id == video_id), None)
            if entry is None:
                raise NotFoundError("Video not found in playlist")
            playlist.entries.remove(entry)
            return playlist

        return guarded_mutation(db, load_playlist, playlist_id, actor, remove, "playlist")

# Create singleton instance
playlist_service = PlaylistService()
