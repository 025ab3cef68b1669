# ============================================================================
# FILE: videotube/api/v1/endpoints/playlist.py
# ============================================================================
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from videotube.db.session import get_db
from videotube.api.dependencies import get_optional_user, require_current_user
from videotube.schemas.common import ApiResponse, respond
from videotube.schemas.playlist import (
    PlaylistCreate,
    PlaylistDetail,
    PlaylistResponse,
    PlaylistSummary,
    PlaylistUpdate,
)
from videotube.services.playlist_service import playlist_service
from videotube.db.models.user import User
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("", response_model=ApiResponse[PlaylistResponse], status_code=status.HTTP_201_CREATED)
def create_playlist(
    playlist_data: PlaylistCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """
    Create a new playlist
    Requires authentication
    """
    playlist = playlist_service.create_playlist(db, current_user, playlist_data)
    return respond(PlaylistResponse.model_validate(playlist), "Playlist created successfully", status.HTTP_201_CREATED)

@router.get("/user/{user_id}", response_model=ApiResponse[List[PlaylistSummary]])
def get_user_playlists(
    user_id: str,
    db: Session = Depends(get_db)
):
    """
    Get all playlists of a user with video/view totals
    """
    return respond(playlist_service.get_user_playlists(db, user_id), "Playlists fetched successfully")

@router.get("/{playlist_id}", response_model=ApiResponse[PlaylistDetail])
def get_playlist(
    playlist_id: str,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    """
    Get a specific playlist with its owner and videos
    """
    return respond(playlist_service.get_playlist(db, playlist_id, viewer), "Playlist fetched successfully")

@router.patch("/{playlist_id}", response_model=ApiResponse[PlaylistResponse])
def update_playlist(
    playlist_id: str,
    update_data: PlaylistUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """
    Update playlist details (name, description)
    Requires authentication and ownership
    """
    playlist = playlist_service.update_playlist(db, playlist_id, current_user, update_data)
    return respond(PlaylistResponse.model_validate(playlist), "Playlist updated successfully")

@router.delete("/{playlist_id}", response_model=ApiResponse[dict])
def delete_playlist(
    playlist_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """
    Delete a playlist
    Requires authentication and ownership
    """
    playlist = playlist_service.delete_playlist(db, playlist_id, current_user)
    return respond({"playlistId": playlist.id}, "Playlist deleted successfully")

@router.patch("/{playlist_id}/add/{video_id}", response_model=ApiResponse[PlaylistResponse])
def add_video_to_playlist(
    playlist_id: str,
    video_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """
    Add a video to a playlist
    Requires authentication and ownership
    """
    playlist = playlist_service.add_video_to_playlist(db, playlist_id, video_id, current_user)
    return respond(PlaylistResponse.model_validate(playlist), "Video added to playlist")

@router.patch("/{playlist_id}/remove/{video_id}", response_model=ApiResponse[PlaylistResponse])
def remove_video_from_playlist(
    playlist_id: str,
    video_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """
    Remove a video from a playlist
    Requires authentication and ownership
    """
    playlist = playlist_service.remove_video_from_playlist(db, playlist_id, video_id, current_user)
    return respond(PlaylistResponse.model_validate(playlist), "Video removed from playlist")
