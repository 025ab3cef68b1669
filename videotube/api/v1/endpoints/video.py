# ============================================================================
# FILE: videotube/api/v1/endpoints/video.py
# ============================================================================
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import Optional
from videotube.db.session import get_db
from videotube.api.dependencies import get_optional_user, page_params, require_current_user
from videotube.core.exceptions import InvalidInputError
from videotube.core.storage import get_asset_store
from videotube.db.models.user import User
from videotube.schemas.common import ApiResponse, Page, PageParams, respond
from videotube.schemas.video import VideoCard, VideoCreate, VideoDetail, VideoResponse, VideoUpdate
from videotube.services.video_service import video_service
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("", response_model=ApiResponse[Page[VideoCard]])
def list_videos(
    params: PageParams = Depends(page_params),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_type: str = Query("desc", alias="sortType"),
    user_id: Optional[str] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    """
    List published videos, optionally for one channel
    """
    page = video_service.list_videos(db, params, viewer, user_id, sort_by, sort_type)
    return respond(page, "Videos fetched successfully")

@router.post("", response_model=ApiResponse[VideoResponse], status_code=status.HTTP_201_CREATED)
def publish_video(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    video_file: Optional[UploadFile] = File(None, alias="videoFile"),
    thumbnail: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage=Depends(get_asset_store),
    current_user: User = Depends(require_current_user)
):
    """
    Upload a video with its thumbnail
    Requires authentication
    """
    try:
        video_data = VideoCreate(title=title or "", description=description or "")
    except ValidationError:
        raise InvalidInputError("Title and description are required")
    video = video_service.publish(db, storage, current_user, video_data, video_file, thumbnail)
    return respond(VideoResponse.model_validate(video), "Video published successfully", status.HTTP_201_CREATED)

@router.get("/{video_id}", response_model=ApiResponse[VideoDetail])
def get_video(
    video_id: str,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    return respond(video_service.watch(db, video_id, viewer), "Video fetched successfully")

@router.patch("/{video_id}", response_model=ApiResponse[VideoResponse])
def update_video(
    video_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage=Depends(get_asset_store),
    current_user: User = Depends(require_current_user)
):
    """
    Update title, description and/or thumbnail
    Requires authentication and ownership
    """
    try:
        update_data = VideoUpdate(title=title, description=description)
    except ValidationError:
        raise InvalidInputError("Title and description cannot be empty")
    video = video_service.update_video(db, storage, video_id, current_user, update_data, thumbnail)
    return respond(VideoResponse.model_validate(video), "Video updated successfully")

@router.delete("/{video_id}", response_model=ApiResponse[dict])
def delete_video(
    video_id: str,
    db: Session = Depends(get_db),
    storage=Depends(get_asset_store),
    current_user: User = Depends(require_current_user)
):
    """
    Delete a video with its comments, likes and media
    Requires authentication and ownership
    """
    video = video_service.delete_video(db, storage, video_id, current_user)
    return respond({"videoId": video.id}, "Video deleted successfully")

@router.patch("/toggle/publish/{video_id}", response_model=ApiResponse[VideoResponse])
def toggle_publish_status(
    video_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    video = video_service.toggle_publish(db, video_id, current_user)
    return respond(VideoResponse.model_validate(video), "Publish status toggled")
