# ============================================================================
# FILE: videotube/api/v1/endpoints/comment.py
# ============================================================================
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
from videotube.db.session import get_db
from videotube.api.dependencies import get_optional_user, page_params, require_current_user
from videotube.db.models.user import User
from videotube.schemas.comment import CommentCard, CommentCreate, CommentResponse, CommentUpdate
from videotube.schemas.common import ApiResponse, Page, PageParams, respond
from videotube.services.comment_service import comment_service

router = APIRouter()

@router.get("/video/{video_id}", response_model=ApiResponse[Page[CommentCard]])
def get_video_comments(
    video_id: str,
    params: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    """
    Comments of a video, newest first (page is 1-based)
    """
    page = comment_service.get_video_comments(db, video_id, viewer, params)
    return respond(page, "Comments fetched successfully")

@router.post("/video/{video_id}", response_model=ApiResponse[CommentResponse], status_code=status.HTTP_201_CREATED)
def add_comment(
    video_id: str,
    comment_data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    comment = comment_service.add_comment(db, video_id, current_user, comment_data)
    return respond(CommentResponse.model_validate(comment), "Comment added successfully", status.HTTP_201_CREATED)

@router.patch("/{comment_id}", response_model=ApiResponse[CommentResponse])
def update_comment(
    comment_id: str,
    update_data: CommentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    comment = comment_service.update_comment(db, comment_id, current_user, update_data)
    return respond(CommentResponse.model_validate(comment), "Comment updated successfully")

@router.delete("/{comment_id}", response_model=ApiResponse[dict])
def delete_comment(
    comment_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    comment = comment_service.delete_comment(db, comment_id, current_user)
    return respond({"commentId": comment.id}, "Comment deleted successfully")
