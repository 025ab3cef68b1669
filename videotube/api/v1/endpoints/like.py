# ============================================================================
# FILE: videotube/api/v1/endpoints/like.py
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from videotube.db.session import get_db
from videotube.api.dependencies import require_current_user
from videotube.db.models.like import LikeSubject
from videotube.db.models.user import User
from videotube.schemas.common import ApiResponse, respond
from videotube.schemas.social import LikeToggleResult
from videotube.schemas.video import LikedVideo
from videotube.services.like_service import like_service

router = APIRouter()

def _toggle(db: Session, subject_type: LikeSubject, subject_id: str, user: User):
    result = like_service.toggle_like(db, subject_type, subject_id, user)
    message = f"{subject_type.value.capitalize()} {'liked' if result.is_liked else 'unliked'}"
    return respond(result, message)

@router.post("/toggle/video/{video_id}", response_model=ApiResponse[LikeToggleResult])
def toggle_video_like(
    video_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    return _toggle(db, LikeSubject.VIDEO, video_id, current_user)

@router.post("/toggle/comment/{comment_id}", response_model=ApiResponse[LikeToggleResult])
def toggle_comment_like(
    comment_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    return _toggle(db, LikeSubject.COMMENT, comment_id, current_user)

@router.post("/toggle/tweet/{tweet_id}", response_model=ApiResponse[LikeToggleResult])
def toggle_tweet_like(
    tweet_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    return _toggle(db, LikeSubject.TWEET, tweet_id, current_user)

@router.get("/videos", response_model=ApiResponse[List[LikedVideo]])
def get_liked_videos(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    return respond(like_service.get_liked_videos(db, current_user), "Liked videos fetched successfully")
