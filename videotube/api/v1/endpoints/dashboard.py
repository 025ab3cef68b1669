# ============================================================================
# FILE: videotube/api/v1/endpoints/dashboard.py
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from videotube.db.session import get_db
from videotube.api.dependencies import require_current_user
from videotube.db.models.user import User
from videotube.schemas.common import ApiResponse, respond
from videotube.schemas.social import ChannelStats, DashboardVideo
from videotube.services.dashboard_service import dashboard_service

router = APIRouter()

@router.get("/stats", response_model=ApiResponse[ChannelStats])
def get_channel_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """
    Totals for the current user's channel
    Requires authentication
    """
    return respond(dashboard_service.get_channel_stats(db, current_user), "Channel stats fetched successfully")

@router.get("/videos", response_model=ApiResponse[List[DashboardVideo]])
def get_channel_videos(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    return respond(dashboard_service.get_channel_videos(db, current_user), "Channel videos fetched successfully")
