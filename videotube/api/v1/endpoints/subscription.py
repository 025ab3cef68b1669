# ============================================================================
# FILE: videotube/api/v1/endpoints/subscription.py
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from videotube.db.session import get_db
from videotube.api.dependencies import require_current_user
from videotube.db.models.user import User
from videotube.schemas.common import ApiResponse, respond
from videotube.schemas.social import SubscribedChannel, SubscriberEntry, SubscriptionToggleResult
from videotube.services.subscription_service import subscription_service

router = APIRouter()

@router.post("/c/{channel_id}", response_model=ApiResponse[SubscriptionToggleResult])
def toggle_subscription(
    channel_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    result = subscription_service.toggle_subscription(db, channel_id, current_user)
    message = "Subscribed successfully" if result.is_subscribed else "Unsubscribed successfully"
    return respond(result, message)

@router.get("/c/{channel_id}", response_model=ApiResponse[List[SubscriberEntry]])
def get_channel_subscribers(
    channel_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    return respond(subscription_service.get_channel_subscribers(db, channel_id), "Subscribers fetched successfully")

@router.get("/u/{subscriber_id}", response_model=ApiResponse[List[SubscribedChannel]])
def get_subscribed_channels(
    subscriber_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    return respond(
        subscription_service.get_subscribed_channels(db, subscriber_id),
        "Subscribed channels fetched successfully",
    )
