# ============================================================================
# FILE: videotube/schemas/social.py
# ============================================================================
from typing import Optional
from datetime import datetime
from videotube.schemas.common import CamelModel, OwnerSummary

class LikeToggleResult(CamelModel):
    subject_id: str
    subject_type: str
    is_liked: bool

class SubscriptionToggleResult(CamelModel):
    channel_id: str
    is_subscribed: bool

class SubscriberEntry(CamelModel):
    """A subscriber of a channel, and whether the channel follows them back"""
    subscriber: OwnerSummary
    subscribed_at: datetime
    subscribed_back: bool = False

class SubscribedChannel(CamelModel):
    channel: OwnerSummary
    subscribed_at: datetime
    latest_video_id: Optional[str] = None

class ChannelStats(CamelModel):
    """Dashboard totals for the acting channel"""
    total_videos: int
    total_views: int
    total_subscribers: int
    total_likes: int

class DashboardVideo(CamelModel):
    id: str
    title: str
    description: str
    thumbnail_url: str
    video_url: str
    is_published: bool
    views: int
    likes_count: int
    created_at: datetime
