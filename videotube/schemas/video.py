# ============================================================================
# FILE: videotube/schemas/video.py
# ============================================================================
from pydantic import Field
from typing import Optional
from datetime import datetime
from videotube.schemas.common import CamelModel, OwnerSummary

class VideoResponse(CamelModel):
    """Schema for a stored video"""
    id: str
    owner_id: str
    title: str
    description: str
    video_url: str
    thumbnail_url: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

class VideoCard(CamelModel):
    """Video list item with its owner"""
    id: str
    title: str
    description: str
    video_url: str
    thumbnail_url: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime
    owner: OwnerSummary

class ChannelOwner(OwnerSummary):
    """Owner block of the video page, relative to the viewer"""
    subscribers_count: int = 0
    is_subscribed: bool = False

class VideoDetail(CamelModel):
    """Video page: video plus likes and owner subscription context"""
    id: str
    title: str
    description: str
    video_url: str
    thumbnail_url: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime
    likes_count: int
    is_liked: bool
    owner: ChannelOwner

class LikedVideo(CamelModel):
    """Entry of the viewer's liked-videos list"""
    liked_at: datetime
    video: VideoCard

class HistoryEntry(CamelModel):
    watched_at: datetime
    video: VideoCard

# sortBy query values mapped to Video columns
VIDEO_SORT_FIELDS = {"createdAt": "created_at", "views": "views", "duration": "duration", "title": "title"}

class VideoCreate(CamelModel):
    """Text fields of the publish form"""
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)

class VideoUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
