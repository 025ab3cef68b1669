# ============================================================================
# FILE: videotube/schemas/playlist.py
# ============================================================================
from pydantic import Field, model_validator
from typing import Optional, List
from datetime import datetime
from videotube.schemas.common import CamelModel, OwnerSummary

class PlaylistCreate(CamelModel):
    """Schema for creating a playlist"""
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)

class PlaylistUpdate(CamelModel):
    """Schema for updating a playlist"""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)

    @model_validator(mode="after")
    def require_change(self):
        if self.name is None and self.description is None:
            raise ValueError("name or description is required")
        return self

class PlaylistResponse(CamelModel):
    """Schema for playlist response"""
    id: str
    owner_id: str
    name: str
    description: str
    videos: List[str] = Field(default_factory=list, validation_alias="video_ids", serialization_alias="videos")
    created_at: datetime
    updated_at: Optional[datetime] = None

class PlaylistSummary(CamelModel):
    """Playlist list item with totals over its videos"""
    id: str
    name: str
    description: str
    total_videos: int
    total_views: int
    created_at: datetime
    updated_at: Optional[datetime] = None

class PlaylistVideoItem(CamelModel):
    id: str
    title: str
    description: str
    video_url: str
    thumbnail_url: str
    duration: float
    views: int
    created_at: datetime

class PlaylistDetail(PlaylistSummary):
    """Playlist page with owner and its published videos"""
    owner: OwnerSummary
    videos: List[PlaylistVideoItem] = []
