# ============================================================================
# FILE: videotube/schemas/tweet.py
# ============================================================================
from pydantic import Field
from typing import Optional
from datetime import datetime
from videotube.schemas.common import CamelModel, OwnerSummary

class TweetCreate(CamelModel):
    content: str = Field(min_length=1, max_length=280)

class TweetUpdate(TweetCreate):
    pass

class TweetResponse(CamelModel):
    id: str
    owner_id: str
    content: str
    created_at: datetime
    updated_at: Optional[datetime] = None

class TweetCard(CamelModel):
    """Tweet with owner, like count and the viewer's like flag"""
    id: str
    content: str
    created_at: datetime
    owner: OwnerSummary
    likes_count: int
    is_liked: bool
