# ============================================================================
# FILE: videotube/schemas/comment.py
# ============================================================================
from pydantic import Field
from typing import Optional
from datetime import datetime
from videotube.schemas.common import CamelModel, OwnerSummary

class CommentCreate(CamelModel):
    content: str = Field(min_length=1, max_length=2000)

class CommentUpdate(CommentCreate):
    pass

class CommentResponse(CamelModel):
    id: str
    owner_id: str
    video_id: str
    content: str
    created_at: datetime
    updated_at: Optional[datetime] = None

class CommentCard(CamelModel):
    """Comment with owner, like count and the viewer's like flag"""
    id: str
    content: str
    created_at: datetime
    owner: OwnerSummary
    likes_count: int
    is_liked: bool
