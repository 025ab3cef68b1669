# ============================================================================
# FILE: videotube/services/comment_service.py
# ============================================================================
from typing import Optional
from sqlalchemy import delete
from sqlalchemy.orm import Session
from videotube.db.models.comment import Comment
from videotube.db.models.like import Like, LikeSubject
from videotube.db.models.user import User
from videotube.db.models.video import Video
from videotube.schemas.comment import CommentCard, CommentCreate, CommentUpdate
from videotube.schemas.common import Page, PageParams
from videotube.services import projections
from videotube.services.guard import ensure_visible, guarded_mutation, load_or_404, loader_for
import logging

logger = logging.getLogger(__name__)

load_comment = loader_for(Comment)
load_video = loader_for(Video)

class CommentService:
    """Service layer for video comments"""

    def _load_visible_video(self, db: Session, video_id: str, viewer: Optional[User]) -> Video:
        video = load_or_404(db, load_video, video_id, "video")
        return ensure_visible(video, viewer)

    def get_video_comments(self, db: Session, video_id: str, viewer: Optional[User],
                           params: PageParams) -> Page[CommentCard]:
        video = self._load_visible_video(db, video_id, viewer)
        return projections.comment_cards(db, video.id, viewer, params)

    def add_comment(self, db: Session, video_id: str, owner: User, comment_data: CommentCreate) -> Comment:
        video = self._load_visible_video(db, video_id, owner)
        try:
            comment = Comment(owner_id=owner.id, video_id=video.id, content=comment_data.content.strip())
            db.add(comment)
            db.commit()
            db.refresh(comment)
            logger.info(f"Comment {comment.id} added to video {video.id}")
            return comment
        except Exception as e:
            db.rollback()
            logger.error(f"Error adding comment: {e}")
            raise

    def update_comment(self, db: Session, comment_id: str, actor: User, update_data: CommentUpdate) -> Comment:
        def apply(db: Session, comment: Comment) -> Comment:
            comment.content = update_data.content.strip()
            return comment

        return guarded_mutation(db, load_comment, comment_id, actor, apply, "comment")

    def delete_comment(self, db: Session, comment_id: str, actor: User) -> Comment:
        def remove(db: Session, comment: Comment) -> Comment:
            db.execute(
                delete(Like)
                .where(Like.subject_type == LikeSubject.COMMENT, Like.subject_id == comment.id)
                .execution_options(synchronize_session=False)
            )
            db.delete(comment)
            return comment

        return guarded_mutation(db, load_comment, comment_id, actor, remove, "comment")

# Create singleton instance
comment_service = CommentService()
