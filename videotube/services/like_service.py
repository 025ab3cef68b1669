# ============================================================================
# FILE: videotube/services/like_service.py
# ============================================================================
from typing import List
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from videotube.core.cache import cache, channel_stats_key
from videotube.core.exceptions import NotFoundError
from videotube.db.models.comment import Comment
from videotube.db.models.like import Like, LikeSubject
from videotube.db.models.tweet import Tweet
from videotube.db.models.user import User
from videotube.db.models.video import Video
from videotube.schemas.social import LikeToggleResult
from videotube.schemas.video import LikedVideo
from videotube.services import projections
from videotube.services.guard import ensure_visible, load_or_404, loader_for
import logging

logger = logging.getLogger(__name__)

SUBJECT_MODELS = {
    LikeSubject.VIDEO: Video,
    LikeSubject.COMMENT: Comment,
    LikeSubject.TWEET: Tweet,
}

class LikeService:
    """Like/unlike toggling for videos, comments and tweets"""

    def _load_subject(self, db: Session, subject_type: LikeSubject, subject_id: str, user: User):
        """Load a likeable subject; anything under an unpublished video is hidden from non-owners"""
        subject = load_or_404(db, loader_for(SUBJECT_MODELS[subject_type]), subject_id, subject_type.value)
        if subject_type == LikeSubject.VIDEO:
            ensure_visible(subject, user)
        elif subject_type == LikeSubject.COMMENT:
            video = db.get(Video, subject.video_id)
            if video is None:
                raise NotFoundError("Comment not found")
            ensure_visible(video, user)
        return subject

    def toggle_like(self, db: Session, subject_type: LikeSubject, subject_id: str, user: User) -> LikeToggleResult:
        """
        Flip the (subject, user) like state. The delete reports whether a like
        existed; when none did, a new one is inserted. A concurrent duplicate
        insert is stopped by the unique constraint and counts as liked.
        """
        label = subject_type.value
        subject = self._load_subject(db, subject_type, subject_id, user)

        removed = db.execute(
            delete(Like)
            .where(
                Like.subject_type == subject_type,
                Like.subject_id == subject_id,
                Like.liked_by_id == user.id,
            )
            .execution_options(synchronize_session=False)
        ).rowcount
        if removed:
            db.commit()
            self._invalidate_stats(subject_type, subject)
            logger.info(f"User {user.id} unliked {label} {subject_id}")
            return LikeToggleResult(subject_id=subject_id, subject_type=label, is_liked=False)

        try:
            db.add(Like(subject_type=subject_type, subject_id=subject_id, liked_by_id=user.id))
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info(f"Concurrent like on {label} {subject_id} by {user.id} already stored")
        else:
            logger.info(f"User {user.id} liked {label} {subject_id}")
        self._invalidate_stats(subject_type, subject)
        return LikeToggleResult(subject_id=subject_id, subject_type=label, is_liked=True)

    def _invalidate_stats(self, subject_type: LikeSubject, subject) -> None:
        # channel totals only count likes on videos
        if subject_type == LikeSubject.VIDEO:
            cache.delete_cache(channel_stats_key(subject.owner_id))

    def get_liked_videos(self, db: Session, user: User) -> List[LikedVideo]:
        return projections.liked_videos(db, user)

# Create singleton instance
like_service = LikeService()
