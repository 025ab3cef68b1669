# ============================================================================
# FILE: videotube/services/video_service.py
# ============================================================================
from typing import Optional
from fastapi import UploadFile
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from videotube.core.cache import cache, channel_stats_key
from videotube.core.exceptions import InvalidInputError
from videotube.core.storage import UploadedAsset, discard_assets, store_upload
from videotube.db.models.comment import Comment
from videotube.db.models.like import Like, LikeSubject
from videotube.db.models.playlist import PlaylistVideo
from videotube.db.models.user import User, WatchHistory
from videotube.db.models.video import Video
from videotube.schemas.common import Page, PageParams
from videotube.schemas.video import VIDEO_SORT_FIELDS, VideoCard, VideoCreate, VideoDetail, VideoUpdate
from videotube.services import projections
from videotube.services.guard import ensure_visible, guarded_mutation, load_or_404, loader_for, validate_id
from videotube.services.user_service import user_service
import logging

logger = logging.getLogger(__name__)

load_video = loader_for(Video)

class VideoService:
    """Service layer for video operations"""

    def list_videos(self, db: Session, params: PageParams, viewer: Optional[User],
                    user_id: Optional[str] = None, sort_by: str = "createdAt",
                    sort_type: str = "desc") -> Page[VideoCard]:
        if user_id is not None:
            validate_id(user_id, "user")
        if sort_by not in VIDEO_SORT_FIELDS:
            raise InvalidInputError(f"sortBy must be one of {', '.join(VIDEO_SORT_FIELDS)}")
        if sort_type not in ("asc", "desc"):
            raise InvalidInputError("sortType must be asc or desc")
        return projections.video_cards(
            db,
            params,
            viewer=viewer,
            owner_id=user_id,
            sort_column=VIDEO_SORT_FIELDS[sort_by],
            descending=sort_type == "desc",
        )

    def publish(self, db: Session, storage, owner: User, video_data: VideoCreate,
                video_file: Optional[UploadFile], thumbnail: Optional[UploadFile]) -> Video:
        """Upload the media files and create the video record"""
        if video_file is None or thumbnail is None:
            raise InvalidInputError("Video file and thumbnail are required")

        uploaded = []
        try:
            video_asset = store_upload(storage, video_file)
            uploaded.append(video_asset)
            thumbnail_asset = store_upload(storage, thumbnail)
            uploaded.append(thumbnail_asset)

            video = Video(
                owner_id=owner.id,
                title=video_data.title.strip(),
                description=video_data.description.strip(),
                video_url=video_asset.url,
                video_asset_id=video_asset.asset_id,
                thumbnail_url=thumbnail_asset.url,
                thumbnail_asset_id=thumbnail_asset.asset_id,
                duration=video_asset.duration,
            )
            db.add(video)
            db.commit()
        except Exception:
            db.rollback()
            discard_assets(storage, uploaded)
            raise

        db.refresh(video)
        cache.delete_cache(channel_stats_key(owner.id))
        logger.info(f"Video published: {video.id} by {owner.id}")
        return video

    def watch(self, db: Session, video_id: str, viewer: Optional[User]) -> VideoDetail:
        """
        Fetch the video page. Counts a view and records it in the viewer's
        watch history; unpublished videos are only visible to their owner.
        """
        video = ensure_visible(load_or_404(db, load_video, video_id, "video"), viewer)

        db.execute(
            update(Video)
            .where(Video.id == video.id)
            .values(views=Video.views + 1)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        db.refresh(video)
        cache.delete_cache(channel_stats_key(video.owner_id))

        if viewer is not None:
            try:
                user_service.record_view(db, viewer, video)
                db.commit()
            except IntegrityError:
                # Concurrent view of the same video by the same user already recorded it
                db.rollback()

        return projections.video_detail(db, video, viewer)

    def update_video(self, db: Session, storage, video_id: str, actor: User,
                     update_data: VideoUpdate, thumbnail: Optional[UploadFile]) -> Video:
        if update_data.title is None and update_data.description is None and thumbnail is None:
            raise InvalidInputError("Title, description or thumbnail is required")

        validate_id(video_id, "video")
        new_thumbnail: Optional[UploadedAsset] = None
        replaced = []

        def apply(db: Session, video: Video) -> Video:
            nonlocal new_thumbnail
            if update_data.title is not None:
                video.title = update_data.title.strip()
            if update_data.description is not None:
                video.description = update_data.description.strip()
            if thumbnail is not None:
                new_thumbnail = store_upload(storage, thumbnail)
                replaced.append(UploadedAsset(url=video.thumbnail_url, asset_id=video.thumbnail_asset_id))
                video.thumbnail_url = new_thumbnail.url
                video.thumbnail_asset_id = new_thumbnail.asset_id
            return video

        try:
            video = guarded_mutation(db, load_video, video_id, actor, apply, "video")
        except Exception:
            discard_assets(storage, [new_thumbnail])
            raise
        discard_assets(storage, replaced)
        return video

    def delete_video(self, db: Session, storage, video_id: str, actor: User) -> Video:
        """Delete a video together with everything that hangs off it"""

        def remove(db: Session, video: Video) -> Video:
            comment_ids = select(Comment.id).where(Comment.video_id == video.id)
            db.execute(
                delete(Like)
                .where(Like.subject_type == LikeSubject.COMMENT, Like.subject_id.in_(comment_ids))
                .execution_options(synchronize_session=False)
            )
            db.execute(
                delete(Like)
                .where(Like.subject_type == LikeSubject.VIDEO, Like.subject_id == video.id)
                .execution_options(synchronize_session=False)
            )
            db.execute(delete(Comment).where(Comment.video_id == video.id)
                       .execution_options(synchronize_session=False))
            db.execute(delete(PlaylistVideo).where(PlaylistVideo.video_id == video.id)
                       .execution_options(synchronize_session=False))
            db.execute(delete(WatchHistory).where(WatchHistory.video_id == video.id)
                       .execution_options(synchronize_session=False))
            db.delete(video)
            return video

        video = guarded_mutation(db, load_video, video_id, actor, remove, "video")
        discard_assets(storage, [
            UploadedAsset(url=video.video_url, asset_id=video.video_asset_id, resource_type="video"),
            UploadedAsset(url=video.thumbnail_url, asset_id=video.thumbnail_asset_id),
        ])
        cache.delete_cache(channel_stats_key(actor.id))
        return video

    def toggle_publish(self, db: Session, video_id: str, actor: User) -> Video:
        def flip(db: Session, video: Video) -> Video:
            video.is_published = not video.is_published
            return video

        video = guarded_mutation(db, load_video, video_id, actor, flip, "video")
        cache.delete_cache(channel_stats_key(actor.id))
        return video

# Create singleton instance
video_service = VideoService()
