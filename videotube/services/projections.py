# ============================================================================
# FILE: videotube/services/projections.py
# ============================================================================
"""
Read-side query functions.

Each function joins a resource with its owner profile, like/subscription
counts and the viewer-relative flags (isLiked / isSubscribed) and returns
response DTOs. Counts and flags are fetched in one grouped query per page
rather than per row.
"""
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from videotube.db.models.comment import Comment
from videotube.db.models.like import Like, LikeSubject
from videotube.db.models.playlist import Playlist, PlaylistVideo
from videotube.db.models.subscription import Subscription
from videotube.db.models.tweet import Tweet
from videotube.db.models.user import User, WatchHistory
from videotube.db.models.video import Video
from videotube.schemas.comment import CommentCard
from videotube.schemas.common import OwnerSummary, Page, PageParams
from videotube.schemas.playlist import PlaylistDetail, PlaylistSummary, PlaylistVideoItem
from videotube.schemas.social import (
    ChannelStats,
    DashboardVideo,
    SubscribedChannel,
    SubscriberEntry,
)
from videotube.schemas.tweet import TweetCard
from videotube.schemas.user import ChannelProfile
from videotube.schemas.video import (
    ChannelOwner,
    HistoryEntry,
    LikedVideo,
    VideoCard,
    VideoDetail,
)


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

def owner_summary(user: User) -> OwnerSummary:
    return OwnerSummary(id=user.id, username=user.username, full_name=user.full_name, avatar=user.avatar_url)


def like_counts(db: Session, subject_type: LikeSubject, subject_ids: Iterable[str]) -> Dict[str, int]:
    ids = list(subject_ids)
    if not ids:
        return {}
    rows = db.execute(
        select(Like.subject_id, func.count(Like.id))
        .where(Like.subject_type == subject_type, Like.subject_id.in_(ids))
        .group_by(Like.subject_id)
    ).all()
    return {subject_id: count for subject_id, count in rows}


def liked_by_viewer(db: Session, subject_type: LikeSubject, subject_ids: Iterable[str],
                    viewer: Optional[User]) -> Set[str]:
    ids = list(subject_ids)
    if viewer is None or not ids:
        return set()
    rows = db.scalars(
        select(Like.subject_id).where(
            Like.subject_type == subject_type,
            Like.subject_id.in_(ids),
            Like.liked_by_id == viewer.id,
        )
    ).all()
    return set(rows)


def subscriber_counts(db: Session, channel_ids: Iterable[str]) -> Dict[str, int]:
    ids = list(channel_ids)
    if not ids:
        return {}
    rows = db.execute(
        select(Subscription.channel_id, func.count(Subscription.id))
        .where(Subscription.channel_id.in_(ids))
        .group_by(Subscription.channel_id)
    ).all()
    return {channel_id: count for channel_id, count in rows}


def subscribed_by_viewer(db: Session, channel_ids: Iterable[str], viewer: Optional[User]) -> Set[str]:
    ids = list(channel_ids)
    if viewer is None or not ids:
        return set()
    rows = db.scalars(
        select(Subscription.channel_id).where(
            Subscription.channel_id.in_(ids),
            Subscription.subscriber_id == viewer.id,
        )
    ).all()
    return set(rows)


def _video_card(video: Video) -> VideoCard:
    return VideoCard(
        id=video.id,
        title=video.title,
        description=video.description,
        video_url=video.video_url,
        thumbnail_url=video.thumbnail_url,
        duration=video.duration,
        views=video.views,
        is_published=video.is_published,
        created_at=video.created_at,
        owner=owner_summary(video.owner),
    )


def _visible_to(viewer: Optional[User]):
    """Published videos, plus the viewer's own unpublished ones"""
    if viewer is None:
        return Video.is_published.is_(True)
    return Video.is_published.is_(True) | (Video.owner_id == viewer.id)


# ---------------------------------------------------------------------------
# Comments / tweets
# ---------------------------------------------------------------------------

def comment_cards(db: Session, video_id: str, viewer: Optional[User], params: PageParams) -> Page[CommentCard]:
    """Comments of a video, newest first, one page at a time"""
    total = db.scalar(select(func.count(Comment.id)).where(Comment.video_id == video_id))
    comments = db.scalars(
        select(Comment)
        .options(joinedload(Comment.owner))
        .where(Comment.video_id == video_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .offset(params.offset)
        .limit(params.limit)
    ).all()

    ids = [c.id for c in comments]
    counts = like_counts(db, LikeSubject.COMMENT, ids)
    liked = liked_by_viewer(db, LikeSubject.COMMENT, ids, viewer)
    docs = [
        CommentCard(
            id=c.id,
            content=c.content,
            created_at=c.created_at,
            owner=owner_summary(c.owner),
            likes_count=counts.get(c.id, 0),
            is_liked=c.id in liked,
        )
        for c in comments
    ]
    return Page[CommentCard].build(docs, total or 0, params.page, params.limit)


def tweet_cards(db: Session, owner_id: str, viewer: Optional[User]) -> List[TweetCard]:
    tweets = db.scalars(
        select(Tweet)
        .options(joinedload(Tweet.owner))
        .where(Tweet.owner_id == owner_id)
        .order_by(Tweet.created_at.desc(), Tweet.id.desc())
    ).all()

    ids = [t.id for t in tweets]
    counts = like_counts(db, LikeSubject.TWEET, ids)
    liked = liked_by_viewer(db, LikeSubject.TWEET, ids, viewer)
    return [
        TweetCard(
            id=t.id,
            content=t.content,
            created_at=t.created_at,
            owner=owner_summary(t.owner),
            likes_count=counts.get(t.id, 0),
            is_liked=t.id in liked,
        )
        for t in tweets
    ]


# ---------------------------------------------------------------------------
# Videos
# ---------------------------------------------------------------------------

def video_detail(db: Session, video: Video, viewer: Optional[User]) -> VideoDetail:
    owner = video.owner
    likes = like_counts(db, LikeSubject.VIDEO, [video.id]).get(video.id, 0)
    is_liked = video.id in liked_by_viewer(db, LikeSubject.VIDEO, [video.id], viewer)
    subscribers = subscriber_counts(db, [owner.id]).get(owner.id, 0)
    is_subscribed = owner.id in subscribed_by_viewer(db, [owner.id], viewer)

    return VideoDetail(
        id=video.id,
        title=video.title,
        description=video.description,
        video_url=video.video_url,
        thumbnail_url=video.thumbnail_url,
        duration=video.duration,
        views=video.views,
        is_published=video.is_published,
        created_at=video.created_at,
        likes_count=likes,
        is_liked=is_liked,
        owner=ChannelOwner(
            id=owner.id,
            username=owner.username,
            full_name=owner.full_name,
            avatar=owner.avatar_url,
            subscribers_count=subscribers,
            is_subscribed=is_subscribed,
        ),
    )


def video_cards(db: Session, params: PageParams, viewer: Optional[User] = None,
                owner_id: Optional[str] = None, sort_column: str = "created_at",
                descending: bool = True) -> Page[VideoCard]:
    """Paged listing of visible videos, optionally restricted to one channel"""
    conditions = [_visible_to(viewer)]
    if owner_id:
        conditions.append(Video.owner_id == owner_id)

    total = db.scalar(select(func.count(Video.id)).where(*conditions))
    column = getattr(Video, sort_column)
    order = column.desc() if descending else column.asc()
    videos = db.scalars(
        select(Video)
        .options(joinedload(Video.owner))
        .where(*conditions)
        .order_by(order, Video.id.desc())
        .offset(params.offset)
        .limit(params.limit)
    ).all()
    return Page[VideoCard].build([_video_card(v) for v in videos], total or 0, params.page, params.limit)


def liked_videos(db: Session, user: User) -> List[LikedVideo]:
    """Videos the user liked, most recently liked first"""
    rows = db.execute(
        select(Like.created_at, Video)
        .join(Video, Video.id == Like.subject_id)
        .options(joinedload(Video.owner))
        .where(
            Like.subject_type == LikeSubject.VIDEO,
            Like.liked_by_id == user.id,
            _visible_to(user),
        )
        .order_by(Like.created_at.desc())
    ).all()
    return [LikedVideo(liked_at=liked_at, video=_video_card(video)) for liked_at, video in rows]


def watch_history(db: Session, user: User) -> List[HistoryEntry]:
    rows = db.scalars(
        select(WatchHistory)
        .join(Video, Video.id == WatchHistory.video_id)
        .options(joinedload(WatchHistory.video).joinedload(Video.owner))
        .where(WatchHistory.user_id == user.id, _visible_to(user))
        .order_by(WatchHistory.watched_at.desc())
    ).all()
    return [HistoryEntry(watched_at=entry.watched_at, video=_video_card(entry.video)) for entry in rows]


# ---------------------------------------------------------------------------
# Playlists
# ---------------------------------------------------------------------------

def playlist_summaries(db: Session, owner_id: str) -> List[PlaylistSummary]:
    rows = db.execute(
        select(
            Playlist,
            func.count(Video.id),
            func.coalesce(func.sum(Video.views), 0),
        )
        .outerjoin(PlaylistVideo, PlaylistVideo.playlist_id == Playlist.id)
        .outerjoin(Video, Video.id == PlaylistVideo.video_id)
        .where(Playlist.owner_id == owner_id)
        .group_by(Playlist.id)
        .order_by(Playlist.created_at.desc())
    ).all()
    return [
        PlaylistSummary(
            id=playlist.id,
            name=playlist.name,
            description=playlist.description,
            total_videos=total_videos,
            total_views=int(total_views),
            created_at=playlist.created_at,
            updated_at=playlist.updated_at,
        )
        for playlist, total_videos, total_views in rows
    ]


def playlist_detail(db: Session, playlist: Playlist, viewer: Optional[User]) -> PlaylistDetail:
    """Playlist with its owner and the videos the viewer may see, in insertion order"""
    videos = db.scalars(
        select(Video)
        .join(PlaylistVideo, PlaylistVideo.video_id == Video.id)
        .where(PlaylistVideo.playlist_id == playlist.id, _visible_to(viewer))
        .order_by(PlaylistVideo.added_at)
    ).all()
    items = [
        PlaylistVideoItem(
            id=v.id,
            title=v.title,
            description=v.description,
            video_url=v.video_url,
            thumbnail_url=v.thumbnail_url,
            duration=v.duration,
            views=v.views,
            created_at=v.created_at,
        )
        for v in videos
    ]
    return PlaylistDetail(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        total_videos=len(items),
        total_views=sum(item.views for item in items),
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
        owner=owner_summary(playlist.owner),
        videos=items,
    )


# ---------------------------------------------------------------------------
# Channels / subscriptions / dashboard
# ---------------------------------------------------------------------------

def channel_profile(db: Session, channel: User, viewer: Optional[User]) -> ChannelProfile:
    subscribers = subscriber_counts(db, [channel.id]).get(channel.id, 0)
    subscribed_to = db.scalar(
        select(func.count(Subscription.id)).where(Subscription.subscriber_id == channel.id)
    )
    return ChannelProfile(
        id=channel.id,
        username=channel.username,
        full_name=channel.full_name,
        email=channel.email,
        avatar=channel.avatar_url,
        cover_image=channel.cover_image_url,
        subscribers_count=subscribers,
        subscribed_to_count=subscribed_to or 0,
        is_subscribed=channel.id in subscribed_by_viewer(db, [channel.id], viewer),
        created_at=channel.created_at,
    )


def channel_subscribers(db: Session, channel_id: str) -> List[SubscriberEntry]:
    """Subscribers of a channel, flagged when the channel subscribes back"""
    rows = db.scalars(
        select(Subscription)
        .options(joinedload(Subscription.subscriber))
        .where(Subscription.channel_id == channel_id)
        .order_by(Subscription.created_at.desc())
    ).all()
    subscriber_ids = [s.subscriber_id for s in rows]
    followed_back = set()
    if subscriber_ids:
        followed_back = set(db.scalars(
            select(Subscription.channel_id).where(
                Subscription.subscriber_id == channel_id,
                Subscription.channel_id.in_(subscriber_ids),
            )
        ).all())
    return [
        SubscriberEntry(
            subscriber=owner_summary(s.subscriber),
            subscribed_at=s.created_at,
            subscribed_back=s.subscriber_id in followed_back,
        )
        for s in rows
    ]


def subscribed_channels(db: Session, subscriber_id: str) -> List[SubscribedChannel]:
    """Channels a user follows, with each channel's latest published video"""
    rows = db.scalars(
        select(Subscription)
        .options(joinedload(Subscription.channel))
        .where(Subscription.subscriber_id == subscriber_id)
        .order_by(Subscription.created_at.desc())
    ).all()
    entries = []
    for s in rows:
        latest = db.scalar(
            select(Video.id)
            .where(Video.owner_id == s.channel_id, Video.is_published.is_(True))
            .order_by(Video.created_at.desc())
            .limit(1)
        )
        entries.append(SubscribedChannel(
            channel=owner_summary(s.channel),
            subscribed_at=s.created_at,
            latest_video_id=latest,
        ))
    return entries


def channel_stats(db: Session, channel: User) -> ChannelStats:
    total_videos, total_views = db.execute(
        select(func.count(Video.id), func.coalesce(func.sum(Video.views), 0))
        .where(Video.owner_id == channel.id)
    ).one()
    total_subscribers = subscriber_counts(db, [channel.id]).get(channel.id, 0)
    total_likes = db.scalar(
        select(func.count(Like.id))
        .join(Video, Video.id == Like.subject_id)
        .where(Like.subject_type == LikeSubject.VIDEO, Video.owner_id == channel.id)
    )
    return ChannelStats(
        total_videos=total_videos,
        total_views=int(total_views),
        total_subscribers=total_subscribers,
        total_likes=total_likes or 0,
    )


def channel_videos(db: Session, channel: User) -> List[DashboardVideo]:
    """All of the channel's own videos, published or not, newest first"""
    videos = db.scalars(
        select(Video).where(Video.owner_id == channel.id).order_by(Video.created_at.desc(), Video.id.desc())
    ).all()
    counts = like_counts(db, LikeSubject.VIDEO, [v.id for v in videos])
    return [
        DashboardVideo(
            id=v.id,
            title=v.title,
            description=v.description,
            thumbnail_url=v.thumbnail_url,
            video_url=v.video_url,
            is_published=v.is_published,
            views=v.views,
            likes_count=counts.get(v.id, 0),
            created_at=v.created_at,
        )
        for v in videos
    ]
