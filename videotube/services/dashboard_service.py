# ============================================================================
# FILE: videotube/services/dashboard_service.py
# ============================================================================
from typing import List
from sqlalchemy.orm import Session
from videotube.config import settings
from videotube.core.cache import cache, channel_stats_key
from videotube.db.models.user import User
from videotube.schemas.social import ChannelStats, DashboardVideo
from videotube.services import projections
import logging

logger = logging.getLogger(__name__)

class DashboardService:
    """Creator dashboard: channel totals and own videos"""

    def get_channel_stats(self, db: Session, channel: User) -> ChannelStats:
        """
        Totals for the channel. Results are cached in Redis for a short
        time and dropped whenever videos or subscriptions change.
        """
        cache_key = channel_stats_key(channel.id)
        cached = cache.get_cache(cache_key)
        if cached:
            logger.info(f"Cache hit for channel stats: {channel.id}")
            return ChannelStats.model_validate(cached)

        stats = projections.channel_stats(db, channel)
        cache.set_cache(cache_key, stats.model_dump(), settings.CACHE_EXPIRE_SECONDS)
        return stats

    def get_channel_videos(self, db: Session, channel: User) -> List[DashboardVideo]:
        return projections.channel_videos(db, channel)

# Create singleton instance
dashboard_service = DashboardService()
