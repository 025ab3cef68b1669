# ============================================================================
# FILE: videotube/services/subscription_service.py
# ============================================================================
from typing import List
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from videotube.core.cache import cache, channel_stats_key
from videotube.core.exceptions import InvalidInputError
from videotube.db.models.subscription import Subscription
from videotube.db.models.user import User
from videotube.schemas.social import SubscribedChannel, SubscriberEntry, SubscriptionToggleResult
from videotube.services import projections
from videotube.services.guard import load_or_404, loader_for
import logging

logger = logging.getLogger(__name__)

load_user = loader_for(User)

class SubscriptionService:
    """Channel subscriptions"""

    def toggle_subscription(self, db: Session, channel_id: str, subscriber: User) -> SubscriptionToggleResult:
        channel = load_or_404(db, load_user, channel_id, "channel")
        if channel.id == subscriber.id:
            raise InvalidInputError("You cannot subscribe to your own channel")

        removed = db.execute(
            delete(Subscription)
            .where(Subscription.channel_id == channel.id, Subscription.subscriber_id == subscriber.id)
            .execution_options(synchronize_session=False)
        ).rowcount
        if removed:
            db.commit()
            is_subscribed = False
        else:
            try:
                db.add(Subscription(channel_id=channel.id, subscriber_id=subscriber.id))
                db.commit()
            except IntegrityError:
                db.rollback()
            is_subscribed = True

        cache.delete_cache(channel_stats_key(channel.id))
        logger.info(f"User {subscriber.id} {'subscribed to' if is_subscribed else 'unsubscribed from'} {channel.id}")
        return SubscriptionToggleResult(channel_id=channel.id, is_subscribed=is_subscribed)

    def get_channel_subscribers(self, db: Session, channel_id: str) -> List[SubscriberEntry]:
        channel = load_or_404(db, load_user, channel_id, "channel")
        return projections.channel_subscribers(db, channel.id)

    def get_subscribed_channels(self, db: Session, subscriber_id: str) -> List[SubscribedChannel]:
        subscriber = load_or_404(db, load_user, subscriber_id, "subscriber")
        return projections.subscribed_channels(db, subscriber.id)

# Create singleton instance
subscription_service = SubscriptionService()
