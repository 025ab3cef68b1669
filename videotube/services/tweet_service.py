# ============================================================================
# FILE: videotube/services/tweet_service.py
# ============================================================================
from typing import List, Optional
from sqlalchemy import delete
from sqlalchemy.orm import Session
from videotube.db.models.like import Like, LikeSubject
from videotube.db.models.tweet import Tweet
from videotube.db.models.user import User
from videotube.schemas.tweet import TweetCard, TweetCreate, TweetUpdate
from videotube.services import projections
from videotube.services.guard import guarded_mutation, load_or_404, loader_for
import logging

logger = logging.getLogger(__name__)

load_tweet = loader_for(Tweet)
load_user = loader_for(User)

class TweetService:
    """Service layer for tweet operations"""

    def create_tweet(self, db: Session, owner: User, tweet_data: TweetCreate) -> Tweet:
        try:
            tweet = Tweet(owner_id=owner.id, content=tweet_data.content.strip())
            db.add(tweet)
            db.commit()
            db.refresh(tweet)
            logger.info(f"Tweet created: {tweet.id} by {owner.id}")
            return tweet
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating tweet: {e}")
            raise

    def get_user_tweets(self, db: Session, user_id: str, viewer: Optional[User]) -> List[TweetCard]:
        owner = load_or_404(db, load_user, user_id, "user")
        return projections.tweet_cards(db, owner.id, viewer)

    def update_tweet(self, db: Session, tweet_id: str, actor: User, update_data: TweetUpdate) -> Tweet:
        def apply(db: Session, tweet: Tweet) -> Tweet:
            tweet.content = update_data.content.strip()
            return tweet

        return guarded_mutation(db, load_tweet, tweet_id, actor, apply, "tweet")

    def delete_tweet(self, db: Session, tweet_id: str, actor: User) -> Tweet:
        def remove(db: Session, tweet: Tweet) -> Tweet:
            db.execute(
                delete(Like)
                .where(Like.subject_type == LikeSubject.TWEET, Like.subject_id == tweet.id)
                .execution_options(synchronize_session=False)
            )
            db.delete(tweet)
            return tweet

        return guarded_mutation(db, load_tweet, tweet_id, actor, remove, "tweet")

# Create singleton instance
tweet_service = TweetService()
