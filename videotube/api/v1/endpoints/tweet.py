# ============================================================================
# FILE: videotube/api/v1/endpoints/tweet.py
# ============================================================================
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from videotube.db.session import get_db
from videotube.api.dependencies import get_optional_user, require_current_user
from videotube.db.models.user import User
from videotube.schemas.common import ApiResponse, respond
from videotube.schemas.tweet import TweetCard, TweetCreate, TweetResponse, TweetUpdate
from videotube.services.tweet_service import tweet_service

router = APIRouter()

@router.post("", response_model=ApiResponse[TweetResponse], status_code=status.HTTP_201_CREATED)
def create_tweet(
    tweet_data: TweetCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    tweet = tweet_service.create_tweet(db, current_user, tweet_data)
    return respond(TweetResponse.model_validate(tweet), "Tweet created successfully", status.HTTP_201_CREATED)

@router.get("/user/{user_id}", response_model=ApiResponse[List[TweetCard]])
def get_user_tweets(
    user_id: str,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    return respond(tweet_service.get_user_tweets(db, user_id, viewer), "Tweets fetched successfully")

@router.patch("/{tweet_id}", response_model=ApiResponse[TweetResponse])
def update_tweet(
    tweet_id: str,
    update_data: TweetUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    tweet = tweet_service.update_tweet(db, tweet_id, current_user, update_data)
    return respond(TweetResponse.model_validate(tweet), "Tweet updated successfully")

@router.delete("/{tweet_id}", response_model=ApiResponse[dict])
def delete_tweet(
    tweet_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    tweet = tweet_service.delete_tweet(db, tweet_id, current_user)
    return respond({"tweetId": tweet.id}, "Tweet deleted successfully")
