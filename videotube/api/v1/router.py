# ============================================================================
# FILE: videotube/api/v1/router.py
# ============================================================================
from fastapi import APIRouter
from videotube.api.v1.endpoints import comment, dashboard, like, playlist, subscription, tweet, user, video
from videotube.schemas.common import ApiResponse, respond

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(user.router, prefix="/users", tags=["users"])
api_router.include_router(video.router, prefix="/videos", tags=["videos"])
api_router.include_router(tweet.router, prefix="/tweets", tags=["tweets"])
api_router.include_router(comment.router, prefix="/comments", tags=["comments"])
api_router.include_router(like.router, prefix="/likes", tags=["likes"])
api_router.include_router(playlist.router, prefix="/playlists", tags=["playlists"])
api_router.include_router(subscription.router, prefix="/subscriptions", tags=["subscriptions"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])

@api_router.get("/healthcheck", response_model=ApiResponse[str], tags=["healthcheck"])
def healthcheck():
    return respond("OK", "Health check passed")
