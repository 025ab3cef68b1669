# ============================================================================
# FILE: videotube/api/v1/endpoints/user.py
# ============================================================================
from fastapi import APIRouter, Body, Depends, File, Form, Request, Response, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
from videotube.db.session import get_db
from videotube.api.dependencies import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    get_optional_user,
    require_current_user,
)
from videotube.config import settings
from videotube.core.exceptions import InvalidInputError, NotFoundError
from videotube.core.storage import get_asset_store
from videotube.db.models.user import User
from videotube.schemas.common import ApiResponse, respond
from videotube.schemas.user import (
    AccountUpdate,
    AuthResponse,
    ChannelProfile,
    PasswordChange,
    RefreshTokenRequest,
    UserCreate,
    UserLogin,
    UserReactivate,
    UserResponse,
)
from videotube.schemas.video import HistoryEntry
from videotube.services import projections
from videotube.services.token_service import TokenPair
from videotube.services.user_service import user_service
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

def _set_session_cookies(response: Response, tokens: TokenPair) -> None:
    options = {"httponly": True, "secure": settings.is_production, "samesite": "lax"}
    response.set_cookie(ACCESS_TOKEN_COOKIE, tokens.access_token,
                        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60, **options)
    response.set_cookie(REFRESH_TOKEN_COOKIE, tokens.refresh_token,
                        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 3600, **options)

def _clear_session_cookies(response: Response) -> None:
    options = {"httponly": True, "secure": settings.is_production, "samesite": "lax"}
    response.delete_cookie(ACCESS_TOKEN_COOKIE, **options)
    response.delete_cookie(REFRESH_TOKEN_COOKIE, **options)

def _validation_details(exc: ValidationError) -> list:
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]

@router.post("/register", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
def register(
    full_name: Optional[str] = Form(None, alias="fullName"),
    email: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    db: Session = Depends(get_db),
    storage=Depends(get_asset_store),
):
    """
    Register a new user account (multipart form with avatar, optional coverImage)
    """
    if any(not (field or "").strip() for field in (full_name, email, username, password)):
        raise InvalidInputError("All fields are required: fullName, email, username, password")
    try:
        user_data = UserCreate(full_name=full_name, email=email, username=username, password=password)
    except ValidationError as e:
        raise InvalidInputError("Invalid registration data", errors=_validation_details(e))

    user = user_service.register(db, storage, user_data, avatar, cover_image)
    return respond(UserResponse.model_validate(user), "User registered successfully", status.HTTP_201_CREATED)

@router.post("/login", response_model=ApiResponse[AuthResponse])
def login(
    credentials: UserLogin,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Login with username or email and password.
    Sets accessToken/refreshToken cookies; only the access token is echoed in the body
    """
    user, tokens = user_service.login(db, credentials)
    _set_session_cookies(response, tokens)
    data = AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=tokens.access_token,
    )
    return respond(data, "User logged in successfully")

@router.post("/logout", response_model=ApiResponse[dict])
def logout(
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    user_service.logout(db, current_user)
    _clear_session_cookies(response)
    return respond({}, "User logged out")

@router.post("/refresh-token", response_model=ApiResponse[AuthResponse])
def refresh_token(
    request: Request,
    response: Response,
    payload: Optional[RefreshTokenRequest] = Body(None),
    db: Session = Depends(get_db)
):
    """
    Exchange a refresh token (cookie or body) for a new token pair
    """
    presented = request.cookies.get(REFRESH_TOKEN_COOKIE) or (payload.refresh_token if payload else None)
    tokens = user_service.refresh_session(db, presented)
    _set_session_cookies(response, tokens)
    data = AuthResponse(access_token=tokens.access_token)
    return respond(data, "Access token refreshed")

@router.get("/current-user", response_model=ApiResponse[UserResponse])
def get_current_user_info(
    current_user: User = Depends(require_current_user)
):
    """
    Get current user information
    Requires authentication
    """
    return respond(UserResponse.model_validate(current_user), "Current user fetched successfully")

@router.put("/update", response_model=ApiResponse[UserResponse])
def update_account(
    update_data: AccountUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    user = user_service.update_account(db, current_user, update_data)
    return respond(UserResponse.model_validate(user), "Account details updated successfully")

@router.put("/update-password", response_model=ApiResponse[dict])
def update_password(
    change: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    user_service.change_password(db, current_user, change)
    return respond({}, "Password changed successfully")

@router.put("/avatar-cover", response_model=ApiResponse[UserResponse])
def update_avatar_and_cover(
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    db: Session = Depends(get_db),
    storage=Depends(get_asset_store),
    current_user: User = Depends(require_current_user)
):
    user = user_service.update_images(db, storage, current_user, avatar, cover_image)
    return respond(UserResponse.model_validate(user), "Images updated successfully")

@router.put("/deactivate", response_model=ApiResponse[UserResponse])
def deactivate_account(
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    user = user_service.deactivate(db, current_user)
    _clear_session_cookies(response)
    return respond(UserResponse.model_validate(user), "Account deactivated")

@router.put("/reactivate", response_model=ApiResponse[UserResponse])
def reactivate_account(
    credentials: UserReactivate,
    db: Session = Depends(get_db)
):
    user = user_service.reactivate(db, credentials)
    return respond(UserResponse.model_validate(user), "Account reactivated")

@router.get("/history", response_model=ApiResponse[List[HistoryEntry]])
def get_watch_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """
    Get user's watch history, most recent first
    Requires authentication
    """
    return respond(projections.watch_history(db, current_user), "Watch history fetched successfully")

@router.get("/channel/{username}", response_model=ApiResponse[ChannelProfile])
def get_channel_profile(
    username: str,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    channel = user_service.get_user_by_username(db, username)
    if channel is None or not channel.is_active:
        raise NotFoundError("Channel does not exist")
    return respond(projections.channel_profile(db, channel, viewer), "Channel fetched successfully")

@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
def get_user(
    user_id: str,
    db: Session = Depends(get_db)
):
    """
    Public profile of a user by id
    """
    return respond(UserResponse.model_validate(user_service.get_user(db, user_id)), "User fetched successfully")
