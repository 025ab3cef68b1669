# ============================================================================
# FILE: videotube/services/user_service.py
# ============================================================================
from typing import Optional, Tuple
from fastapi import UploadFile
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from videotube.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from videotube.core.security import get_password_hash, verify_password
from videotube.core.storage import UploadedAsset, discard_assets, store_upload
from videotube.db.base import utcnow
from videotube.db.models.user import User, WatchHistory
from videotube.db.models.video import Video
from videotube.schemas.user import AccountUpdate, PasswordChange, UserCreate, UserLogin
from videotube.services.guard import load_or_404, loader_for
from videotube.services.token_service import TokenPair, token_service
import logging

logger = logging.getLogger(__name__)

class UserService:
    """Service layer for user accounts and sessions"""

    def get_user(self, db: Session, user_id: str) -> User:
        """Active user by id; deactivated accounts read as missing"""
        user = load_or_404(db, loader_for(User), user_id, "user")
        if not user.is_active:
            raise NotFoundError("User not found")
        return user

    def get_user_by_username(self, db: Session, username: str) -> Optional[User]:
        """Get user by username"""
        return db.query(User).filter(User.username == username.strip().lower()).first()

    def get_user_by_email(self, db: Session, email: str) -> Optional[User]:
        """Get user by email"""
        return db.query(User).filter(User.email == email.strip().lower()).first()

    def find_by_login(self, db: Session, credentials: UserLogin) -> Optional[User]:
        """Resolve a user from either username or email"""
        if credentials.username:
            return self.get_user_by_username(db, credentials.username)
        return self.get_user_by_email(db, credentials.email)

    def ensure_unique(self, db: Session, username: str, email: str) -> None:
        existing = db.scalar(
            select(User).where(or_(User.username == username, User.email == email))
        )
        if existing:
            raise ConflictError("User with this username or email already exists")

    def register(self, db: Session, storage, user_data: UserCreate,
                 avatar: Optional[UploadFile], cover_image: Optional[UploadFile] = None) -> User:
        """
        Create a new user account.
        Uploaded media is removed again if anything after the upload fails.
        """
        username = user_data.username.lower()
        email = user_data.email.lower()
        self.ensure_unique(db, username, email)

        if avatar is None:
            raise InvalidInputError("Avatar file is required")

        uploaded = []
        try:
            avatar_asset = store_upload(storage, avatar)
            uploaded.append(avatar_asset)
            cover_asset: Optional[UploadedAsset] = None
            if cover_image is not None:
                cover_asset = store_upload(storage, cover_image)
                uploaded.append(cover_asset)

            user = User(
                username=username,
                email=email,
                full_name=user_data.full_name,
                password_hash=get_password_hash(user_data.password),
                avatar_url=avatar_asset.url,
                avatar_asset_id=avatar_asset.asset_id,
                cover_image_url=cover_asset.url if cover_asset else None,
                cover_image_asset_id=cover_asset.asset_id if cover_asset else None,
            )
            db.add(user)
            db.commit()
        except IntegrityError:
            db.rollback()
            discard_assets(storage, uploaded)
            raise ConflictError("User with this username or email already exists")
        except Exception:
            db.rollback()
            discard_assets(storage, uploaded)
            raise

        db.refresh(user)
        logger.info(f"User created: {user.username}")
        return user

    def authenticate_user(self, db: Session, credentials: UserLogin) -> User:
        """Authenticate user with username/email and password"""
        user = self.find_by_login(db, credentials)
        if not user:
            raise NotFoundError("User does not exist")
        if not verify_password(credentials.password, user.password_hash):
            raise UnauthorizedError("Invalid user credentials")
        return user

    def login(self, db: Session, credentials: UserLogin) -> Tuple[User, TokenPair]:
        user = self.authenticate_user(db, credentials)
        if not user.is_active:
            raise ForbiddenError("Account is deactivated")
        tokens = token_service.issue_token_pair(db, user)
        logger.info(f"User logged in: {user.username}")
        return user, tokens

    def logout(self, db: Session, user: User) -> None:
        token_service.revoke_refresh_token(db, user.id)
        logger.info(f"User logged out: {user.username}")

    def refresh_session(self, db: Session, presented: Optional[str]) -> TokenPair:
        if not presented:
            raise UnauthorizedError("Refresh token is required")
        return token_service.rotate(db, presented)

    def update_account(self, db: Session, user: User, update_data: AccountUpdate) -> User:
        if update_data.email is not None:
            email = update_data.email.lower()
            taken = db.scalar(select(User).where(User.email == email, User.id != user.id))
            if taken:
                raise ConflictError("Email is already in use")
            user.email = email
        if update_data.full_name is not None:
            user.full_name = update_data.full_name.strip()
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("Email is already in use")
        db.refresh(user)
        logger.info(f"Account updated: {user.username}")
        return user

    def change_password(self, db: Session, user: User, change: PasswordChange) -> None:
        if not verify_password(change.old_password, user.password_hash):
            raise UnauthorizedError("Old password is incorrect")
        user.password_hash = get_password_hash(change.new_password)
        user.refresh_token = None
        db.commit()
        logger.info(f"Password changed for {user.username}")

    def update_images(self, db: Session, storage, user: User,
                      avatar: Optional[UploadFile], cover_image: Optional[UploadFile]) -> User:
        """Replace avatar and/or cover image; old media is removed after the swap"""
        if avatar is None and cover_image is None:
            raise InvalidInputError("Avatar or cover image file is required")

        uploaded = []
        try:
            if avatar is not None:
                uploaded.append(store_upload(storage, avatar))
            if cover_image is not None:
                uploaded.append(store_upload(storage, cover_image))
        except Exception:
            discard_assets(storage, uploaded)
            raise

        replaced = []
        new_assets = iter(uploaded)
        if avatar is not None:
            asset = next(new_assets)
            if user.avatar_asset_id:
                replaced.append(UploadedAsset(url=user.avatar_url, asset_id=user.avatar_asset_id))
            user.avatar_url, user.avatar_asset_id = asset.url, asset.asset_id
        if cover_image is not None:
            asset = next(new_assets)
            if user.cover_image_asset_id:
                replaced.append(UploadedAsset(url=user.cover_image_url, asset_id=user.cover_image_asset_id))
            user.cover_image_url, user.cover_image_asset_id = asset.url, asset.asset_id

        try:
            db.commit()
        except Exception:
            db.rollback()
            discard_assets(storage, uploaded)
            raise
        db.refresh(user)
        discard_assets(storage, replaced)
        logger.info(f"Images updated for {user.username}")
        return user

    def deactivate(self, db: Session, user: User) -> User:
        user.is_active = False
        user.refresh_token = None
        db.commit()
        db.refresh(user)
        logger.info(f"Account deactivated: {user.username}")
        return user

    def reactivate(self, db: Session, credentials: UserLogin) -> User:
        user = self.authenticate_user(db, credentials)
        if user.is_active:
            raise InvalidInputError("Account is already active")
        user.is_active = True
        db.commit()
        db.refresh(user)
        logger.info(f"Account reactivated: {user.username}")
        return user

    def record_view(self, db: Session, user: User, video: Video) -> None:
        """Move a video to the top of the user's watch history"""
        entry = db.query(WatchHistory).filter(
            WatchHistory.user_id == user.id,
            WatchHistory.video_id == video.id,
        ).first()
        if entry:
            entry.watched_at = utcnow()
        else:
            db.add(WatchHistory(user_id=user.id, video_id=video.id))

# Create singleton instance
user_service = UserService()
