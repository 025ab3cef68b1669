# ============================================================================
# FILE: videotube/services/token_service.py
# ============================================================================
"""
Access/refresh token lifecycle.

A user has exactly one live refresh token, stored on the user row. Issuing a
new one overwrites the old one, and rotation only succeeds while the row still
holds the token being exchanged, so a rotated-out token can never be replayed.
"""
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from videotube.config import Settings, settings
from videotube.core.exceptions import UnauthorizedError
from videotube.core.security import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    create_token,
    decode_token,
)
from videotube.db.models.user import User
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenService:
    """Issues, verifies, rotates and revokes session tokens"""

    def __init__(self, config: Settings):
        self.access_secret = config.ACCESS_TOKEN_SECRET
        self.refresh_secret = config.REFRESH_TOKEN_SECRET
        self.algorithm = config.ALGORITHM
        self.access_ttl = timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
        self.refresh_ttl = timedelta(days=config.REFRESH_TOKEN_EXPIRE_DAYS)

    def issue_access_token(self, user: User) -> str:
        claims = {
            "sub": user.id,
            "username": user.username,
            "email": user.email,
            "fullName": user.full_name,
        }
        return create_token(claims, self.access_secret, self.algorithm, self.access_ttl, ACCESS_TOKEN_TYPE)

    def issue_refresh_token(self, db: Session, user: User, expected: Optional[str] = None) -> str:
        """
        Sign a refresh token and persist it on the user in one conditional
        UPDATE. With `expected`, the row is only touched if it still stores
        that token; otherwise the token is discarded and the call fails.
        """
        token = create_token({"sub": user.id}, self.refresh_secret, self.algorithm,
                             self.refresh_ttl, REFRESH_TOKEN_TYPE)

        stmt = update(User).where(User.id == user.id)
        if expected is not None:
            stmt = stmt.where(User.refresh_token == expected)
        stmt = stmt.values(refresh_token=token).execution_options(synchronize_session="evaluate")

        result = db.execute(stmt)
        if result.rowcount != 1:
            db.rollback()
            logger.warning(f"Refresh token for user {user.id} was not stored (stale or concurrent rotation)")
            raise UnauthorizedError("Refresh token is expired or used")
        db.commit()
        # keep the in-session instance in step with the row
        set_committed_value(user, "refresh_token", token)
        return token

    def issue_token_pair(self, db: Session, user: User, expected: Optional[str] = None) -> TokenPair:
        refresh_token = self.issue_refresh_token(db, user, expected=expected)
        return TokenPair(access_token=self.issue_access_token(user), refresh_token=refresh_token)

    def verify_access_token(self, token: str) -> Dict[str, Any]:
        return decode_token(token, self.access_secret, self.algorithm, ACCESS_TOKEN_TYPE)

    def decode_refresh_token(self, token: str) -> Dict[str, Any]:
        """Signature/expiry check only, to find out whose token it is"""
        return decode_token(token, self.refresh_secret, self.algorithm, REFRESH_TOKEN_TYPE)

    def verify_refresh_token(self, token: str, stored_token: Optional[str]) -> Dict[str, Any]:
        claims = self.decode_refresh_token(token)
        if not stored_token or token != stored_token:
            logger.warning(f"Rejected stale refresh token for user {claims['sub']}")
            raise UnauthorizedError("Refresh token is expired or used")
        return claims

    def rotate(self, db: Session, presented: str) -> TokenPair:
        """Exchange a valid refresh token for a fresh token pair"""
        claims = self.decode_refresh_token(presented)
        user = db.get(User, claims["sub"], populate_existing=True)
        if not user or not user.is_active:
            raise UnauthorizedError("Invalid refresh token")
        self.verify_refresh_token(presented, user.refresh_token)
        return self.issue_token_pair(db, user, expected=presented)

    def revoke_refresh_token(self, db: Session, user_id: str) -> None:
        db.execute(
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=None)
            .execution_options(synchronize_session="evaluate")
        )
        db.commit()
        user = db.get(User, user_id)
        if user is not None:
            set_committed_value(user, "refresh_token", None)
        logger.info(f"Refresh token revoked for user {user_id}")


# Create singleton instance
token_service = TokenService(settings)
