# ============================================================================
# FILE: videotube/api/dependencies.py
# ============================================================================
from fastapi import Depends, Query, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from videotube.db.session import get_db
from videotube.core.exceptions import UnauthorizedError
from videotube.db.models.user import User
from videotube.schemas.common import PageParams
from videotube.services.token_service import token_service
from typing import Optional

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/users/login", auto_error=False)

def extract_access_token(request: Request, bearer: Optional[str]) -> Optional[str]:
    """Cookie first, then the Authorization: Bearer header"""
    return request.cookies.get(ACCESS_TOKEN_COOKIE) or bearer

def resolve_user(db: Session, token: str) -> User:
    """Turn an access token into an active user, or raise 401"""
    claims = token_service.verify_access_token(token)
    user = db.get(User, claims["sub"])
    if user is None:
        raise UnauthorizedError("Invalid access token")
    if not user.is_active:
        raise UnauthorizedError("Account is deactivated")
    return user

def require_current_user(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    Require authenticated user (raises 401 if not authenticated)
    Use this dependency for protected endpoints
    """
    token = extract_access_token(request, bearer)
    if not token:
        raise UnauthorizedError("Unauthorized request")
    return resolve_user(db, token)

def get_optional_user(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """
    Viewer for public read endpoints: None when no token is sent,
    but a token that is sent must be valid
    """
    token = extract_access_token(request, bearer)
    if not token:
        return None
    return resolve_user(db, token)

def page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> PageParams:
    return PageParams(page=page, limit=limit)
