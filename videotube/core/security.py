# ============================================================================
# FILE: videotube/core/security.py
# ============================================================================
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt

from videotube.core.exceptions import InvalidInputError, UnauthorizedError

PASSWORD_MAX_BYTES = 72
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt"""
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise InvalidInputError(f"Password cannot be longer than {PASSWORD_MAX_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a bcrypt hash"""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed hash or password longer than bcrypt accepts
        return False


def create_token(claims: Dict[str, Any], secret: str, algorithm: str,
                 expires_delta: timedelta, token_type: str) -> str:
    """Sign a claim set with an expiry, a token type and a unique id"""
    now = datetime.now(timezone.utc)
    payload = dict(claims)
    payload.update({
        "type": token_type,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + expires_delta,
    })
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(token: str, secret: str, algorithm: str, token_type: str) -> Dict[str, Any]:
    """
    Verify signature and expiry of a token and return its claims.
    Raises UnauthorizedError for anything that does not check out.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token")

    if payload.get("type") != token_type or not payload.get("sub"):
        raise UnauthorizedError("Invalid token")
    return payload
