# ============================================================================
# FILE: videotube/schemas/user.py
# ============================================================================
from pydantic import AliasChoices, EmailStr, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime
from videotube.core.security import PASSWORD_MAX_BYTES
from videotube.schemas.common import CamelModel

def check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"password cannot be longer than {PASSWORD_MAX_BYTES} bytes")
    return value

class UserCreate(CamelModel):
    """Schema for user registration (multipart text fields)"""
    full_name: str = Field(min_length=1)
    username: str = Field(min_length=3, max_length=32, pattern=r"^[A-Za-z0-9_.]+$")
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)

    @field_validator("full_name", "username")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)

class UserLogin(CamelModel):
    """Schema for user login; either username or email identifies the user"""
    username: Optional[str] = None
    email: Optional[str] = None
    password: str

    @model_validator(mode="after")
    def require_identifier(self):
        if not (self.username or self.email):
            raise ValueError("username or email is required")
        return self

class UserReactivate(UserLogin):
    """Credentials used to reactivate a deactivated account"""

class AccountUpdate(CamelModel):
    """Schema for updating account details"""
    full_name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None

    @model_validator(mode="after")
    def require_change(self):
        if self.full_name is None and self.email is None:
            raise ValueError("fullName or email is required")
        return self

class PasswordChange(CamelModel):
    old_password: str
    new_password: str = Field(min_length=6, max_length=72)

    @field_validator("new_password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)

class RefreshTokenRequest(CamelModel):
    refresh_token: Optional[str] = None

class UserResponse(CamelModel):
    """Public user profile: never carries the password hash or refresh token"""
    id: str
    username: str
    email: str
    full_name: str
    avatar: str = Field(validation_alias=AliasChoices("avatar_url", "avatar"), serialization_alias="avatar")
    cover_image: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("cover_image_url", "coverImage"),
        serialization_alias="coverImage",
    )
    is_active: bool
    is_admin: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

class AuthResponse(CamelModel):
    """Schema for login/refresh response; the refresh token travels only as a cookie"""
    user: Optional[UserResponse] = None
    access_token: str
    token_type: str = "bearer"

class ChannelProfile(CamelModel):
    """Channel page: profile plus subscription context for the viewer"""
    id: str
    username: str
    full_name: str
    email: str
    avatar: str
    cover_image: Optional[str] = None
    subscribers_count: int
    subscribed_to_count: int
    is_subscribed: bool
    created_at: datetime
