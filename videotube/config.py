# ============================================================================
# FILE: videotube/config.py
# ============================================================================
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """Application configuration using Pydantic BaseSettings"""

    # App settings
    APP_NAME: str = "VideoTube"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./videotube.db"  # Change to PostgreSQL in production
    DATABASE_TIMEOUT_SECONDS: int = 15

    # Redis cache (empty URL disables caching)
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_EXPIRE_SECONDS: int = 60

    # Security
    ACCESS_TOKEN_SECRET: str = "access-secret-change-this-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_SECRET: str = "refresh-secret-change-this-in-production"
    REFRESH_TOKEN_EXPIRE_DAYS: int = 10
    ALGORITHM: str = "HS256"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Cloudinary media storage
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    CLOUDINARY_FOLDER: str = "videotube"
    ASSET_TIMEOUT_SECONDS: int = 120

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        frozen = True

settings = Settings()
