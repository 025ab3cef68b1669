# ============================================================================
# FILE: videotube/main.py
# ============================================================================
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from videotube.api.v1.router import api_router
from videotube.core.exceptions import register_exception_handlers
from videotube.core.logging import setup_logging
from videotube.config import settings
from videotube.db.init_db import init_db
from videotube.db.session import engine
import logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup, log shutdown"""
    logger.info("Starting VideoTube API")
    init_db(engine)
    yield
    logger.info("Shutting down VideoTube API")

# Create FastAPI app instance
app = FastAPI(
    title="VideoTube API",
    description="Video sharing backend with tweets, comments, likes, playlists and subscriptions",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API v1 router
app.include_router(api_router, prefix="/api/v1")

@app.get("/health")
async def health_check():
    return {"status": "healthy"}
