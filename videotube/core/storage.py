# ============================================================================
# FILE: videotube/core/storage.py
# ============================================================================
"""Cloudinary-backed media storage"""

import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import cloudinary
import cloudinary.uploader
from fastapi import UploadFile

from videotube.config import Settings, settings
from videotube.core.exceptions import InternalError
import logging

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp"}
VIDEO_EXTENSIONS = {".mp4", ".mov", ".avi", ".webm", ".mkv"}


@dataclass(frozen=True)
class UploadedAsset:
    """What the asset store hands back after an upload"""
    url: str
    asset_id: str
    resource_type: str = "image"
    duration: float = 0.0


class CloudinaryStorage:
    """Upload/delete media on Cloudinary"""

    def __init__(self, config: Settings):
        self.folder = config.CLOUDINARY_FOLDER
        self.timeout = config.ASSET_TIMEOUT_SECONDS
        self.configured = bool(
            config.CLOUDINARY_CLOUD_NAME and config.CLOUDINARY_API_KEY and config.CLOUDINARY_API_SECRET
        )
        if self.configured:
            cloudinary.config(
                cloud_name=config.CLOUDINARY_CLOUD_NAME,
                api_key=config.CLOUDINARY_API_KEY,
                api_secret=config.CLOUDINARY_API_SECRET,
                secure=True,  # Always use HTTPS
            )
        else:
            logger.warning("Cloudinary credentials missing; uploads will fail")

    @staticmethod
    def _resource_type(path: Path) -> str:
        ext = path.suffix.lower()
        if ext in IMAGE_EXTENSIONS:
            return "image"
        if ext in VIDEO_EXTENSIONS:
            return "video"
        return "auto"

    def upload(self, local_path: Path) -> UploadedAsset:
        """
        Upload a local file and return its URL and asset id.
        The local file is removed whatever the outcome.
        """
        local_path = Path(local_path)
        try:
            if not self.configured:
                raise InternalError("Media storage is not configured")
            result = cloudinary.uploader.upload(
                str(local_path),
                resource_type=self._resource_type(local_path),
                folder=self.folder,
                timeout=self.timeout,
            )
        except InternalError:
            raise
        except Exception as e:
            logger.error(f"Error uploading {local_path.name} to Cloudinary: {e}")
            raise InternalError("Failed to upload media file")
        finally:
            local_path.unlink(missing_ok=True)

        url = result.get("secure_url") or result.get("url")
        logger.info(f"Uploaded media to Cloudinary: {url}")
        return UploadedAsset(
            url=url,
            asset_id=result["public_id"],
            resource_type=result.get("resource_type", "image"),
            duration=float(result.get("duration") or 0.0),
        )

    def delete(self, asset_id: str, resource_type: str = "image") -> None:
        if not self.configured:
            raise InternalError("Media storage is not configured")
        try:
            cloudinary.uploader.destroy(asset_id, resource_type=resource_type, timeout=self.timeout)
            logger.info(f"Deleted media from Cloudinary: {asset_id}")
        except Exception as e:
            logger.error(f"Error deleting {asset_id} from Cloudinary: {e}")
            raise InternalError("Failed to delete media file")


def discard_assets(storage, assets: List[Optional[UploadedAsset]]) -> None:
    """Best-effort delete of already-uploaded assets; failures are only logged"""
    for asset in assets:
        if asset is None:
            continue
        try:
            storage.delete(asset.asset_id, asset.resource_type)
        except Exception as e:
            logger.warning(f"Could not clean up orphaned asset {asset.asset_id}: {e}")


def spool_upload(upload: UploadFile) -> Path:
    """Copy an incoming multipart file to a temporary local path"""
    suffix = Path(upload.filename or "").suffix
    fd, temp_name = tempfile.mkstemp(prefix="videotube-", suffix=suffix)
    try:
        with os.fdopen(fd, "wb") as out:
            shutil.copyfileobj(upload.file, out)
    except Exception:
        Path(temp_name).unlink(missing_ok=True)
        raise
    return Path(temp_name)


def store_upload(storage, upload: UploadFile) -> UploadedAsset:
    """Spool an incoming file to disk and push it to the asset store"""
    local_path = spool_upload(upload)
    try:
        return storage.upload(local_path)
    finally:
        local_path.unlink(missing_ok=True)


storage = CloudinaryStorage(settings)


def get_asset_store():
    """Dependency returning the asset store (overridden in tests)"""
    return storage
