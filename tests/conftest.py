import os
import uuid
from pathlib import Path

# Configure the app before it is imported: in-memory DB, no Redis
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from helpers import login, register
from videotube.core.exceptions import InternalError
from videotube.core.storage import UploadedAsset, get_asset_store
from videotube.db.base import Base
from videotube.db.init_db import init_db
from videotube.db.session import get_db
from videotube.main import app


class FakeAssetStore:
    """In-memory stand-in for Cloudinary that records what happened"""

    def __init__(self):
        self.uploaded = []
        self.deleted = []
        self.local_paths = []
        self.fail_on_upload = None  # 1-based index of the upload that should fail

    def upload(self, local_path):
        path = Path(local_path)
        assert path.exists()
        self.local_paths.append(path)
        if self.fail_on_upload is not None and len(self.local_paths) == self.fail_on_upload:
            raise InternalError("Failed to upload media file")
        is_video = path.suffix.lower() == ".mp4"
        asset = UploadedAsset(
            url=f"https://cdn.example.com/{uuid.uuid4().hex}{path.suffix}",
            asset_id=f"asset-{len(self.local_paths)}",
            resource_type="video" if is_video else "image",
            duration=42.0 if is_video else 0.0,
        )
        self.uploaded.append(asset)
        return asset

    def delete(self, asset_id, resource_type="image"):
        self.deleted.append(asset_id)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def assets():
    return FakeAssetStore()


@pytest.fixture
def client(session_factory, assets):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_asset_store] = lambda: assets
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client):
    """Register + log in a user; returns (headers, user dict)"""
    def _make(username):
        res = register(client, username)
        assert res.status_code == 201, res.text
        headers, data = login(client, username)
        return headers, data["user"]
    return _make
