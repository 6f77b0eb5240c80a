# tests/conftest.py
"""
Pytest configuration and shared fixtures for entity assets tests.

Every test gets its own storage and cache roots under tmp_path; sample
images are generated with Pillow on the fly.
"""

import io
from pathlib import Path
from typing import Optional, Tuple

import pytest
from PIL import Image

from entity_assets.config import Settings
from entity_assets.enums import UploadStatus
from entity_assets.models.upload_model import UploadedAsset
from entity_assets.services.asset_repository import AssetRepository
from entity_assets.services.image_pipeline.constants import EXIF_ORIENTATION_TAG

FORMAT_BY_EXTENSION = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
    "gif": "GIF",
    "webp": "WEBP",
}

MIME_BY_EXTENSION = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}


class RecordingCacheInvalidator:
    """Collects invalidated keys instead of contacting a gateway."""

    def __init__(self):
        self.keys = []

    def invalidate(self, key: str) -> None:
        self.keys.append(key)

    def invalidate_many(self, keys) -> None:
        for key in keys:
            self.invalidate(key)


@pytest.fixture
def storage_root(tmp_path) -> Path:
    root = tmp_path / "img"
    root.mkdir()
    return root


@pytest.fixture
def cache_root(tmp_path) -> Path:
    root = tmp_path / "cache"
    root.mkdir()
    return root


@pytest.fixture
def settings(storage_root, cache_root) -> Settings:
    """Settings with the default formats and a small bounding box"""
    return Settings(
        storage_root=str(storage_root),
        cache_root=str(cache_root),
        output_formats={"webp": {"quality": 90}, "jpg": {"quality": 85}},
        max_width=400,
        max_height=300,
        _env_file=None,
    )


@pytest.fixture
def repository(storage_root) -> AssetRepository:
    return AssetRepository(storage_root)


@pytest.fixture
def cache_invalidator() -> RecordingCacheInvalidator:
    return RecordingCacheInvalidator()


@pytest.fixture
def make_image(tmp_path):
    """
    Factory writing a sample image and returning its path.

    Usage:
        path = make_image("photo.jpg", size=(200, 100), orientation=6)
    """
    uploads_dir = tmp_path / "uploads"
    uploads_dir.mkdir(exist_ok=True)

    def _make(
        name: str = "sample.jpg",
        size: Tuple[int, int] = (200, 100),
        mode: str = "RGB",
        color=(200, 30, 30),
        orientation: Optional[int] = None,
    ) -> Path:
        path = uploads_dir / name
        extension = path.suffix.lower().lstrip(".")
        image = Image.new(mode, size, color)

        save_options = {}
        if orientation is not None:
            exif = Image.Exif()
            exif[EXIF_ORIENTATION_TAG] = orientation
            save_options["exif"] = exif.tobytes()

        image.save(path, FORMAT_BY_EXTENSION[extension], **save_options)
        image.close()
        return path

    return _make


@pytest.fixture
def make_upload(make_image):
    """
    Factory building an UploadedAsset backed by a freshly generated image.

    Usage:
        upload = make_upload("photo.png", size=(800, 600))
    """

    def _make(
        name: str = "sample.jpg",
        size: Tuple[int, int] = (200, 100),
        media_type: Optional[str] = None,
        status: UploadStatus = UploadStatus.OK,
        **image_options,
    ) -> UploadedAsset:
        path = make_image(name, size=size, **image_options)
        extension = path.suffix.lower().lstrip(".")
        return UploadedAsset.from_path(
            path,
            media_type=media_type or MIME_BY_EXTENSION[extension],
            client_filename=name,
            status=status,
        )

    return _make


@pytest.fixture
def make_document_upload():
    """Factory building an in-memory document upload"""

    def _make(
        client_filename: str = "Annual Report.pdf",
        content: bytes = b"%PDF-1.4 sample document",
        media_type: str = "application/pdf",
        status: UploadStatus = UploadStatus.OK,
    ) -> UploadedAsset:
        return UploadedAsset(
            status=status,
            size=len(content),
            media_type=media_type,
            client_filename=client_filename,
            stream=io.BytesIO(content),
        )

    return _make


@pytest.fixture
def make_mpo(tmp_path):
    """
    Factory writing a two-frame MPO, the container many phone cameras use
    for JPEGs, and returning its path.
    """
    uploads_dir = tmp_path / "uploads"
    uploads_dir.mkdir(exist_ok=True)

    def _make(
        name: str = "phone.jpg",
        size: Tuple[int, int] = (200, 100),
        orientation: Optional[int] = None,
    ) -> Path:
        path = uploads_dir / name
        first = Image.new("RGB", size, (200, 30, 30))
        second = Image.new("RGB", size, (30, 30, 200))

        save_options = {}
        if orientation is not None:
            exif = Image.Exif()
            exif[EXIF_ORIENTATION_TAG] = orientation
            save_options["exif"] = exif.tobytes()

        first.save(path, "MPO", save_all=True, append_images=[second], **save_options)
        first.close()
        second.close()
        return path

    return _make
