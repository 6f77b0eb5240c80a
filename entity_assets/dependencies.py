# entity_assets/dependencies.py
"""
Service wiring.

AssetServices builds every service from one Settings value so that all of
them share the same repository, per-entity locks and cache invalidator.
The get_* functions are usable directly or as FastAPI dependencies:

    @router.post("/{entity_type}/{entity_id}/image")
    def upload_image(..., service: ImageUploadService = Depends(get_image_upload_service)):
        ...
"""

from functools import lru_cache
from typing import Optional

from .config import Settings, get_settings
from .services.asset_repository import AssetRepository
from .services.deletion_service import AssetDeletionService
from .services.file_service import FileService
from .services.file_upload_service import FileUploadService
from .services.gallery_renumberer import GalleryRenumberer
from .services.image_pipeline import DerivativeGenerator
from .services.image_service import ImageService
from .services.image_upload_service import ImageUploadService
from .services.logger import configure_logging
from .utils.cache_invalidation import CacheInvalidator, build_cache_invalidator
from .utils.entity_locks import EntityLockRegistry


class AssetServices:
    """Container of the services sharing one configuration."""

    def __init__(
        self,
        settings: Settings,
        cache_invalidator: Optional[CacheInvalidator] = None,
    ):
        self.settings = settings
        self.repository = AssetRepository(
            settings.storage_path, directory_mode=settings.directory_mode
        )
        self.locks = EntityLockRegistry()
        self.cache_invalidator = cache_invalidator or build_cache_invalidator(settings)
        self.renumberer = GalleryRenumberer(self.repository, self.locks)
        self.generator = DerivativeGenerator.from_settings(settings)

        self.image_upload = ImageUploadService(
            self.repository,
            settings,
            generator=self.generator,
            cache_invalidator=self.cache_invalidator,
            renumberer=self.renumberer,
            locks=self.locks,
        )
        self.file_upload = FileUploadService(self.repository, settings, self.locks)
        self.deletion = AssetDeletionService(
            self.repository,
            settings,
            cache_invalidator=self.cache_invalidator,
            renumberer=self.renumberer,
            locks=self.locks,
        )
        self.images = ImageService(self.repository, settings)
        self.files = FileService(self.repository)


@lru_cache
def get_asset_services() -> AssetServices:
    """Process-wide services built from the environment, logging included"""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)
    return AssetServices(settings)


def get_image_upload_service() -> ImageUploadService:
    return get_asset_services().image_upload


def get_file_upload_service() -> FileUploadService:
    return get_asset_services().file_upload


def get_deletion_service() -> AssetDeletionService:
    return get_asset_services().deletion


def get_image_service() -> ImageService:
    return get_asset_services().images


def get_file_service() -> FileService:
    return get_asset_services().files
