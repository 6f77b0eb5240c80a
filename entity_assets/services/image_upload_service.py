# entity_assets/services/image_upload_service.py
"""
Image Upload Service - ingests main and gallery images.

Layout produced for entity 123 of type "product":

    product/000123/000123-main-original.{fmt}
    product/000123/000123-gallery-001-original.{fmt}

The original upload is never kept: the pipeline auto-orients it and writes
one size-bounded derivative per configured output format, all sharing the
nominal filename's base name.
"""

from typing import Iterable, List, Optional

from ..config import Settings
from ..enums import LogEmoji, LoggerName, LogSource, UploadStatus
from ..exceptions import DerivativeGenerationError, EntityAssetsError
from ..models.upload_model import UploadedAsset
from ..utils.cache_invalidation import CacheInvalidator, NullCacheInvalidator
from ..utils.entity_locks import EntityLockRegistry
from ..utils.filename_utils import (
    base_name,
    build_gallery_filename,
    build_main_filename,
    gallery_original_glob,
    parse_gallery_filename,
)
from ..utils.path_utils import entity_folder, join_relative, shard_of
from ..utils.upload_validation import assert_valid_upload, detect_extension
from .asset_repository import AssetRepository
from .gallery_renumberer import GalleryRenumberer
from .image_pipeline import DerivativeGenerator
from .logger import get_service_logger

logger = get_service_logger(LoggerName.IMAGE_UPLOAD_SERVICE, LogSource.UPLOAD)


class ImageUploadService:
    """
    Image ingestion.

    Responsibilities:
    - upload validation (status, size, MIME allow-list)
    - main and gallery filename allocation
    - derivative generation through the image pipeline
    - cache invalidation of every written derivative
    """

    def __init__(
        self,
        repository: AssetRepository,
        settings: Settings,
        generator: Optional[DerivativeGenerator] = None,
        cache_invalidator: Optional[CacheInvalidator] = None,
        renumberer: Optional[GalleryRenumberer] = None,
        locks: Optional[EntityLockRegistry] = None,
    ):
        self.repository = repository
        self.settings = settings
        self.generator = generator or DerivativeGenerator.from_settings(settings)
        self.cache_invalidator = cache_invalidator or NullCacheInvalidator()
        self.locks = locks or EntityLockRegistry()
        self.renumberer = renumberer or GalleryRenumberer(repository, self.locks)

    # ============================================================================
    # PUBLIC API
    # ============================================================================

    def upload(
        self, upload: UploadedAsset, entity_id: int, entity_type: str
    ) -> Optional[str]:
        """
        Store the main image of an entity, replacing any previous one.

        Returns:
            Nominal filename ({shard}-main-original.{ext}), or None when no
            file was selected

        Raises:
            UploadError: Transport failure or empty payload
            UnsupportedTypeError: MIME type not allow-listed
            DecodeError: The payload is not a readable image
            DerivativeGenerationError: At least one output format failed
        """
        if upload.is_empty_selection:
            return None

        assert_valid_upload(upload)
        extension = detect_extension(upload, self.settings.image_mime_map)

        folder = entity_folder(entity_type, entity_id)
        filename = build_main_filename(shard_of(entity_id), extension)

        with self.locks.lock(folder):
            self.renumberer.recover(folder)
            self._process_image(upload, folder, filename)

        return filename

    def upload_multiple(
        self, uploads: Iterable[UploadedAsset], entity_id: int, entity_type: str
    ) -> List[str]:
        """
        Append a batch of images to an entity's gallery.

        The item at batch position i gets index max(existing) + i + 1.
        Items whose transport status is not OK are skipped but keep their
        position, so the next item's index is unchanged.

        Returns:
            Nominal filenames of the stored gallery members, in batch order
        """
        folder = entity_folder(entity_type, entity_id)
        shard = shard_of(entity_id)
        filenames: List[str] = []

        with self.locks.lock(folder):
            self.renumberer.recover(folder)
            start_index = self._max_gallery_index(folder, shard)

            for position, upload in enumerate(uploads):
                if upload.status != UploadStatus.OK:
                    logger.debug(
                        f"Skipping gallery item {position} with status "
                        f"{upload.status.name}",
                        extra_context={"client_filename": upload.client_filename},
                    )
                    continue

                assert_valid_upload(upload)
                extension = detect_extension(upload, self.settings.image_mime_map)
                filename = build_gallery_filename(
                    shard, start_index + position + 1, extension
                )
                self._process_image(upload, folder, filename)
                filenames.append(filename)

        return filenames

    # ============================================================================
    # INTERNALS
    # ============================================================================

    def _max_gallery_index(self, folder: str, shard: str) -> int:
        """Highest gallery index present in the folder, 0 for an empty gallery"""
        indices = [
            parsed.index
            for parsed in map(
                parse_gallery_filename,
                self.repository.list_files(folder, gallery_original_glob(shard)),
            )
            if parsed is not None
        ]
        return max(indices, default=0)

    def _process_image(
        self, upload: UploadedAsset, folder: str, filename: str
    ) -> None:
        """Generate every derivative of one upload and invalidate their cache"""
        created = self.repository.create_dir(folder)
        stem = base_name(filename)

        try:
            with upload.open() as source:
                saved = self.generator.generate(
                    source, self.repository.resolve(folder), stem
                )
        except DerivativeGenerationError as e:
            self._invalidate(e.saved_paths)
            # no-op when a sibling derivative made it to disk
            if created:
                self.repository.prune_dir(folder)
            raise
        except (EntityAssetsError, OSError):
            if created:
                self.repository.prune_dir(folder)
            raise

        self._invalidate(saved)

        logger.info(
            f"Stored image {join_relative(folder, filename)}",
            emoji=LogEmoji.UPLOAD,
            extra_context={
                "derivatives": [path.name for path in saved],
                "media_type": upload.media_type,
                "client_filename": upload.client_filename,
            },
        )

    def _invalidate(self, paths) -> None:
        self.cache_invalidator.invalidate_many(
            self.repository.relative(path) for path in paths
        )
