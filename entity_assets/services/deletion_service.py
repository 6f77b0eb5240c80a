# entity_assets/services/deletion_service.py
"""
Asset Deletion Service

Removes single assets or whole entity folders while keeping the layout
invariants: gallery indices stay dense, empty folders are pruned and the
gateway cache of the entity is invalidated.
"""

from typing import Optional

from ..config import Settings
from ..enums import LogEmoji, LoggerName, LogSource
from ..utils.cache_invalidation import CacheInvalidator, NullCacheInvalidator
from ..utils.entity_locks import EntityLockRegistry
from ..utils.filename_utils import (
    ensure_plain_filename,
    is_gallery_filename,
    replace_extension,
)
from ..utils.path_utils import entity_folder, files_folder, join_relative
from .asset_repository import AssetRepository
from .gallery_renumberer import GalleryRenumberer
from .logger import get_service_logger

logger = get_service_logger(LoggerName.DELETION_SERVICE, LogSource.STORAGE)


class AssetDeletionService:
    """Single-asset and whole-entity deletion."""

    def __init__(
        self,
        repository: AssetRepository,
        settings: Settings,
        cache_invalidator: Optional[CacheInvalidator] = None,
        renumberer: Optional[GalleryRenumberer] = None,
        locks: Optional[EntityLockRegistry] = None,
    ):
        self.repository = repository
        self.settings = settings
        self.cache_invalidator = cache_invalidator or NullCacheInvalidator()
        self.locks = locks or EntityLockRegistry()
        self.renumberer = renumberer or GalleryRenumberer(repository, self.locks)

    def delete_asset(
        self, entity_type: str, entity_id: int, filename: Optional[str] = None
    ) -> bool:
        """
        Delete one asset, or the whole entity folder when no filename is given.

        For a filename, every configured derivative of it is removed from the
        entity folder; only if none existed is the exact name looked up in
        the files folder. Removing a gallery member renumbers the gallery.

        Returns:
            True if something was deleted. For a whole folder, False if it
            did not exist, otherwise whether every entry was removed.

        Raises:
            InvalidNameError: If the filename carries directories or ".."
        """
        folder = entity_folder(entity_type, entity_id)

        if filename is None:
            with self.locks.lock(folder):
                return self._delete_folder(folder)

        ensure_plain_filename(filename)

        with self.locks.lock(folder):
            self.renumberer.recover(folder)
            return self._delete_file(
                folder, files_folder(entity_type, entity_id), filename
            )

    def _delete_folder(self, folder: str) -> bool:
        if not self.repository.dir_exists(folder):
            logger.debug(f"Entity folder not found: {folder}")
            return False

        self.cache_invalidator.invalidate(folder)
        result = self.repository.delete_dir_recursive(folder)

        if result.success:
            logger.info(f"Deleted entity folder {folder}", emoji=LogEmoji.DELETE)
        else:
            logger.warning(
                f"Entity folder {folder} only partially deleted",
                extra_context={"failed_paths": result.failed_paths},
            )
        return result.success

    def _delete_file(self, folder: str, documents_folder: str, filename: str) -> bool:
        deleted = False

        for extension in self.settings.format_extensions:
            candidate = replace_extension(filename, extension)
            if self.repository.delete_file(join_relative(folder, candidate)):
                deleted = True

        if not deleted:
            deleted = self.repository.delete_file(
                join_relative(documents_folder, filename)
            )

        if not deleted:
            logger.debug(
                f"Nothing to delete for {filename} in {folder}",
                emoji=LogEmoji.SEARCH,
            )
            return False

        self.repository.prune_dir(documents_folder)

        if is_gallery_filename(filename):
            self.renumberer.renumber(folder)

        self.cache_invalidator.invalidate(folder)
        self.repository.prune_dir(folder)

        logger.info(
            f"Deleted asset {filename} from {folder}",
            emoji=LogEmoji.DELETE,
        )
        return True
