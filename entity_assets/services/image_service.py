# entity_assets/services/image_service.py
"""
Image Service - read-only view of an entity's images.
"""

from ..config import Settings
from ..enums import LoggerName, LogSource
from ..models.listing_model import ImageListing, ListedImage
from ..utils.filename_utils import (
    build_main_filename,
    gallery_original_glob,
    parse_gallery_filename,
)
from ..utils.path_utils import entity_folder, join_relative, shard_of
from .asset_repository import AssetRepository
from .logger import get_service_logger

logger = get_service_logger(LoggerName.IMAGE_SERVICE, LogSource.STORAGE)


class ImageService:
    """
    Lists the main image and gallery of an entity in the display format.

    Filenames are listed as the display-format derivative, which is the one
    templates link to; mtimes double as cache-busting versions.
    """

    def __init__(self, repository: AssetRepository, settings: Settings):
        self.repository = repository
        self.settings = settings

    def get_images(
        self, entity_id: int, entity_type: str, gallery: bool = False
    ) -> ImageListing:
        """
        Describe an entity's images.

        Args:
            entity_id: Entity ID
            entity_type: Entity type, e.g. "product"
            gallery: Also list the gallery members

        Returns:
            ImageListing; the main entry is always present, with time None
            when the file does not exist
        """
        folder = entity_folder(entity_type, entity_id)
        shard = shard_of(entity_id)
        display_format = self.settings.display_format

        main_file = build_main_filename(shard, display_format)
        main = ListedImage(
            file=main_file,
            time=self.repository.file_mtime(join_relative(folder, main_file)),
        )

        members = []
        if gallery:
            names = sorted(
                (
                    name
                    for name in self.repository.list_files(
                        folder, gallery_original_glob(shard, display_format)
                    )
                    if parse_gallery_filename(name) is not None
                ),
                key=lambda name: parse_gallery_filename(name).index,
            )
            members = [
                ListedImage(
                    file=name,
                    time=self.repository.file_mtime(join_relative(folder, name)),
                )
                for name in names
            ]

        logger.debug(
            f"Listed images of {folder}",
            extra_context={"gallery_count": len(members)},
        )
        return ImageListing(path=folder, main=main, gallery=members)
