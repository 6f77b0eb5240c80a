# entity_assets/services/file_service.py
"""
File Service - read-only view of an entity's documents.
"""

from ..enums import LoggerName, LogSource
from ..models.listing_model import FileListing, ListedFile
from ..utils.path_utils import files_folder, join_relative
from .asset_repository import AssetRepository
from .logger import get_service_logger

logger = get_service_logger(LoggerName.FILE_SERVICE, LogSource.STORAGE)


class FileService:
    """Lists the documents stored in an entity's files folder."""

    def __init__(self, repository: AssetRepository):
        self.repository = repository

    def get_files(self, entity_id: int, entity_type: str) -> FileListing:
        """
        Describe an entity's documents, sorted by filename.

        Only visible names with an extension are listed; a missing folder yields an
        empty listing.
        """
        folder = files_folder(entity_type, entity_id)

        files = [
            ListedFile(
                file=name,
                size=self.repository.file_size(join_relative(folder, name)),
            )
            for name in self.repository.list_files(folder, "*.*")
            if not name.startswith(".")
        ]

        logger.debug(f"Listed {len(files)} documents of {folder}")
        return FileListing(path=folder, files=files)
