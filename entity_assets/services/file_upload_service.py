# entity_assets/services/file_upload_service.py
"""
File Upload Service - ingests document assets.

Documents are stored untouched under {type}/{shard}/files/ with a name
derived from the client filename (slugified, lower-cased) and an extension
taken from the document MIME allow-list.
"""

from typing import Iterable, List, Optional

from ..config import Settings
from ..enums import LogEmoji, LoggerName, LogSource
from ..exceptions import EntityAssetsError
from ..models.upload_model import UploadedAsset
from ..utils.entity_locks import EntityLockRegistry
from ..utils.filename_utils import build_document_filename
from ..utils.path_utils import entity_folder, files_folder, join_relative
from ..utils.upload_validation import assert_valid_upload, detect_extension
from .asset_repository import AssetRepository
from .logger import get_service_logger

logger = get_service_logger(LoggerName.FILE_UPLOAD_SERVICE, LogSource.UPLOAD)


class FileUploadService:
    """
    Document ingestion.

    Responsibilities:
    - upload validation (status, size, MIME allow-list)
    - filename derivation from the client filename
    - persistence into the entity's files folder (last write wins)
    """

    def __init__(
        self,
        repository: AssetRepository,
        settings: Settings,
        locks: Optional[EntityLockRegistry] = None,
    ):
        self.repository = repository
        self.settings = settings
        self.locks = locks or EntityLockRegistry()

    def upload(
        self, upload: UploadedAsset, entity_id: int, entity_type: str
    ) -> Optional[str]:
        """
        Store one document.

        Returns:
            Stored filename, or None when no file was selected

        Raises:
            UploadError: Transport failure or empty payload
            UnsupportedTypeError: MIME type not allow-listed
            InvalidNameError: Nothing usable left of the client filename
        """
        if upload.is_empty_selection:
            return None

        with self.locks.lock(entity_folder(entity_type, entity_id)):
            return self._store(upload, entity_id, entity_type)

    def upload_multiple(
        self, uploads: Iterable[UploadedAsset], entity_id: int, entity_type: str
    ) -> List[str]:
        """
        Store a batch of documents, skipping empty selections.

        Validation errors abort the batch; documents stored before the
        failing item stay on disk.

        Returns:
            Stored filenames in batch order
        """
        filenames: List[str] = []
        with self.locks.lock(entity_folder(entity_type, entity_id)):
            for upload in uploads:
                if upload.is_empty_selection:
                    continue
                filenames.append(self._store(upload, entity_id, entity_type))
        return filenames

    def _store(self, upload: UploadedAsset, entity_id: int, entity_type: str) -> str:
        assert_valid_upload(upload)
        extension = detect_extension(upload, self.settings.file_mime_map)
        filename = build_document_filename(upload.client_filename, extension)

        folder = entity_folder(entity_type, entity_id)
        target_dir = files_folder(entity_type, entity_id)
        folder_created = not self.repository.dir_exists(folder)
        target_created = self.repository.create_dir(target_dir)

        relative_path = join_relative(target_dir, filename)
        try:
            self.repository.store_upload(upload, relative_path)
        except (EntityAssetsError, OSError):
            if target_created:
                self.repository.prune_dir(target_dir)
            if folder_created:
                self.repository.prune_dir(folder)
            raise

        logger.info(
            f"Stored document {relative_path}",
            emoji=LogEmoji.UPLOAD,
            extra_context={
                "media_type": upload.media_type,
                "client_filename": upload.client_filename,
                "size": upload.size,
            },
        )
        return filename
