# entity_assets/services/asset_repository.py
"""
Asset Repository

Every raw filesystem call of the asset core goes through this class. Paths
are relative to the storage root; "not found" is reported through return
values, never raised.
"""

import fnmatch
import os
import shutil
import tempfile
from pathlib import Path, PurePosixPath
from typing import List, Optional, Union

from ..constants import DEFAULT_DIRECTORY_MODE, UPLOAD_COPY_CHUNK_SIZE
from ..enums import LogEmoji, LoggerName, LogSource
from ..exceptions import InvalidNameError
from ..models.result_model import OperationResult
from ..models.upload_model import UploadedAsset
from .logger import get_service_logger

logger = get_service_logger(LoggerName.ASSET_REPOSITORY, LogSource.STORAGE)


class AssetRepository:
    """
    Filesystem access rooted at the storage directory.

    Operations:
    - existence checks for files and folders
    - single-file delete, prefix-filtered bulk delete
    - folder creation and recursive removal
    - renames and upload persistence
    """

    def __init__(
        self,
        storage_root: Union[str, Path],
        directory_mode: int = DEFAULT_DIRECTORY_MODE,
    ):
        """
        Initialize the repository.

        Args:
            storage_root: Root directory every relative path is resolved against
            directory_mode: Permission bits used for new folders
        """
        self.storage_root = Path(storage_root)
        self.directory_mode = directory_mode

    # ============================================================================
    # PATH RESOLUTION
    # ============================================================================

    def resolve(self, relative_path: str) -> Path:
        """
        Convert a relative asset path into an absolute filesystem path.

        Raises:
            InvalidNameError: For absolute paths or paths containing ".."
        """
        normalized = relative_path.replace("\\", "/")
        parts = PurePosixPath(normalized).parts
        if normalized.startswith("/") or ".." in parts:
            raise InvalidNameError(
                f"Path escapes storage root: {relative_path}", path=relative_path
            )
        return self.storage_root.joinpath(*parts)

    def relative(self, path: Union[str, Path]) -> str:
        """Convert an absolute path under the root back into a relative one"""
        return Path(path).relative_to(self.storage_root).as_posix()

    # ============================================================================
    # QUERIES
    # ============================================================================

    def exists(self, relative_path: str) -> bool:
        """True if a regular file exists at the path"""
        return self.resolve(relative_path).is_file()

    def dir_exists(self, relative_path: str) -> bool:
        return self.resolve(relative_path).is_dir()

    def has_any_file(self, relative_dir: str) -> bool:
        """
        Recursively check whether a folder contains at least one file.

        Stops at the first file found; missing folders contain nothing.
        """
        directory = self.resolve(relative_dir)
        if not directory.is_dir():
            return False

        for _dirpath, _dirnames, filenames in os.walk(directory):
            if filenames:
                return True
        return False

    def list_files(self, relative_dir: str, pattern: str = "*") -> List[str]:
        """
        Names of the immediate regular-file children matching a glob.

        Returns:
            Sorted filenames; empty if the folder does not exist
        """
        directory = self.resolve(relative_dir)
        if not directory.is_dir():
            return []

        return sorted(
            entry.name
            for entry in os.scandir(directory)
            if entry.is_file() and fnmatch.fnmatchcase(entry.name, pattern)
        )

    def file_mtime(self, relative_path: str) -> Optional[int]:
        """Modification time as an int timestamp, None if the file is missing"""
        try:
            return int(self.resolve(relative_path).stat().st_mtime)
        except FileNotFoundError:
            return None

    def file_size(self, relative_path: str) -> int:
        """File size in bytes, 0 if the file is missing"""
        try:
            return self.resolve(relative_path).stat().st_size
        except FileNotFoundError:
            return 0

    # ============================================================================
    # FILE MUTATIONS
    # ============================================================================

    def delete_file(self, relative_path: str) -> bool:
        """
        Delete a file if it exists.

        Returns:
            True if the file was deleted, False if it did not exist or the
            unlink failed
        """
        path = self.resolve(relative_path)
        if not path.is_file():
            logger.debug(
                f"File not found for deletion: {relative_path}",
                extra_context={"operation": "file_delete", "status": "not_found"},
            )
            return False

        try:
            path.unlink()
        except OSError as e:
            logger.error(
                f"Failed to delete file {relative_path}",
                exception=e,
                error_context={"operation": "file_delete", "file_path": str(path)},
            )
            return False

        logger.info(
            f"Deleted file: {relative_path}",
            emoji=LogEmoji.DELETE,
            extra_context={"operation": "file_delete"},
        )
        return True

    def delete_files_with_prefix(
        self, relative_dir: str, prefix: str
    ) -> OperationResult:
        """
        Delete the files of a folder whose names start with a prefix.

        Non-recursive and best-effort: a failed unlink is recorded and the
        remaining files are still attempted.

        Returns:
            OperationResult, unsuccessful if the folder is missing or any
            unlink failed
        """
        directory = self.resolve(relative_dir)
        if not directory.is_dir():
            return OperationResult.failed(relative_dir)

        result = OperationResult()
        for name in self.list_files(relative_dir, f"{prefix}*"):
            relative_path = f"{relative_dir}/{name}"
            try:
                (directory / name).unlink()
                result.record(relative_path, True)
            except OSError as e:
                logger.error(
                    f"Failed to delete file {relative_path}",
                    exception=e,
                    error_context={"operation": "prefix_delete", "prefix": prefix},
                )
                result.record(relative_path, False)

        if result.processed_paths:
            logger.info(
                f"Deleted {len(result.processed_paths)} files with prefix "
                f"'{prefix}' in {relative_dir}",
                emoji=LogEmoji.DELETE,
            )
        return result

    def rename(self, relative_source: str, relative_target: str) -> bool:
        """
        Rename a file, replacing any existing target.

        Returns:
            True on success, False if the rename failed
        """
        try:
            os.replace(self.resolve(relative_source), self.resolve(relative_target))
        except OSError as e:
            logger.error(
                f"Failed to rename {relative_source} -> {relative_target}",
                exception=e,
                error_context={"operation": "rename"},
            )
            return False
        return True

    def store_upload(self, upload: UploadedAsset, relative_target: str) -> Path:
        """
        Persist an uploaded payload at the target path (last write wins).

        Temp files are moved; streams are copied through a sibling temporary
        file and swapped in with a single replace.

        Returns:
            Absolute path of the stored file
        """
        target = self.resolve(relative_target)

        if upload.path is not None:
            shutil.move(upload.path, target)
            return target

        fd, temp_path = tempfile.mkstemp(dir=target.parent, prefix=".upload-")
        try:
            with os.fdopen(fd, "wb") as handle, upload.open() as source:
                shutil.copyfileobj(source, handle, UPLOAD_COPY_CHUNK_SIZE)
            os.replace(temp_path, target)
        except BaseException:
            Path(temp_path).unlink(missing_ok=True)
            raise
        return target

    def write_text(self, relative_path: str, text: str) -> None:
        """Write a small text file atomically"""
        target = self.resolve(relative_path)
        fd, temp_path = tempfile.mkstemp(dir=target.parent, prefix=".write-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_path, target)
        except BaseException:
            Path(temp_path).unlink(missing_ok=True)
            raise

    def read_text(self, relative_path: str) -> Optional[str]:
        """File contents, None if the file is missing"""
        try:
            return self.resolve(relative_path).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    # ============================================================================
    # FOLDER MUTATIONS
    # ============================================================================

    def create_dir(self, relative_dir: str, mode: Optional[int] = None) -> bool:
        """
        Create a folder (and its parents) if it does not exist.

        Returns:
            True if created, False if it already existed
        """
        directory = self.resolve(relative_dir)
        if directory.is_dir():
            return False

        directory.mkdir(
            mode=self.directory_mode if mode is None else mode,
            parents=True,
            exist_ok=True,
        )
        logger.debug(
            f"Created folder: {relative_dir}",
            emoji=LogEmoji.FOLDER,
        )
        return True

    def delete_dir_recursive(self, relative_dir: str) -> OperationResult:
        """
        Delete a folder and everything below it.

        Depth-first: files, then subfolders, then the folder itself. Failures
        are recorded and the remaining entries are still attempted.

        Returns:
            OperationResult, successful if the folder is gone or never existed
        """
        directory = self.resolve(relative_dir)
        result = OperationResult()
        if not directory.is_dir():
            return result

        for dirpath, dirnames, filenames in os.walk(directory, topdown=False):
            current = Path(dirpath)
            for name in filenames:
                result.record(
                    self.relative(current / name), self._unlink(current / name)
                )
            for name in dirnames:
                child = current / name
                remover = self._unlink if child.is_symlink() else self._rmdir
                result.record(self.relative(child), remover(child))

        result.record(relative_dir, self._rmdir(directory))

        if result.success:
            logger.info(
                f"Deleted folder: {relative_dir}",
                emoji=LogEmoji.DELETE,
                extra_context={"operation": "folder_delete"},
            )
        else:
            logger.warning(
                f"Folder {relative_dir} only partially deleted",
                extra_context={"failed_paths": result.failed_paths},
            )
        return result

    def prune_dir(self, relative_dir: str) -> bool:
        """
        Remove a folder if it no longer contains any file.

        Returns:
            True if the folder was removed
        """
        if not self.dir_exists(relative_dir) or self.has_any_file(relative_dir):
            return False
        return self.delete_dir_recursive(relative_dir).success

    @staticmethod
    def _unlink(path: Path) -> bool:
        try:
            path.unlink()
            return True
        except OSError as e:
            logger.error(f"Failed to delete {path}", exception=e)
            return False

    @staticmethod
    def _rmdir(path: Path) -> bool:
        try:
            path.rmdir()
            return True
        except OSError as e:
            logger.error(f"Failed to delete folder {path}", exception=e)
            return False
