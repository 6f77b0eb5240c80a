# entity_assets/exceptions.py
"""
Custom exceptions for entity assets.

Centralized location for all custom exception classes to avoid
duplicating exception definitions across modules.

"Not found" is never an exception here: delete operations report it by
returning False.
"""

from typing import Optional, Sequence


class EntityAssetsError(Exception):
    """
    Base exception for all entity asset errors.

    Attributes:
        path: File or folder the operation was working on
        media_type: Declared MIME type of the upload involved
        detail: Underlying codec or OS message
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        media_type: Optional[str] = None,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.path = path
        self.media_type = media_type
        self.detail = detail


# =============================================================================
# UPLOAD ERRORS
# =============================================================================


class UploadError(EntityAssetsError):
    """Transport-level upload failure or empty payload."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        status: Optional[int] = None,
    ):
        super().__init__(message, path)
        self.status = status


class UnsupportedTypeError(EntityAssetsError):
    """Declared MIME type is not in the allow-list."""

    def __init__(self, media_type: Optional[str], path: Optional[str] = None):
        super().__init__(
            f"Unsupported MIME type: {media_type}", path, media_type=media_type
        )


class InvalidNameError(EntityAssetsError):
    """Filename is empty after sanitization or would escape its folder."""

    pass


# =============================================================================
# IMAGE PROCESSING ERRORS
# =============================================================================


class ImageProcessingError(EntityAssetsError):
    """Base exception for codec-level failures."""

    def __init__(
        self, message: str, path: Optional[str] = None, detail: Optional[str] = None
    ):
        super().__init__(message, path, detail=detail)


class DecodeError(ImageProcessingError):
    """Source image is missing, unreadable, corrupt or of an unsupported format."""

    pass


class EncodeError(ImageProcessingError):
    """Destination format is unsupported or the codec failed to write."""

    pass


class TransformError(ImageProcessingError):
    """Flip, rotate or resize failed inside the codec."""

    pass


class DerivativeGenerationError(EncodeError):
    """One or more derivative formats failed; the others were still written."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        failed_formats: Sequence[str] = (),
        saved_paths: Sequence[str] = (),
    ):
        super().__init__(message, path)
        self.failed_formats = list(failed_formats)
        self.saved_paths = list(saved_paths)
