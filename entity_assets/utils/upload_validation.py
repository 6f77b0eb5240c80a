# entity_assets/utils/upload_validation.py
"""
Upload Validation Utilities

Checks shared by the image and document ingestors. The stored extension is
always taken from a server-side MIME map, never from the client filename.
"""

from typing import Dict

from ..enums import UploadStatus
from ..exceptions import UnsupportedTypeError, UploadError
from ..models.upload_model import UploadedAsset


def assert_valid_upload(upload: UploadedAsset) -> None:
    """
    Validate transport-level success and a non-empty payload.

    Raises:
        UploadError: If the transport reported an error or the payload is empty
    """
    if upload.status != UploadStatus.OK:
        raise UploadError(
            f"Upload failed with error code: {int(upload.status)}",
            path=upload.client_filename,
            status=int(upload.status),
        )

    if upload.size == 0:
        raise UploadError("Uploaded file is empty", path=upload.client_filename)


def detect_extension(upload: UploadedAsset, mime_map: Dict[str, str]) -> str:
    """
    Map the declared MIME type onto its allow-listed extension.

    Raises:
        UnsupportedTypeError: If the MIME type is missing or not allow-listed
    """
    media_type = (upload.media_type or "").split(";", 1)[0].strip().lower()
    extension = mime_map.get(media_type)
    if not extension:
        raise UnsupportedTypeError(upload.media_type, path=upload.client_filename)
    return extension
