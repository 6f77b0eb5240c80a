# entity_assets/constants.py
"""
Global Constants for entity assets

Centralized location for all constants to avoid hardcoded values
throughout the codebase.
"""

from typing import Dict

# =============================================================================
# STORAGE LAYOUT
# =============================================================================

SHARD_WIDTH = 6
GALLERY_INDEX_WIDTH = 3

MAIN_ROLE = "main"
GALLERY_ROLE = "gallery"
ORIGINAL_SUFFIX = "original"

FILES_DIRECTORY = "files"

DEFAULT_DIRECTORY_MODE = 0o775

# Suffix appended to gallery names while they are being shifted
RENUMBER_TEMP_SUFFIX = "__tmp"
RENUMBER_JOURNAL_FILENAME = ".renumber-journal.json"

# =============================================================================
# MIME ALLOW-LISTS (MIME -> extension)
# =============================================================================

DEFAULT_IMAGE_MIME_MAP: Dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}

DEFAULT_FILE_MIME_MAP: Dict[str, str] = {
    "application/pdf": "pdf",
}

# =============================================================================
# IMAGE PIPELINE DEFAULTS
# =============================================================================

DEFAULT_DISPLAY_FORMAT = "webp"
DEFAULT_IMAGE_QUALITY = 90
DEFAULT_MAX_WIDTH = 2500
DEFAULT_MAX_HEIGHT = 2500

DEFAULT_OUTPUT_FORMATS: Dict[str, Dict[str, int]] = {
    "webp": {"quality": 90},
    "jpg": {"quality": 85},
}

# =============================================================================
# CACHE GATEWAY
# =============================================================================

DEFAULT_CACHE_REQUEST_TIMEOUT = 5  # seconds

# =============================================================================
# IO
# =============================================================================

UPLOAD_COPY_CHUNK_SIZE = 64 * 1024

# Destination extension -> Pillow encoder name
SAVE_FORMAT_MAP: Dict[str, str] = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
    "gif": "GIF",
    "webp": "WEBP",
}

# Pillow formats accepted as decode input; camera JPEGs often open as MPO
SUPPORTED_DECODE_FORMATS = {"JPEG", "MPO", "PNG", "GIF", "WEBP"}

# Decoded formats whose EXIF orientation tag is honoured
EXIF_ORIENTATION_FORMATS = {"JPEG", "MPO"}

# Encoders for which a quality setting is meaningful
LOSSY_SAVE_FORMATS = {"JPEG", "WEBP"}
