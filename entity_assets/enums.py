# entity_assets/enums.py
"""
Application Enums - Centralized enum definitions.

All enums live here so that constants.py, the models package and the
services can import them without creating circular dependencies.
"""

from enum import Enum


# =============================================================================
# UPLOAD SYSTEMS
# =============================================================================


class UploadStatus(int, Enum):
    """Transport-level upload status codes (mirrors the classic UPLOAD_ERR_* set)."""

    OK = 0
    INI_SIZE = 1
    FORM_SIZE = 2
    PARTIAL = 3
    NO_FILE = 4
    NO_TMP_DIR = 6
    CANT_WRITE = 7
    EXTENSION = 8


# =============================================================================
# IMAGE SYSTEMS
# =============================================================================


class Orientation(str, Enum):
    """Image orientation derived from its current geometry."""

    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"


class FlipAxis(str, Enum):
    """Mirror axis. X mirrors left-right, Y mirrors top-bottom."""

    X = "x"
    Y = "y"


class RenumberPhase(int, Enum):
    """Phase recorded in a gallery renumbering journal."""

    TO_TEMPORARY = 1
    TO_FINAL = 2


# =============================================================================
# LOGGING SYSTEMS
# =============================================================================


class LogLevel(str, Enum):
    """Log level constants for centralized logging system."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogSource(str, Enum):
    """Log source constants for identifying log origins."""

    SYSTEM = "system"
    STORAGE = "storage"
    PIPELINE = "pipeline"
    UPLOAD = "upload"
    CACHE = "cache"


class LoggerName(str, Enum):
    """Logger name constants for categorizing log entries."""

    ASSET_REPOSITORY = "asset_repository"
    IMAGE_PIPELINE = "image_pipeline"
    IMAGE_UPLOAD_SERVICE = "image_upload_service"
    FILE_UPLOAD_SERVICE = "file_upload_service"
    DELETION_SERVICE = "deletion_service"
    GALLERY_RENUMBERER = "gallery_renumberer"
    CACHE_INVALIDATION = "cache_invalidation"
    IMAGE_SERVICE = "image_service"
    FILE_SERVICE = "file_service"
    SYSTEM = "system"


class LogEmoji(str, Enum):
    """Type-safe emoji constants for log messages."""

    # Status emojis
    SUCCESS = "✅"
    FAILED = "❌"
    ERROR = "❌"
    WARNING = "⚠️"
    INFO = "ℹ️"
    DEBUG = "🐞"
    CRITICAL = "☠️"

    # Work emojis
    PROCESSING = "🔄"
    RESTORE = "🔄"

    # Asset emojis
    IMAGE = "🖼️"
    FILE = "📄"
    UPLOAD = "📤"
    FOLDER = "📁"

    # System emojis
    SYSTEM = "⚙️"
    CLEANUP = "🧹"
    CACHE = "🗄️"
    STORAGE = "💾"
    NETWORK = "🌐"
    SECURITY = "🔒"

    # Action emojis
    CREATE = "➕"
    UPDATE = "✏️"
    DELETE = "🗑️"
    SEARCH = "🔍"
