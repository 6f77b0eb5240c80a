# entity_assets/config.py
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_CACHE_REQUEST_TIMEOUT,
    DEFAULT_DIRECTORY_MODE,
    DEFAULT_DISPLAY_FORMAT,
    DEFAULT_FILE_MIME_MAP,
    DEFAULT_IMAGE_MIME_MAP,
    DEFAULT_IMAGE_QUALITY,
    DEFAULT_MAX_HEIGHT,
    DEFAULT_MAX_WIDTH,
    DEFAULT_OUTPUT_FORMATS,
    SAVE_FORMAT_MAP,
)
from .enums import LogLevel


class Settings(BaseSettings):
    """
    Explicit configuration value for the asset core.

    Built once by the caller and handed to every service; nothing inside
    the core reads configuration ambiently.
    """

    # ============= PATH CONFIGURATION =============

    storage_root: str = Field(
        default="./data/img", description="Root directory of the asset tree"
    )
    cache_root: str = Field(
        default="./data/cache",
        description="Root of the serving gateway's on-disk derivative cache",
    )

    @property
    def storage_path(self) -> Path:
        """Get storage root as Path object"""
        return Path(self.storage_root)

    @property
    def cache_path(self) -> Path:
        """Get cache root as Path object"""
        return Path(self.cache_root)

    directory_mode: int = Field(
        default=DEFAULT_DIRECTORY_MODE,
        ge=0,
        le=0o777,
        description="Permission bits for newly created folders",
    )

    # ============= CACHE GATEWAY =============

    cache_gateway_url: Optional[str] = Field(
        default=None,
        description="Base URL of the serving gateway's cache endpoint. "
        "When unset the on-disk cache under cache_root is dropped directly.",
    )
    cache_request_timeout: float = Field(
        default=DEFAULT_CACHE_REQUEST_TIMEOUT,
        gt=0,
        le=60,
        description="Timeout in seconds for cache invalidation requests",
    )

    # ============= IMAGE PIPELINE =============

    display_format: str = Field(
        default=DEFAULT_DISPLAY_FORMAT,
        description="Extension listed for originals when browsing an entity",
    )
    output_formats: Dict[str, Dict[str, int]] = Field(
        default_factory=lambda: {
            ext: dict(options) for ext, options in DEFAULT_OUTPUT_FORMATS.items()
        },
        description="Derivative formats keyed by extension, with per-format options",
    )
    default_quality: int = Field(
        default=DEFAULT_IMAGE_QUALITY,
        ge=1,
        le=100,
        description="Quality used when a format does not set its own",
    )
    max_width: int = Field(
        default=DEFAULT_MAX_WIDTH, ge=1, description="Derivative bounding box width"
    )
    max_height: int = Field(
        default=DEFAULT_MAX_HEIGHT, ge=1, description="Derivative bounding box height"
    )

    # ============= ALLOW-LISTS =============

    image_mime_map: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_IMAGE_MIME_MAP),
        description="Allowed image MIME types and their stored extension",
    )
    file_mime_map: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_FILE_MIME_MAP),
        description="Allowed document MIME types and their stored extension",
    )

    # ============= LOGGING =============

    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_file: Optional[str] = Field(
        default=None, description="Log file path (optional)"
    )

    @property
    def format_extensions(self) -> list:
        """Configured derivative extensions, in configuration order"""
        return list(self.output_formats.keys())

    def quality_for(self, extension: str) -> int:
        """Quality for a derivative format, falling back to default_quality"""
        options = self.output_formats.get(extension.lower(), {})
        return int(options.get("quality", self.default_quality))

    @field_validator("output_formats")
    @classmethod
    def validate_output_formats(
        cls, v: Dict[str, Dict[str, int]]
    ) -> Dict[str, Dict[str, int]]:
        """Normalize extensions and reject formats the encoder cannot write"""
        normalized: Dict[str, Dict[str, int]] = {}
        for ext, options in v.items():
            key = ext.lower().lstrip(".")
            if key not in SAVE_FORMAT_MAP:
                raise ValueError(
                    f"Unsupported output format '{ext}'. "
                    f"Must be one of: {', '.join(sorted(SAVE_FORMAT_MAP))}"
                )
            normalized[key] = dict(options or {})
        if not normalized:
            raise ValueError("At least one output format must be configured")
        return normalized

    @field_validator("image_mime_map", "file_mime_map")
    @classmethod
    def validate_mime_map(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Store extensions lower-cased and without a leading dot"""
        return {mime.lower(): ext.lower().lstrip(".") for mime, ext in v.items()}

    @field_validator("display_format")
    @classmethod
    def validate_display_format(cls, v: str) -> str:
        """Display format must be an extension the encoder can write"""
        v_lower = v.lower().lstrip(".")
        if v_lower not in SAVE_FORMAT_MAP:
            raise ValueError(f"Invalid display format '{v}'")
        return v_lower

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v) -> LogLevel:
        """Validate log level is one of the allowed values"""
        if isinstance(v, LogLevel):
            return v
        allowed_levels = LogLevel.__members__.keys()
        v_upper = str(v).upper()
        if v_upper not in allowed_levels:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: {', '.join(allowed_levels)}"
            )
        return LogLevel[v_upper]

    model_config = SettingsConfigDict(
        env_prefix="ENTITY_ASSETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Settings loaded from the environment, built once per process"""
    return Settings()
