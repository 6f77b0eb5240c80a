# entity_assets/services/image_pipeline/derivative_generator.py
"""
Derivative Generator Component

Turns one uploaded original into one encoded derivative per configured
output format, all sharing the original's base name:

    {base}.webp, {base}.jpg, ...

Each format is saved independently: a failing format does not roll back
the ones already written.
"""

from pathlib import Path
from typing import Dict, List, Tuple

from ...config import Settings
from ...enums import LogEmoji, LoggerName, LogSource
from ...exceptions import DerivativeGenerationError, ImageProcessingError
from ..logger import get_service_logger
from .image import ImageSource, TransformImage

logger = get_service_logger(LoggerName.IMAGE_PIPELINE, LogSource.PIPELINE)


class DerivativeGenerator:
    """
    Component responsible for orientation-corrected, size-bounded derivatives.

    Per source: decode once, auto-orient, then for every format best-fit to
    the bounding box and save with that format's quality.
    """

    def __init__(
        self,
        output_formats: Dict[str, int],
        max_size: Tuple[int, int],
    ):
        """
        Initialize derivative generator.

        Args:
            output_formats: Extension -> quality, in generation order
            max_size: (max_width, max_height) bounding box
        """
        self.output_formats = dict(output_formats)
        self.max_size = max_size

        logger.debug(
            f"DerivativeGenerator initialized (formats={list(self.output_formats)}, "
            f"max_size={self.max_size})"
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "DerivativeGenerator":
        return cls(
            output_formats={
                ext: settings.quality_for(ext) for ext in settings.format_extensions
            },
            max_size=(settings.max_width, settings.max_height),
        )

    def derivative_names(self, base_name: str) -> List[str]:
        """Filenames this generator writes for a base name"""
        return [f"{base_name}.{ext}" for ext in self.output_formats]

    def generate(
        self, source: ImageSource, target_dir: Path, base_name: str
    ) -> List[Path]:
        """
        Write every configured derivative of a source image.

        Args:
            source: Path or stream of the uploaded original
            target_dir: Existing folder receiving the derivatives
            base_name: Shared filename without extension

        Returns:
            Paths of the written derivatives, in format order

        Raises:
            DecodeError: If the source cannot be decoded
            DerivativeGenerationError: If at least one format failed; the
                successful ones stay on disk and are listed on the error
        """
        saved: List[Path] = []
        failed: List[str] = []
        max_width, max_height = self.max_size

        with TransformImage(source) as image:
            image.auto_orient()

            for ext, quality in self.output_formats.items():
                output_path = target_dir / f"{base_name}.{ext}"
                try:
                    image.best_fit(max_width, max_height)
                    saved.append(image.save(output_path, quality))
                except ImageProcessingError as e:
                    failed.append(ext)
                    logger.error(
                        f"Failed to generate {ext} derivative {output_path.name}",
                        exception=e,
                        error_context={"format": ext, "detail": e.detail},
                    )

        if failed:
            raise DerivativeGenerationError(
                f"Failed to generate derivatives for {base_name}: {', '.join(failed)}",
                path=str(target_dir / base_name),
                failed_formats=failed,
                saved_paths=[str(path) for path in saved],
            )

        logger.debug(
            f"Generated {len(saved)} derivatives for {base_name}",
            emoji=LogEmoji.IMAGE,
        )
        return saved
