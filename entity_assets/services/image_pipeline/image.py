# entity_assets/services/image_pipeline/image.py
"""
Image Transform Engine

Pillow-backed image that is decoded once, transformed in place
(orientation fix, flip, rotate, proportional resize) and encoded to one or
more destination formats.

Lifecycle: Loaded -> Transformed* -> Saved (save may be called repeatedly).
The decoded buffer is released by close(); use the instance as a context
manager so it is released on every exit path:

    with TransformImage(source_path) as image:
        image.auto_orient().best_fit(2500, 2500)
        image.save("out.webp", quality=90)
"""

import math
from pathlib import Path
from typing import BinaryIO, Callable, Dict, List, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from ...constants import (
    EXIF_ORIENTATION_FORMATS,
    LOSSY_SAVE_FORMATS,
    SAVE_FORMAT_MAP,
    SUPPORTED_DECODE_FORMATS,
)
from ...enums import FlipAxis, LogEmoji, LoggerName, LogSource, Orientation
from ...exceptions import DecodeError, EncodeError, TransformError
from ..logger import get_service_logger
from .constants import EXIF_ORIENTATION_TAG, JPEG_BACKGROUND_COLOR

logger = get_service_logger(LoggerName.IMAGE_PIPELINE, LogSource.PIPELINE)

ImageSource = Union[str, Path, BinaryIO]

# Pillow errors that mean "the codec could not do it"
CODEC_ERRORS = (OSError, ValueError, KeyError, SyntaxError, Image.DecompressionBombError)


def _round_half_up(value: float) -> int:
    """Round positive values half away from zero (2.5 -> 3)"""
    return int(math.floor(value + 0.5))


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    )


class TransformImage:
    """
    A decoded raster image with orientation, flip, rotate, resize and save.

    Transform methods return the instance so calls can be chained.
    """

    def __init__(self, source: ImageSource):
        """
        Decode an image.

        Args:
            source: Path of the image file or a readable binary stream

        Raises:
            DecodeError: If the file is missing or cannot be decoded as a
                JPEG, PNG, GIF or WEBP image
        """
        if isinstance(source, (str, Path)):
            self.path = str(source)
            if not Path(source).is_file():
                raise DecodeError(f"File not found: {self.path}", path=self.path)
        else:
            self.path = str(getattr(source, "name", "<stream>"))

        image: Optional[Image.Image] = None
        try:
            image = Image.open(source)
            if image.format not in SUPPORTED_DECODE_FORMATS:
                raise DecodeError(
                    f"Unsupported image type: {image.format}",
                    path=self.path,
                    detail=str(image.format),
                )
            image.load()
        except DecodeError:
            if image is not None:
                image.close()
            raise
        except (UnidentifiedImageError, *CODEC_ERRORS) as e:
            if image is not None:
                image.close()
            raise DecodeError(
                f"Cannot read image: {self.path}", path=self.path, detail=str(e)
            ) from e

        self.source_format: str = image.format
        self._exif_orientation = self._extract_exif_orientation(image)
        self._image: Optional[Image.Image] = image

        logger.debug(
            f"Loaded {self.source_format} image {self.path} ({image.width}x{image.height})",
            emoji=LogEmoji.IMAGE,
        )

    # ============================================================================
    # LIFECYCLE
    # ============================================================================

    def close(self) -> None:
        """Release the decoded buffer. Safe to call more than once."""
        if self._image is not None:
            self._image.close()
            self._image = None

    @property
    def closed(self) -> bool:
        return self._image is None

    def __enter__(self) -> "TransformImage":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _require_image(self) -> Image.Image:
        if self._image is None:
            raise TransformError("Image has been closed", path=self.path)
        return self._image

    def _replace(self, image: Image.Image) -> None:
        """Swap in a newly allocated buffer and release the previous one"""
        previous = self._image
        self._image = image
        if previous is not None and previous is not image:
            previous.close()

    # ============================================================================
    # GEOMETRY
    # ============================================================================

    @property
    def width(self) -> int:
        return self._require_image().width

    @property
    def height(self) -> int:
        return self._require_image().height

    @property
    def size(self) -> Tuple[int, int]:
        return self._require_image().size

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def mode(self) -> str:
        return self._require_image().mode

    def get_width(self) -> int:
        return self.width

    def get_height(self) -> int:
        return self.height

    def get_aspect_ratio(self) -> float:
        return self.aspect_ratio

    def get_orientation(self) -> Orientation:
        """Landscape when width >= height, portrait otherwise"""
        return Orientation.LANDSCAPE if self.width >= self.height else Orientation.PORTRAIT

    # ============================================================================
    # ORIENTATION
    # ============================================================================

    def _extract_exif_orientation(self, image: Image.Image) -> Optional[int]:
        # Only JPEG-family sources are trusted to carry a meaningful orientation tag
        if image.format not in EXIF_ORIENTATION_FORMATS:
            return None
        try:
            value = image.getexif().get(EXIF_ORIENTATION_TAG)
        except CODEC_ERRORS as e:
            logger.debug(
                f"Ignoring unreadable EXIF in {self.path}",
                extra_context={"error": str(e)},
            )
            return None

        if isinstance(value, int) and 1 <= value <= 8:
            return value
        return None

    def read_exif_orientation(self) -> Optional[int]:
        """
        EXIF orientation tag (1..8) of the source.

        Returns:
            The tag, or None for non-JPEG sources, a missing tag or
            unreadable EXIF data
        """
        return self._exif_orientation

    def auto_orient(self) -> "TransformImage":
        """
        Apply the flip/rotate sequence that displays the photo upright.

        Tag 1 or a missing tag leaves the image unchanged.
        """
        tag = self.read_exif_orientation()
        operations = self._orientation_operations().get(tag, [])
        for operation in operations:
            operation()

        if operations:
            logger.debug(
                f"Auto-oriented {self.path} (EXIF orientation {tag})",
                emoji=LogEmoji.PROCESSING,
            )
        return self

    def _orientation_operations(self) -> Dict[Optional[int], List[Callable[[], object]]]:
        return {
            2: [lambda: self.flip(FlipAxis.X)],
            3: [lambda: self.rotate(180)],
            4: [lambda: self.flip(FlipAxis.Y)],
            5: [lambda: self.flip(FlipAxis.Y), lambda: self.rotate(90)],
            6: [lambda: self.rotate(90)],
            7: [lambda: self.flip(FlipAxis.X), lambda: self.rotate(90)],
            8: [lambda: self.rotate(-90)],
        }

    # ============================================================================
    # TRANSFORMS
    # ============================================================================

    def flip(self, axis: Union[FlipAxis, str]) -> "TransformImage":
        """
        Mirror the image.

        Args:
            axis: FlipAxis.X mirrors left-right, FlipAxis.Y mirrors top-bottom

        Raises:
            TransformError: If the codec fails
        """
        axis = FlipAxis(axis)
        image = self._require_image()
        method = (
            Image.Transpose.FLIP_LEFT_RIGHT
            if axis == FlipAxis.X
            else Image.Transpose.FLIP_TOP_BOTTOM
        )
        try:
            self._replace(image.transpose(method))
        except CODEC_ERRORS as e:
            raise TransformError(
                f"Failed to flip image along {axis.value}", path=self.path, detail=str(e)
            ) from e
        return self

    def rotate(self, degrees: int) -> "TransformImage":
        """
        Rotate clockwise by a multiple of 90 degrees.

        Negative values rotate counter-clockwise. Width and height follow the
        new bounding box.

        Raises:
            ValueError: If degrees is not a multiple of 90
            TransformError: If the codec fails
        """
        if degrees % 90 != 0:
            raise ValueError(f"Rotation must be a multiple of 90 degrees, got {degrees}")

        image = self._require_image()
        quarter_turns = (degrees // 90) % 4
        if quarter_turns == 0:
            return self

        # Pillow's ROTATE_* constants turn counter-clockwise
        method = {
            1: Image.Transpose.ROTATE_270,
            2: Image.Transpose.ROTATE_180,
            3: Image.Transpose.ROTATE_90,
        }[quarter_turns]
        try:
            self._replace(image.transpose(method))
        except CODEC_ERRORS as e:
            raise TransformError(
                f"Failed to rotate image by {degrees}", path=self.path, detail=str(e)
            ) from e
        return self

    def resize(self, width: int, height: int) -> "TransformImage":
        """
        Resample to exactly width x height.

        Uses LANCZOS resampling; transparency is kept (palette images with a
        transparent colour are promoted to RGBA first).

        Raises:
            TransformError: If the codec fails
        """
        width = max(1, int(width))
        height = max(1, int(height))
        image = self._require_image()

        try:
            if image.mode not in ("RGB", "RGBA", "L", "LA"):
                image = image.convert("RGBA" if _has_alpha(image) else "RGB")
            resized = image.resize((width, height), Image.Resampling.LANCZOS)
            if image is not self._image:
                image.close()
            self._replace(resized)
        except CODEC_ERRORS as e:
            raise TransformError(
                f"Failed to resize image to {width}x{height}",
                path=self.path,
                detail=str(e),
            ) from e
        return self

    def calculate_best_fit(self, max_width: int, max_height: int) -> Tuple[int, int]:
        """
        Largest size preserving the aspect ratio that fits the box.

        Width-constrained first; if the resulting height still exceeds the
        box, height-constrained instead.
        """
        width, height = self.size
        if width <= max_width and height <= max_height:
            return width, height

        ratio = width / height
        new_width = max_width
        new_height = _round_half_up(max_width / ratio)
        if new_height > max_height:
            new_height = max_height
            new_width = _round_half_up(max_height * ratio)
        return new_width, new_height

    def best_fit(self, max_width: int, max_height: int) -> "TransformImage":
        """Proportionally shrink into max_width x max_height; no-op if it fits"""
        target = self.calculate_best_fit(max_width, max_height)
        if target == self.size:
            return self
        return self.resize(*target)

    # ============================================================================
    # ENCODING
    # ============================================================================

    def save(self, path: Union[str, Path], quality: int = 90) -> Path:
        """
        Encode to the format implied by the destination extension.

        Args:
            path: Destination; .jpg/.jpeg, .png, .gif or .webp
            quality: 1-100, honoured by JPEG and WEBP, ignored otherwise

        Returns:
            The destination path

        Raises:
            EncodeError: For unsupported extensions or codec write failures
        """
        destination = Path(path)
        extension = destination.suffix.lower().lstrip(".")
        save_format = SAVE_FORMAT_MAP.get(extension)
        if save_format is None:
            raise EncodeError(
                f"Unsupported save format: {extension or '(none)'}",
                path=str(destination),
            )

        image = self._require_image()
        options: Dict[str, object] = {}
        if save_format in LOSSY_SAVE_FORMATS:
            options["quality"] = max(1, min(100, int(quality)))
        if save_format == "JPEG":
            options.update(optimize=True, progressive=True)
        elif save_format == "PNG":
            options["optimize"] = True

        prepared = image
        try:
            prepared = self._prepare_for(save_format, image)
            prepared.save(destination, save_format, **options)
        except CODEC_ERRORS as e:
            raise EncodeError(
                f"Failed to save image to {destination}",
                path=str(destination),
                detail=str(e),
            ) from e
        finally:
            if prepared is not image:
                prepared.close()

        logger.debug(
            f"Saved {save_format} image {destination}",
            emoji=LogEmoji.IMAGE,
            extra_context={"quality": options.get("quality")},
        )
        return destination

    @staticmethod
    def _prepare_for(save_format: str, image: Image.Image) -> Image.Image:
        """Convert to a mode the target encoder accepts"""
        if save_format == "JPEG":
            if _has_alpha(image):
                rgba = image.convert("RGBA")
                background = Image.new("RGB", rgba.size, JPEG_BACKGROUND_COLOR)
                background.paste(rgba, mask=rgba.getchannel("A"))
                rgba.close()
                return background
            if image.mode not in ("RGB", "L", "CMYK"):
                return image.convert("RGB")
        elif save_format == "WEBP":
            if image.mode not in ("RGB", "RGBA"):
                return image.convert("RGBA" if _has_alpha(image) else "RGB")
        elif save_format == "PNG":
            if image.mode not in ("1", "L", "LA", "P", "RGB", "RGBA", "I"):
                return image.convert("RGBA" if _has_alpha(image) else "RGB")
        return image
