# entity_assets/utils/filename_utils.py
"""
Filename codec for the on-disk layout.

Filenames are the only structural record of an asset (role, gallery index,
format), so every pattern and its inverse live here:

    {shard}-main-original.{ext}
    {shard}-gallery-{NNN}-original.{ext}
    {slug}.{ext}                          (documents)
"""

import re
import unicodedata
from pathlib import PurePosixPath
from typing import NamedTuple, Optional

from ..constants import (
    GALLERY_INDEX_WIDTH,
    GALLERY_ROLE,
    MAIN_ROLE,
    ORIGINAL_SUFFIX,
    RENUMBER_TEMP_SUFFIX,
)
from ..exceptions import InvalidNameError
from .path_utils import validate_path_segment

# prefix ends with "-gallery-"; variant is the size/role suffix ("-original",
# "-300x200"); extensions are alphanumeric, so "__tmp" names never match
GALLERY_FILENAME_PATTERN = re.compile(
    r"^(?P<prefix>.*-" + GALLERY_ROLE + r"-)"
    r"(?P<index>\d{3,})"
    r"(?P<variant>-.*)?"
    r"\.(?P<extension>[A-Za-z0-9]+)$"
)

MAIN_FILENAME_PATTERN = re.compile(
    r"^(?P<shard>\d+)-" + MAIN_ROLE + "-" + ORIGINAL_SUFFIX +
    r"\.(?P<extension>[A-Za-z0-9]+)$"
)

_EXTENSION_PATTERN = re.compile(r"\.\w+$")
_SLUG_INVALID_CHARS = re.compile(r"[^A-Za-z0-9]+")


class GalleryFilename(NamedTuple):
    """A parsed gallery filename."""

    prefix: str
    index: int
    variant: str
    extension: str

    def with_index(self, index: int) -> str:
        """Rebuild this name with a different gallery index"""
        return (
            f"{self.prefix}{index:0{GALLERY_INDEX_WIDTH}d}"
            f"{self.variant}.{self.extension}"
        )

    @property
    def filename(self) -> str:
        return self.with_index(self.index)


def build_main_filename(shard: str, extension: str) -> str:
    """{shard}-main-original.{ext}"""
    return f"{shard}-{MAIN_ROLE}-{ORIGINAL_SUFFIX}.{extension}"


def build_gallery_filename(shard: str, index: int, extension: str) -> str:
    """{shard}-gallery-{NNN}-original.{ext}"""
    return GalleryFilename(
        prefix=f"{shard}-{GALLERY_ROLE}-",
        index=index,
        variant=f"-{ORIGINAL_SUFFIX}",
        extension=extension,
    ).filename


def gallery_original_glob(shard: str, extension: str = "*") -> str:
    """Glob matching the gallery originals of one shard"""
    return f"{shard}-{GALLERY_ROLE}-*-{ORIGINAL_SUFFIX}.{extension}"


def parse_gallery_filename(filename: str) -> Optional[GalleryFilename]:
    """
    Parse a gallery filename into its parts.

    Returns:
        GalleryFilename, or None when the name is not a gallery member
    """
    match = GALLERY_FILENAME_PATTERN.match(filename)
    if match is None:
        return None
    return GalleryFilename(
        prefix=match.group("prefix"),
        index=int(match.group("index")),
        variant=match.group("variant") or "",
        extension=match.group("extension"),
    )


def is_gallery_filename(filename: str) -> bool:
    return parse_gallery_filename(filename) is not None


def is_gallery_original(filename: str) -> bool:
    """True for gallery originals ({shard}-gallery-NNN-original.ext) only"""
    parsed = parse_gallery_filename(filename)
    return parsed is not None and parsed.variant == f"-{ORIGINAL_SUFFIX}"


def is_main_filename(filename: str) -> bool:
    return MAIN_FILENAME_PATTERN.match(filename) is not None


def replace_extension(filename: str, extension: str) -> str:
    """
    Swap the trailing extension for another one.

    Names without an extension are returned unchanged.
    """
    return _EXTENSION_PATTERN.sub("." + extension.lstrip("."), filename, count=1)


def base_name(filename: str) -> str:
    """Filename without its final extension"""
    return PurePosixPath(filename).stem


def temporary_name(filename: str) -> str:
    """Collision-free name used while shifting gallery indices"""
    return f"{filename}{RENUMBER_TEMP_SUFFIX}"


def slugify(text: str) -> str:
    """
    Reduce text to an ASCII slug of letters, digits and single hyphens.

    Examples:
        "Výroční zpráva 2024" -> "Vyrocni-zprava-2024"
        "  ..  " -> ""
    """
    normalized = unicodedata.normalize("NFKD", text)
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
    return _SLUG_INVALID_CHARS.sub("-", ascii_text).strip("-")


def client_base_name(client_filename: Optional[str]) -> str:
    """Client filename without directories and without its final extension"""
    name = (client_filename or "").replace("\\", "/").rsplit("/", 1)[-1]
    if "." in name:
        name = name.rsplit(".", 1)[0]
    return name


def build_document_filename(client_filename: Optional[str], extension: str) -> str:
    """
    Derive a stored document name from the client's filename.

    The extension always comes from the server-side MIME map.

    Raises:
        InvalidNameError: If nothing usable is left after slugifying
    """
    slug = slugify(client_base_name(client_filename))
    if not slug:
        raise InvalidNameError(
            f"Invalid filename: {client_filename!r}", path=client_filename
        )
    return f"{slug}.{extension}".lower()


def ensure_plain_filename(filename: str) -> str:
    """Reject names that carry directories or traversal segments"""
    return validate_path_segment(filename)
