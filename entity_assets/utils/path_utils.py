# entity_assets/utils/path_utils.py
"""
Path Resolver

Maps entity identifiers onto the sharded folder layout:

    {entity_type}/{shard}            main image, gallery, derivatives
    {entity_type}/{shard}/files      documents

All returned paths are relative to the storage root and use "/" separators.
"""

from ..constants import FILES_DIRECTORY, SHARD_WIDTH
from ..exceptions import InvalidNameError


def shard_of(entity_id: int) -> str:
    """
    Zero-pad an entity ID to the fixed shard width.

    Wider IDs are returned unchanged, never truncated.

    Examples:
        shard_of(123) -> "000123"
        shard_of(1234567) -> "1234567"
    """
    return str(entity_id).rjust(SHARD_WIDTH, "0")


def validate_path_segment(segment: str) -> str:
    """
    Ensure a single path segment cannot escape its parent folder.

    Raises:
        InvalidNameError: For empty names, "." / "..", or names with separators
    """
    if not segment or segment in (".", "..") or "/" in segment or "\\" in segment:
        raise InvalidNameError(f"Invalid path segment: {segment!r}", path=segment)
    return segment


def entity_folder(entity_type: str, entity_id: int) -> str:
    """Relative folder holding an entity's images: {type}/{shard}"""
    validate_path_segment(entity_type)
    return f"{entity_type}/{shard_of(entity_id)}"


def files_folder(entity_type: str, entity_id: int) -> str:
    """Relative folder holding an entity's documents: {type}/{shard}/files"""
    return f"{entity_folder(entity_type, entity_id)}/{FILES_DIRECTORY}"


def join_relative(*parts: str) -> str:
    """Join relative path parts with "/" and no leading or duplicate separators"""
    return "/".join(part.strip("/") for part in parts if part and part.strip("/"))
