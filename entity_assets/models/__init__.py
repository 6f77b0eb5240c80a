"""
Data models for entity assets.
"""

from .listing_model import FileListing, ImageListing, ListedFile, ListedImage
from .result_model import OperationResult, RenumberEntry, RenumberJournal
from .upload_model import UploadedAsset

__all__ = [
    "UploadedAsset",
    "OperationResult",
    "RenumberEntry",
    "RenumberJournal",
    "ImageListing",
    "ListedImage",
    "FileListing",
    "ListedFile",
]
