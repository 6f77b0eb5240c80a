"""
Entity Assets

Image and document assets attached to entities: upload ingestion, a
sharded on-disk layout, orientation-corrected derivatives, and deletion
with gallery renumbering.
"""

from .config import Settings, get_settings
from .dependencies import AssetServices, get_asset_services

__version__ = "1.0.0"

__all__ = [
    "AssetServices",
    "Settings",
    "get_asset_services",
    "get_settings",
]
