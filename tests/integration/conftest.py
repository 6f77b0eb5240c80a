# tests/integration/conftest.py
"""
Fixtures wiring the real services against a temporary storage tree.
"""

import pytest

from entity_assets.dependencies import AssetServices


@pytest.fixture
def services(settings, cache_invalidator) -> AssetServices:
    return AssetServices(settings, cache_invalidator=cache_invalidator)


@pytest.fixture
def folder_files(storage_root):
    """Sorted names of the files directly inside an entity folder"""

    def _list(relative_folder: str):
        directory = storage_root / relative_folder
        if not directory.is_dir():
            return []
        return sorted(path.name for path in directory.iterdir() if path.is_file())

    return _list
