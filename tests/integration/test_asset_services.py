#!/usr/bin/env python3
"""
Tests for service wiring and the environment-built singleton.
"""

from unittest.mock import patch

import pytest

from entity_assets import dependencies
from entity_assets.config import get_settings
from entity_assets.utils.cache_invalidation import (
    FilesystemCacheInvalidator,
    HttpCacheInvalidator,
)


@pytest.fixture
def fresh_singletons(tmp_path, monkeypatch):
    """Environment-driven settings with cleared process-wide caches"""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ENTITY_ASSETS_STORAGE_ROOT", str(tmp_path / "img"))
    monkeypatch.setenv("ENTITY_ASSETS_CACHE_ROOT", str(tmp_path / "cache"))
    get_settings.cache_clear()
    dependencies.get_asset_services.cache_clear()
    yield
    get_settings.cache_clear()
    dependencies.get_asset_services.cache_clear()


@pytest.mark.integration
class TestAssetServices:
    def test_services_share_collaborators(self, settings):
        services = dependencies.AssetServices(settings)

        assert services.image_upload.repository is services.repository
        assert services.deletion.repository is services.repository
        assert services.image_upload.locks is services.locks
        assert services.deletion.locks is services.locks
        assert services.renumberer.locks is services.locks
        assert services.deletion.cache_invalidator is services.cache_invalidator

    def test_filesystem_invalidator_by_default(self, settings):
        services = dependencies.AssetServices(settings)

        assert isinstance(services.cache_invalidator, FilesystemCacheInvalidator)

    def test_http_invalidator_when_gateway_configured(self, settings):
        configured = settings.model_copy(
            update={"cache_gateway_url": "http://gateway.local/cache"}
        )

        services = dependencies.AssetServices(configured)

        assert isinstance(services.cache_invalidator, HttpCacheInvalidator)

    def test_singleton_built_from_environment(self, fresh_singletons, tmp_path):
        with patch.object(dependencies, "configure_logging") as configure:
            first = dependencies.get_asset_services()
            second = dependencies.get_asset_services()

        assert first is second
        assert first.repository.storage_root == tmp_path / "img"
        configure.assert_called_once()

    def test_dependency_getters(self, fresh_singletons):
        with patch.object(dependencies, "configure_logging"):
            services = dependencies.get_asset_services()

            assert dependencies.get_image_upload_service() is services.image_upload
            assert dependencies.get_file_upload_service() is services.file_upload
            assert dependencies.get_deletion_service() is services.deletion
            assert dependencies.get_image_service() is services.images
            assert dependencies.get_file_service() is services.files
