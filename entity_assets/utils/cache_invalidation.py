# entity_assets/utils/cache_invalidation.py

"""
Cache Invalidation - tells the serving gateway to drop stale derivatives.

The gateway caches transformed images under the relative path of their
original, so a key is either one asset path ({type}/{shard}/{file}) or a
whole entity namespace ({type}/{shard}).

Invalidation is fire-and-forget: the filesystem is authoritative and a
missed invalidation heals on the gateway's next cache miss, so failures are
logged and never raised.
"""

import shutil
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional, Union
from urllib.parse import quote

import requests

from ..config import Settings
from ..enums import LogEmoji, LoggerName, LogSource
from ..services.logger import get_service_logger

logger = get_service_logger(LoggerName.CACHE_INVALIDATION, LogSource.CACHE)


class CacheInvalidator(ABC):
    """Outbound contract towards the serving gateway's cache."""

    @abstractmethod
    def invalidate(self, key: str) -> None:
        """
        Mark every cached derivative under a key as stale.

        Args:
            key: Relative asset path or entity folder namespace
        """

    def invalidate_many(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.invalidate(key)


class NullCacheInvalidator(CacheInvalidator):
    """Used when no gateway cache exists."""

    def invalidate(self, key: str) -> None:
        logger.debug(f"Cache invalidation skipped for {key}", emoji=LogEmoji.CACHE)


class FilesystemCacheInvalidator(CacheInvalidator):
    """
    Drops the gateway's on-disk cache entries directly.

    The gateway stores every rendition of an asset inside a folder named
    after the asset's relative path, so invalidating a key removes
    {cache_root}/{key} (folder or file).
    """

    def __init__(self, cache_root: Union[str, Path]):
        self.cache_root = Path(cache_root)

    def _cache_path(self, key: str) -> Optional[Path]:
        parts = PurePosixPath(key.replace("\\", "/").strip("/")).parts
        if not parts or ".." in parts:
            logger.warning(
                f"Refusing to invalidate cache key outside cache root: {key!r}",
                emoji=LogEmoji.SECURITY,
            )
            return None
        return self.cache_root.joinpath(*parts)

    def invalidate(self, key: str) -> None:
        target = self._cache_path(key)
        if target is None:
            return

        try:
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            elif target.exists() or target.is_symlink():
                target.unlink()
            else:
                return
        except OSError as e:
            logger.warning(
                f"Failed to invalidate cache for {key}",
                extra_context={"cache_path": str(target), "error": str(e)},
            )
            return

        logger.info(f"Invalidated cache for {key}", emoji=LogEmoji.CACHE)


class HttpCacheInvalidator(CacheInvalidator):
    """
    Asks a remote gateway to drop its cache: DELETE {base_url}/{key}.

    Connection errors and non-2xx answers are logged only.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def invalidate(self, key: str) -> None:
        url = f"{self.base_url}/{quote(key.strip('/'))}"
        try:
            response = self.session.delete(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning(
                f"Cache gateway unreachable while invalidating {key}",
                emoji=LogEmoji.NETWORK,
                extra_context={"url": url, "error": str(e)},
            )
            return

        if not 200 <= response.status_code < 300:
            logger.warning(
                f"Cache gateway answered {response.status_code} for {key}",
                emoji=LogEmoji.NETWORK,
                extra_context={"url": url},
            )
            return

        logger.info(f"Invalidated cache for {key}", emoji=LogEmoji.CACHE)


def build_cache_invalidator(settings: Settings) -> CacheInvalidator:
    """HTTP invalidator when a gateway URL is configured, on-disk otherwise"""
    if settings.cache_gateway_url:
        return HttpCacheInvalidator(
            settings.cache_gateway_url, timeout=settings.cache_request_timeout
        )
    return FilesystemCacheInvalidator(settings.cache_path)
