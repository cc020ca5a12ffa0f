"""
Caching Metadata Provider: Memoized Access With Singleflight.

Wraps a metadata provider and serves repeat requests from memory instead of
performing another possibly expensive request.

Cache regions:
- manifest: singleton, the manifest is stable for the process lifetime
- versions: unbounded, keyed by version id
- asset_lists: unbounded, keyed by asset index name
- payloads: LRU (default 256 entries), raw bytes keyed by content identifier

INVARIANTS:
- Hit → cached value, underlying provider not called
- Miss → underlying provider called exactly once, result stored on success
- Failures propagate unchanged and are NEVER cached
- At most one underlying call in flight per (region, key); concurrent
  misses share it
- After clear(), every lookup misses, including ones whose fetch started
  before the clear
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from launchmeta.config import settings
from launchmeta.models.resource import Artifact, Asset, AssetCollection, AssetIndex
from launchmeta.models.version import Version, VersionManifest, VersionStub
from launchmeta.services.cache import (
    MISSING,
    CacheRegion,
    CacheStats,
    KeyedCache,
    LRUCache,
    SingletonCache,
)
from launchmeta.services.provider import MetadataProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

MANIFEST_KEY = "manifest"


def version_document_key(stub: VersionStub) -> str:
    """Payload key of a version document. A document can be revised without its id changing."""
    return f"version:{stub.id}@{stub.update_time.isoformat()}"


def asset_list_document_key(index: AssetIndex) -> str:
    return f"asset-index:{index.resource.hash}"


def asset_content_key(asset: Asset) -> str:
    return f"asset:{asset.hash}"


def artifact_content_key(artifact: Artifact) -> str:
    return f"artifact:{artifact.resource.hash}"


class CachingMetadataProvider(MetadataProvider):
    """
    Provides cached access to another metadata provider.

    Usage:
        provider = CachingMetadataProvider(WebMetadataProvider.official())
        manifest = await provider.get_version_manifest()
        version = await provider.get_version(manifest.latest_release)
    """

    def __init__(self, provider: MetadataProvider, payload_capacity: int | None = None) -> None:
        """
        Initialize the caching provider.

        Args:
            provider: Underlying provider that performs the requests
            payload_capacity: Maximum number of raw payloads kept.
                Defaults to settings.payload_cache_capacity.
        """
        self.provider = provider
        self._manifest: SingletonCache[str, VersionManifest] = SingletonCache("manifest")
        self._versions: KeyedCache[str, Version] = KeyedCache("versions")
        self._asset_lists: KeyedCache[str, AssetCollection] = KeyedCache("asset_lists")
        self._payloads: LRUCache[str, bytes] = LRUCache(
            "payloads",
            payload_capacity if payload_capacity is not None else settings.payload_cache_capacity,
        )
        self._in_flight: dict[tuple[str, str], asyncio.Task[Any]] = {}
        # Bumped by clear() so fetches started earlier do not repopulate
        self._generation = 0

    @property
    def _regions(self) -> tuple[CacheRegion[str, Any], ...]:
        return (self._manifest, self._versions, self._asset_lists, self._payloads)

    async def _load(
        self,
        region: CacheRegion[str, T],
        key: str,
        fetch: Callable[[], Awaitable[T]],
    ) -> T:
        """
        Serve a key from a region, fetching it on a miss.

        Concurrent misses for the same key await one shared fetch task.
        The shield keeps a caller's cancellation from cancelling the fetch
        other callers are waiting on.
        """
        cached = region.lookup(key)
        if cached is not MISSING:
            logger.debug("CACHE_HIT", extra={"region": region.name, "key": key})
            return cached

        flight_key = (region.name, key)
        task = self._in_flight.get(flight_key)
        if task is None:
            logger.debug("CACHE_MISS", extra={"region": region.name, "key": key})
            task = asyncio.ensure_future(
                self._fetch_and_store(region, key, fetch, flight_key, self._generation)
            )
            self._in_flight[flight_key] = task
        else:
            logger.debug("FETCH_JOINED", extra={"region": region.name, "key": key})

        result: T = await asyncio.shield(task)
        return result

    async def _fetch_and_store(
        self,
        region: CacheRegion[str, T],
        key: str,
        fetch: Callable[[], Awaitable[T]],
        flight_key: tuple[str, str],
        generation: int,
    ) -> T:
        try:
            value = await fetch()
        except Exception as e:
            logger.warning(
                "PROVIDER_FETCH_FAILED",
                extra={"region": region.name, "key": key, "error": type(e).__name__},
            )
            raise
        else:
            if generation == self._generation:
                region.store(key, value)
            return value
        finally:
            # Unregister before the task completes so a retry after a failure starts fresh
            if self._in_flight.get(flight_key) is asyncio.current_task():
                del self._in_flight[flight_key]

    async def get_version_manifest(self) -> VersionManifest:
        return await self._load(self._manifest, MANIFEST_KEY, self.provider.get_version_manifest)

    async def get_version(self, stub: VersionStub) -> Version:
        return await self._load(self._versions, stub.id, lambda: self.provider.get_version(stub))

    async def get_version_document(self, stub: VersionStub) -> bytes:
        return await self._load(
            self._payloads,
            version_document_key(stub),
            lambda: self.provider.get_version_document(stub),
        )

    async def get_asset_list(self, index: AssetIndex) -> AssetCollection:
        return await self._load(
            self._asset_lists,
            index.resource.name,
            lambda: self.provider.get_asset_list(index),
        )

    async def get_asset_list_document(self, index: AssetIndex) -> bytes:
        return await self._load(
            self._payloads,
            asset_list_document_key(index),
            lambda: self.provider.get_asset_list_document(index),
        )

    async def get_asset_content(self, asset: Asset) -> bytes:
        return await self._load(
            self._payloads,
            asset_content_key(asset),
            lambda: self.provider.get_asset_content(asset),
        )

    async def get_artifact_content(self, artifact: Artifact) -> bytes:
        return await self._load(
            self._payloads,
            artifact_content_key(artifact),
            lambda: self.provider.get_artifact_content(artifact),
        )

    def clear(self) -> None:
        """
        Remove all cached data.

        Any new request performs the underlying request again. Fetches
        already in flight still complete for their callers but are not stored.
        """
        self._generation += 1
        self._in_flight.clear()
        for region in self._regions:
            region.clear()
        logger.info("CACHE_CLEARED", extra={"generation": self._generation})

    def stats(self) -> dict[str, CacheStats]:
        """Hit, miss and eviction counters per region."""
        return {region.name: region.stats() for region in self._regions}
