"""
Tests for the caching metadata provider.

INVARIANTS:
- Repeat lookups issue at most one provider call
- Failures are never cached
- clear() resets every region
- Concurrent misses for one key share a single provider call
"""

import asyncio
from datetime import UTC, datetime

import pytest
from factories import FakeProvider, make_artifact, make_asset, make_asset_index, make_stub

from launchmeta.models.failure import NotFoundError, ProviderError, TransportError
from launchmeta.models.version import VersionManifest
from launchmeta.services.cached_provider import (
    CachingMetadataProvider,
    version_document_key,
)


async def _settle() -> None:
    """Let spawned tasks and the fetches they start run up to their next await."""
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.fixture
def cached(fake_provider: FakeProvider) -> CachingMetadataProvider:
    return CachingMetadataProvider(fake_provider)


class TestCacheIdempotence:
    async def test_manifest_fetched_once(
        self, cached: CachingMetadataProvider, fake_provider: FakeProvider
    ) -> None:
        first = await cached.get_version_manifest()
        second = await cached.get_version_manifest()

        assert fake_provider.count("manifest") == 1
        assert first == second

    async def test_version_cached_by_id(
        self, cached: CachingMetadataProvider, fake_provider: FakeProvider
    ) -> None:
        stub = make_stub("1.12")

        first = await cached.get_version(stub)
        second = await cached.get_version(stub)
        await cached.get_version(make_stub("1.11.2"))

        assert fake_provider.count("version") == 2
        assert first == second
        assert first.id == "1.12"

    async def test_asset_list_cached_by_index_name(
        self, cached: CachingMetadataProvider, fake_provider: FakeProvider
    ) -> None:
        first = await cached.get_asset_list(make_asset_index("1.12"))
        second = await cached.get_asset_list(make_asset_index("1.12"))

        assert fake_provider.count("asset_list") == 1
        assert first == second

    async def test_raw_payloads_cached(
        self, cached: CachingMetadataProvider, fake_provider: FakeProvider
    ) -> None:
        stub = make_stub("1.12")
        index = make_asset_index()
        asset = make_asset(7)
        artifact = make_artifact("artifact")

        for _ in range(2):
            await cached.get_version_document(stub)
            await cached.get_asset_list_document(index)
            await cached.get_asset_content(asset)
            await cached.get_artifact_content(artifact)

        assert fake_provider.count("version_document") == 1
        assert fake_provider.count("asset_list_document") == 1
        assert fake_provider.count("asset") == 1
        assert fake_provider.count("artifact") == 1

    async def test_revised_version_document_refetched(
        self, cached: CachingMetadataProvider, fake_provider: FakeProvider
    ) -> None:
        """A new update time means a new document even though the id is unchanged."""
        original = make_stub("1.12")
        revised = make_stub("1.12", updated=datetime(2017, 9, 18, 8, 39, 46, tzinfo=UTC))

        await cached.get_version_document(original)
        await cached.get_version_document(revised)

        assert fake_provider.count("version_document") == 2
        assert version_document_key(original) != version_document_key(revised)

    async def test_regions_do_not_collide(
        self, cached: CachingMetadataProvider, fake_provider: FakeProvider
    ) -> None:
        stub = make_stub("1.12")
        version = await cached.get_version(stub)
        document = await cached.get_version_document(stub)

        assert version.id == "1.12"
        assert isinstance(document, bytes)
        assert fake_provider.count("version") == 1
        assert fake_provider.count("version_document") == 1


class TestNoFailureCaching:
    async def test_failed_fetch_is_retried(
        self, cached: CachingMetadataProvider, fake_provider: FakeProvider
    ) -> None:
        fake_provider.fail_next("manifest", TransportError("connection reset"))

        with pytest.raises(TransportError):
            await cached.get_version_manifest()
        manifest = await cached.get_version_manifest()

        assert fake_provider.count("manifest") == 2
        assert isinstance(manifest, VersionManifest)

    async def test_error_propagates_unchanged(
        self, cached: CachingMetadataProvider, fake_provider: FakeProvider
    ) -> None:
        error = NotFoundError("Document not found", detail="HTTP 404")
        fake_provider.fail_next("version", error)

        with pytest.raises(ProviderError) as exc_info:
            await cached.get_version(make_stub("0.0.0"))

        assert exc_info.value is error

    async def test_failure_leaves_no_trace(
        self, cached: CachingMetadataProvider, fake_provider: FakeProvider
    ) -> None:
        fake_provider.fail_next("artifact", TransportError("timed out"))

        with pytest.raises(TransportError):
            await cached.get_artifact_content(make_artifact("artifact"))

        assert cached.stats()["payloads"].misses == 1
        assert len(cached._payloads) == 0
        assert cached._in_flight == {}


class TestClear:
    async def test_clear_resets_all_regions(
        self, cached: CachingMetadataProvider, fake_provider: FakeProvider
    ) -> None:
        stub = make_stub("1.12")
        index = make_asset_index()

        async def load_everything() -> None:
            await cached.get_version_manifest()
            await cached.get_version(stub)
            await cached.get_asset_list(index)
            await cached.get_asset_content(make_asset(1))

        await load_everything()
        cached.clear()
        await load_everything()

        for operation in ("manifest", "version", "asset_list", "asset"):
            assert fake_provider.count(operation) == 2

    async def test_fetch_in_flight_during_clear_is_not_stored(
        self, cached: CachingMetadataProvider, fake_provider: FakeProvider
    ) -> None:
        fake_provider.gate = asyncio.Event()
        pending = asyncio.create_task(cached.get_version_manifest())
        await _settle()

        cached.clear()
        fake_provider.gate.set()
        await pending

        await cached.get_version_manifest()
        assert fake_provider.count("manifest") == 2


class TestLRUEviction:
    async def test_least_recent_payload_evicted(self, fake_provider: FakeProvider) -> None:
        cached = CachingMetadataProvider(fake_provider)
        assets = [make_asset(i) for i in range(257)]

        for asset in assets[:256]:
            await cached.get_asset_content(asset)
        await cached.get_asset_content(assets[0])
        await cached.get_asset_content(assets[256])

        # assets[1] was the least recently used; assets[0] was refreshed
        await cached.get_asset_content(assets[0])
        assert fake_provider.count("asset") == 257
        await cached.get_asset_content(assets[1])
        assert fake_provider.count("asset") == 258

    async def test_custom_capacity(self, fake_provider: FakeProvider) -> None:
        cached = CachingMetadataProvider(fake_provider, payload_capacity=2)

        for i in range(3):
            await cached.get_asset_content(make_asset(i))

        assert len(cached._payloads) == 2
        assert cached.stats()["payloads"].evictions == 1

    async def test_parsed_regions_unbounded(self, cached: CachingMetadataProvider) -> None:
        for i in range(300):
            await cached.get_version(make_stub(f"1.{i}"))

        assert len(cached._versions) == 300


class TestSingleflight:
    async def test_concurrent_misses_share_one_call(
        self, cached: CachingMetadataProvider, fake_provider: FakeProvider
    ) -> None:
        fake_provider.gate = asyncio.Event()
        stub = make_stub("1.12")

        tasks = [asyncio.create_task(cached.get_version(stub)) for _ in range(10)]
        await _settle()
        fake_provider.gate.set()
        results = await asyncio.gather(*tasks)

        assert fake_provider.count("version") == 1
        assert all(result is results[0] for result in results)

    async def test_different_keys_fetch_concurrently(
        self, cached: CachingMetadataProvider, fake_provider: FakeProvider
    ) -> None:
        fake_provider.gate = asyncio.Event()

        tasks = [
            asyncio.create_task(cached.get_version(make_stub(version_id)))
            for version_id in ("1.12", "1.11.2", "1.10")
        ]
        await _settle()
        # Every key reached the provider before any of them completed
        assert fake_provider.count("version") == 3

        fake_provider.gate.set()
        await asyncio.gather(*tasks)

    async def test_shared_failure_reaches_every_waiter_and_is_not_cached(
        self, cached: CachingMetadataProvider, fake_provider: FakeProvider
    ) -> None:
        fake_provider.gate = asyncio.Event()
        fake_provider.fail_next("asset_list", TransportError("timed out"))
        index = make_asset_index()

        tasks = [asyncio.create_task(cached.get_asset_list(index)) for _ in range(3)]
        await _settle()
        fake_provider.gate.set()
        results = await asyncio.gather(*tasks, return_exceptions=True)

        assert all(isinstance(result, TransportError) for result in results)
        assert fake_provider.count("asset_list") == 1

        await cached.get_asset_list(index)
        assert fake_provider.count("asset_list") == 2

    async def test_cancelled_waiter_does_not_cancel_shared_fetch(
        self, cached: CachingMetadataProvider, fake_provider: FakeProvider
    ) -> None:
        fake_provider.gate = asyncio.Event()

        first = asyncio.create_task(cached.get_version_manifest())
        second = asyncio.create_task(cached.get_version_manifest())
        await _settle()
        first.cancel()
        await _settle()
        fake_provider.gate.set()

        manifest = await second
        assert isinstance(manifest, VersionManifest)
        assert first.cancelled()
        assert fake_provider.count("manifest") == 1
