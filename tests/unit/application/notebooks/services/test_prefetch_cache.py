"""Tests for PrefetchCache."""

import asyncio
from uuid import uuid4

import pytest

from conceptdeck.application.notebooks.services import PrefetchCache
from conceptdeck.domain.common.value_objects import ConceptIdentity, ShardId
from conceptdeck.domain.notebooks.entities import Concept, ConceptShard
from conceptdeck.domain.notebooks.services import SnapshotBuilder
from conceptdeck.exceptions import StoreTimeoutError
from conceptdeck.infrastructure.notebooks.stores import InMemoryShardStore


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


class TestPrefetchCacheEntries:
    def test_put_for_current_generation(self, shard_store: InMemoryShardStore) -> None:
        cache = PrefetchCache(shard_store)
        identity = ConceptIdentity(ShardId(uuid4()), 0)
        concept = Concept.create("Apple", "A fruit")

        cache.put(identity, concept, generation=0)

        assert cache.get(identity) == concept
        assert identity in cache

    def test_put_for_stale_generation_is_dropped(self, shard_store: InMemoryShardStore) -> None:
        cache = PrefetchCache(shard_store)
        cache.invalidate(generation=2)
        identity = ConceptIdentity(ShardId(uuid4()), 0)

        cache.put(identity, Concept.create("Apple", "A fruit"), generation=1)

        assert cache.get(identity) is None

    def test_invalidate_clears_everything(self, shard_store: InMemoryShardStore) -> None:
        cache = PrefetchCache(shard_store)
        for offset in range(3):
            cache.put(ConceptIdentity(ShardId(uuid4()), offset), Concept.create("A", "B"), 0)

        cache.invalidate(generation=1)

        assert len(cache) == 0
        assert cache.generation == 1


class TestPrefetchCacheLoading:
    @pytest.mark.asyncio
    async def test_load_reads_the_shard_and_caches(
        self, shard_store: InMemoryShardStore, notebook, seed_shards
    ) -> None:
        (shard_id,) = await seed_shards(["Apple", "Banana"])
        cache = PrefetchCache(shard_store)
        identity = ConceptIdentity(shard_id, 1)

        concept = await cache.load(identity, generation=0)

        assert concept.term == "Banana"
        assert cache.get(identity) == concept

    @pytest.mark.asyncio
    async def test_load_of_vanished_offset_is_none(
        self, shard_store: InMemoryShardStore, seed_shards
    ) -> None:
        (shard_id,) = await seed_shards(["Apple"])
        cache = PrefetchCache(shard_store)

        assert await cache.load(ConceptIdentity(shard_id, 4), generation=0) is None
        assert await cache.load(ConceptIdentity(ShardId(uuid4()), 0), generation=0) is None

    @pytest.mark.asyncio
    async def test_load_times_out(
        self, shard_store: InMemoryShardStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        async def never(_shard_id):
            await asyncio.Event().wait()

        monkeypatch.setattr(shard_store, "get_shard", never)
        cache = PrefetchCache(shard_store, call_timeout=0.01)

        with pytest.raises(StoreTimeoutError):
            await cache.load(ConceptIdentity(ShardId(uuid4()), 0), generation=0)


class TestPrefetchCacheWarming:
    def _snapshot(self, shard: ConceptShard):
        return SnapshotBuilder.build(shard.notebook_id, [shard], generation=1)

    @pytest.mark.asyncio
    async def test_warms_previous_and_next_entries(
        self, shard_store: InMemoryShardStore, notebook, seed_shards
    ) -> None:
        (shard_id,) = await seed_shards(["A", "B", "C", "D"])
        shard = await shard_store.get_shard(shard_id)
        snapshot = self._snapshot(shard)
        cache = PrefetchCache(shard_store)
        cache.invalidate(snapshot.generation)

        cache.warm_neighbours(snapshot, shard.identity_of(1))
        await _settle()

        assert len(cache) == 2
        assert shard.identity_of(0) in cache
        assert shard.identity_of(2) in cache

    @pytest.mark.asyncio
    async def test_disabled_cache_does_not_warm(
        self, shard_store: InMemoryShardStore, seed_shards
    ) -> None:
        (shard_id,) = await seed_shards(["A", "B"])
        shard = await shard_store.get_shard(shard_id)
        snapshot = self._snapshot(shard)
        cache = PrefetchCache(shard_store, enabled=False)
        cache.invalidate(snapshot.generation)

        cache.warm_neighbours(snapshot, shard.identity_of(0))
        await _settle()

        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_invalidate_drops_in_flight_warmups(
        self, shard_store: InMemoryShardStore, seed_shards, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (shard_id,) = await seed_shards(["A", "B"])
        shard = await shard_store.get_shard(shard_id)
        snapshot = self._snapshot(shard)
        gate = asyncio.Event()
        real_get_shard = shard_store.get_shard

        async def gated(requested):
            await gate.wait()
            return await real_get_shard(requested)

        monkeypatch.setattr(shard_store, "get_shard", gated)
        cache = PrefetchCache(shard_store)
        cache.invalidate(snapshot.generation)
        cache.warm_neighbours(snapshot, shard.identity_of(0))
        await _settle()

        cache.invalidate(snapshot.generation + 1)
        gate.set()
        await _settle()

        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_close_awaits_pending_warmups(
        self, shard_store: InMemoryShardStore, seed_shards, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (shard_id,) = await seed_shards(["A", "B"])
        shard = await shard_store.get_shard(shard_id)
        snapshot = self._snapshot(shard)

        async def never(_shard_id):
            await asyncio.Event().wait()

        monkeypatch.setattr(shard_store, "get_shard", never)
        cache = PrefetchCache(shard_store)
        cache.invalidate(snapshot.generation)
        cache.warm_neighbours(snapshot, shard.identity_of(0))
        await _settle()

        await asyncio.wait_for(cache.close(), 1)

        assert len(cache) == 0
