"""Neighbour prefetching for the navigation cursor."""

import asyncio
import contextlib

import structlog

from conceptdeck.application.common.timeouts import bounded
from conceptdeck.application.notebooks.protocols.concept_shard_store import (
    ConceptShardStoreProtocol,
)
from conceptdeck.domain.common.value_objects import ConceptIdentity
from conceptdeck.domain.notebooks.entities.concept import Concept
from conceptdeck.domain.notebooks.value_objects.snapshot import ConceptSnapshot
from conceptdeck.exceptions import ConceptDeckError

logger = structlog.get_logger(__name__)


class PrefetchCache:
    """
    Concept content keyed by structural identity, valid for one snapshot generation.

    Every new snapshot clears the cache and cancels pending warm-ups: any
    mutation can change which entries are neighbours and what sits at a
    given (shard, offset).
    """

    def __init__(
        self,
        shard_store: ConceptShardStoreProtocol,
        *,
        enabled: bool = True,
        call_timeout: float | None = None,
    ) -> None:
        self.shard_store = shard_store
        self.enabled = enabled
        self.call_timeout = call_timeout
        self.generation = 0
        self._entries: dict[ConceptIdentity, Concept] = {}
        self._tasks: set[asyncio.Task[None]] = set()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identity: ConceptIdentity) -> bool:
        return identity in self._entries

    def get(self, identity: ConceptIdentity) -> Concept | None:
        return self._entries.get(identity)

    def put(self, identity: ConceptIdentity, concept: Concept, generation: int) -> None:
        """Cache content fetched for ``generation``; stale results are dropped."""
        if generation == self.generation:
            self._entries[identity] = concept

    def invalidate(self, generation: int) -> None:
        """Clear everything and cancel warm-ups; later puts must carry ``generation``."""
        self.generation = generation
        self._entries.clear()
        for task in self._tasks:
            task.cancel()

    async def load(self, identity: ConceptIdentity, generation: int) -> Concept | None:
        """
        Fetch the concept at ``identity`` from the store and cache it.

        Returns:
            The concept, or None if the shard or offset no longer exists

        Raises:
            StoreTimeoutError: If the shard read timed out
        """
        shard = await bounded(
            "get_shard", self.shard_store.get_shard(identity.shard_id), self.call_timeout
        )
        if shard is None or not shard.has_offset(identity.local_offset):
            return None
        concept = shard.concept_at(identity.local_offset)
        self.put(identity, concept, generation)
        return concept

    def warm_neighbours(self, snapshot: ConceptSnapshot, identity: ConceptIdentity) -> None:
        """Start background loads of the entries just before and after ``identity``."""
        if not self.enabled or snapshot.generation != self.generation:
            return
        for neighbour in snapshot.neighbours(identity):
            if neighbour is None or neighbour.identity in self._entries:
                continue
            task = asyncio.get_running_loop().create_task(
                self._warm(neighbour.identity, snapshot.generation)
            )
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def close(self) -> None:
        """Cancel and await every pending warm-up."""
        pending = list(self._tasks)
        self.invalidate(self.generation)
        for task in pending:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _warm(self, identity: ConceptIdentity, generation: int) -> None:
        try:
            await self.load(identity, generation)
        except ConceptDeckError as e:
            logger.warning("prefetch_failed", identity=str(identity), error=e.message)
