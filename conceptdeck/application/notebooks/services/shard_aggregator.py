"""
Shard aggregation: one live, globally ordered view of a notebook.

The store pushes the notebook's full shard result set on every change. Each
push is turned into a brand-new ``ConceptSnapshot``; nothing is patched
incrementally, because removing one concept shifts the local offsets and
global positions of unrelated entries.
"""

import asyncio
import contextlib
from collections.abc import AsyncIterator, Callable

import structlog

from conceptdeck.application.common.result import Failure, Result, Success
from conceptdeck.application.notebooks.protocols.concept_shard_store import (
    ConceptShardStoreProtocol,
)
from conceptdeck.domain.common.value_objects import ConceptAddress, ConceptId, NotebookId
from conceptdeck.domain.notebooks.entities.concept_shard import ConceptShard
from conceptdeck.domain.notebooks.services.snapshot_builder import SnapshotBuilder
from conceptdeck.domain.notebooks.value_objects.snapshot import ConceptSnapshot, GlobalIndexEntry
from conceptdeck.exceptions import ConceptNotFoundError

logger = structlog.get_logger(__name__)

SnapshotListener = Callable[[ConceptSnapshot], None]


class SnapshotStream:
    """
    Cancellable stream of snapshots for one notebook.

    A background task pumps the store subscription. Listeners are called
    synchronously with every new snapshot, before any waiter wakes up, so a
    cursor has reconciled its position by the time ``wait_for`` returns.

    If the subscription fails the error is logged and the stream stalls at
    its last snapshot; consumers keep working against stale data and are
    never handed the fault.
    """

    def __init__(
        self, notebook_id: NotebookId, source: AsyncIterator[list[ConceptShard]]
    ) -> None:
        self.notebook_id = notebook_id
        self._source = source
        self._snapshot = ConceptSnapshot.empty(notebook_id)
        self._condition = asyncio.Condition()
        self._listeners: list[SnapshotListener] = []
        self._task: asyncio.Task[None] | None = None
        self.stalled = False
        self.closed = False

    @property
    def current(self) -> ConceptSnapshot:
        """Latest snapshot; the unloaded placeholder until the store first answers."""
        return self._snapshot

    def start(self) -> None:
        """Start pumping the subscription. Must be called from a running event loop."""
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(
                self._pump(), name=f"snapshot-stream-{self.notebook_id}"
            )

    def add_listener(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    async def wait_for(self, predicate: Callable[[ConceptSnapshot], bool]) -> ConceptSnapshot:
        """
        Wait until the current snapshot satisfies ``predicate``.

        Returns early with the current snapshot if the stream stalls or is
        closed, so callers must re-check the predicate themselves.
        """
        async with self._condition:
            await self._condition.wait_for(
                lambda: predicate(self._snapshot) or self.stalled or self.closed
            )
            return self._snapshot

    async def wait_until_loaded(self) -> ConceptSnapshot:
        return await self.wait_for(lambda snapshot: snapshot.loaded)

    async def updates(self) -> AsyncIterator[ConceptSnapshot]:
        """
        Iterate over snapshots as they arrive.

        Slow consumers only see the latest snapshot; intermediate
        generations are skipped. Iteration ends when the stream stalls or
        is closed. The unloaded placeholder is never yielded.
        """
        seen = 0
        while True:
            snapshot = await self.wait_for(lambda s: s.generation > seen)
            if snapshot.generation <= seen:
                return
            seen = snapshot.generation
            yield snapshot

    def __aiter__(self) -> AsyncIterator[ConceptSnapshot]:
        return self.updates()

    async def close(self) -> None:
        """Unsubscribe from the store and stop the pump. Safe to call twice."""
        if self.closed:
            return
        self.closed = True
        self._listeners.clear()
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        aclose = getattr(self._source, "aclose", None)
        if aclose is not None:
            await aclose()
        async with self._condition:
            self._condition.notify_all()
        logger.debug("snapshot_stream_closed", notebook_id=str(self.notebook_id))

    async def _pump(self) -> None:
        generation = self._snapshot.generation
        try:
            async for shards in self._source:
                generation += 1
                await self._publish(SnapshotBuilder.build(self.notebook_id, shards, generation))
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(
                "shard_subscription_failed",
                notebook_id=str(self.notebook_id),
                generation=self._snapshot.generation,
            )
            self.stalled = True
            async with self._condition:
                self._condition.notify_all()

    async def _publish(self, snapshot: ConceptSnapshot) -> None:
        self._snapshot = snapshot
        logger.debug(
            "snapshot_published",
            notebook_id=str(self.notebook_id),
            generation=snapshot.generation,
            total_count=snapshot.total_count,
        )
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(
                    "snapshot_listener_failed",
                    notebook_id=str(self.notebook_id),
                    generation=snapshot.generation,
                )
        async with self._condition:
            self._condition.notify_all()


class ShardAggregator:
    """Turns a notebook's shard subscription into a stream of ordered snapshots."""

    def __init__(self, shard_store: ConceptShardStoreProtocol) -> None:
        self.shard_store = shard_store

    def subscribe(self, notebook_id: NotebookId) -> SnapshotStream:
        """
        Open a live snapshot stream for a notebook.

        Must be called from a running event loop. The caller owns the stream
        and must ``close()`` it.
        """
        stream = SnapshotStream(notebook_id, self.shard_store.subscribe(notebook_id))
        stream.start()
        logger.info("subscribed_to_notebook", notebook_id=str(notebook_id))
        return stream

    @staticmethod
    def resolve(
        snapshot: ConceptSnapshot, address: ConceptAddress
    ) -> Result[GlobalIndexEntry, ConceptNotFoundError]:
        """
        Resolve a routed address against a snapshot.

        Args:
            snapshot: Snapshot to resolve against
            address: (notebook, shard, local offset) address

        Returns:
            Success with the entry, or Failure if the address does not
            resolve in this snapshot
        """
        not_found = ConceptNotFoundError(address.shard_id, address.local_offset)
        if address.notebook_id != snapshot.notebook_id:
            return Failure(not_found)
        entry = snapshot.entry_for(address.identity)
        return Success(entry) if entry is not None else Failure(not_found)

    @staticmethod
    def locate(
        snapshot: ConceptSnapshot, concept_id: ConceptId
    ) -> Result[GlobalIndexEntry, ConceptNotFoundError]:
        """Find a concept by id in a snapshot."""
        entry = snapshot.locate(concept_id)
        if entry is None:
            return Failure(ConceptNotFoundError(concept_id=concept_id))
        return Success(entry)
