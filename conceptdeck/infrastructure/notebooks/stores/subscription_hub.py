"""Fan-out of notebook result sets to live subscribers."""

import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator, Awaitable, Callable

import structlog

from conceptdeck.domain.common.value_objects import NotebookId
from conceptdeck.domain.notebooks.entities.concept_shard import ConceptShard

logger = structlog.get_logger(__name__)

ResultSetLoader = Callable[[NotebookId], Awaitable[list[ConceptShard]]]

# Queue item: a full result set, or the error the subscription should raise
_Event = list[ConceptShard] | BaseException


class SubscriptionHub:
    """
    Per-notebook subscriber queues.

    A store publishes the notebook's full result set after every committed
    write; each subscriber receives it on its own queue. Subscribers get the
    current result set first, so nothing committed before subscribing is
    missed.
    """

    def __init__(self, loader: ResultSetLoader) -> None:
        self._loader = loader
        self._queues: defaultdict[NotebookId, set[asyncio.Queue[_Event]]] = defaultdict(set)

    def subscriber_count(self, notebook_id: NotebookId) -> int:
        return len(self._queues.get(notebook_id, ()))

    async def subscribe(self, notebook_id: NotebookId) -> AsyncIterator[list[ConceptShard]]:
        """Yield the notebook's result set now and after every change, until closed."""
        queue: asyncio.Queue[_Event] = asyncio.Queue()
        self._queues[notebook_id].add(queue)
        logger.debug("store_subscriber_added", notebook_id=str(notebook_id))
        try:
            yield await self._loader(notebook_id)
            while True:
                event = await queue.get()
                if isinstance(event, BaseException):
                    raise event
                yield event
        finally:
            subscribers = self._queues.get(notebook_id)
            if subscribers is not None:
                subscribers.discard(queue)
                if not subscribers:
                    del self._queues[notebook_id]
            logger.debug("store_subscriber_removed", notebook_id=str(notebook_id))

    async def publish(self, notebook_id: NotebookId) -> None:
        """Load the notebook's current result set and hand it to every subscriber."""
        subscribers = self._queues.get(notebook_id)
        if not subscribers:
            return
        shards = await self._loader(notebook_id)
        for queue in list(subscribers):
            queue.put_nowait(list(shards))

    def fail(self, notebook_id: NotebookId, error: BaseException) -> None:
        """Make every current subscription of the notebook raise ``error``."""
        for queue in list(self._queues.get(notebook_id, ())):
            queue.put_nowait(error)
