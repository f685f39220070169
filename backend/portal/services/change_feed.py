import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

logger = logging.getLogger("portal")

Snapshot = list[dict]


class Subscription:
    """Replace-on-change view of one collection.

    Every change to the collection marks the subscription dirty; the next
    iteration of ``snapshots()`` re-runs the snapshot query and yields the
    full list. Intermediate changes are coalesced into one snapshot.
    """

    def __init__(self, collection: str, snapshot: Callable[[], Snapshot]):
        self.collection = collection
        self._snapshot = snapshot
        self._loop = asyncio.get_running_loop()
        self._changed = asyncio.Event()
        self._changed.set()  # first iteration yields the current list
        self._closed = False

    def notify(self):
        # Writers run in worker threads; hop back onto the subscriber's loop.
        if self._closed or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._changed.set)

    def close(self):
        self._closed = True
        if not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._changed.set)

    async def snapshots(self) -> AsyncIterator[Snapshot]:
        while not self._closed:
            await self._changed.wait()
            self._changed.clear()
            if self._closed:
                break
            yield await asyncio.to_thread(self._snapshot)


class ChangeFeed:
    def __init__(self):
        self._subscriptions: dict[str, list[Subscription]] = {}

    def publish(self, collection: str):
        for sub in list(self._subscriptions.get(collection, [])):
            sub.notify()

    def subscriber_count(self, collection: str) -> int:
        return len(self._subscriptions.get(collection, []))

    @asynccontextmanager
    async def subscribe(self, collection: str, snapshot: Callable[[], Snapshot]):
        sub = Subscription(collection, snapshot)
        self._subscriptions.setdefault(collection, []).append(sub)
        logger.debug("Subscribed to %s (%d live)", collection, self.subscriber_count(collection))
        try:
            yield sub
        finally:
            sub.close()
            subs = self._subscriptions.get(collection, [])
            if sub in subs:
                subs.remove(sub)
            if not subs:
                self._subscriptions.pop(collection, None)


change_feed = ChangeFeed()
