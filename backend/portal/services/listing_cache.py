import logging
import threading
import uuid
from collections.abc import Callable

logger = logging.getLogger("portal")

TENTATIVE_KEY = "_tentative"


class ListingCache:
    """Cached list responses keyed by the listing path they back.

    Writers either invalidate a path outright or go through
    ``apply_tentative`` / ``reconcile`` / ``rollback`` so a cached list
    reflects a write without being reloaded.

    Each path carries a version that every invalidation bumps. A load that
    started before an invalidation is returned to its caller but not cached.
    """

    def __init__(self):
        self._entries: dict[str, list[dict]] = {}
        self._versions: dict[str, int] = {}
        self._lock = threading.Lock()

    def get_or_load(self, path: str, loader: Callable[[], list[dict]]) -> list[dict]:
        with self._lock:
            cached = self._entries.get(path)
            version = self._versions.get(path, 0)
        if cached is not None:
            return list(cached)
        items = loader()
        with self._lock:
            if self._versions.get(path, 0) == version:
                self._entries.setdefault(path, list(items))
        return items

    def _drop(self, path: str):
        # Caller holds the lock.
        self._versions[path] = self._versions.get(path, 0) + 1
        if self._entries.pop(path, None) is not None:
            logger.debug("Invalidated listing %s", path)

    def invalidate(self, *paths: str):
        with self._lock:
            for path in paths:
                self._drop(path)

    def clear(self):
        with self._lock:
            for path in list(self._entries):
                self._drop(path)

    def apply_tentative(self, path: str, entry: dict) -> str | None:
        """Put ``entry`` at the head of a cached list; None if not cached."""
        token = uuid.uuid4().hex
        with self._lock:
            items = self._entries.get(path)
            if items is None:
                return None
            items.insert(0, {**entry, TENTATIVE_KEY: token})
        return token

    def reconcile(self, path: str, token: str | None, stored: dict):
        """Swap the tentative entry for ``stored``.

        Without a token the list was not cached when the write began; a load
        may have raced the write, so the path is invalidated.
        """
        with self._lock:
            items = self._entries.get(path)
            if token is None or items is None:
                self._drop(path)
                return
            for i, item in enumerate(items):
                if item.get(TENTATIVE_KEY) == token:
                    items[i] = stored
                    return
            # Tentative entry vanished (list reloaded meanwhile); force a reload.
            self._drop(path)

    def rollback(self, path: str, token: str | None):
        if token is None:
            return
        with self._lock:
            items = self._entries.get(path)
            if items is None:
                return
            self._entries[path] = [i for i in items if i.get(TENTATIVE_KEY) != token]


listing_cache = ListingCache()
