"""Process-wide cache of public ordered views.

Public endpoints render hero slides, menus and albums from this cache.
Entries are keyed by the cache tag of the scope they were built from
(``hero-slides``, ``menu:main``, ``album:<id>``) and dropped when the
``collection_changed`` action reports a mutation of that scope.

The cache is created empty and only starts invalidating once
:func:`register_cache_invalidation` has been called, which the app factory
does on startup.
"""

import logging
from typing import Any, Awaitable, Callable, Iterable

from folio.lib.hooks import COLLECTION_CHANGED, HookRegistry, hooks

logger = logging.getLogger(__name__)


class ViewCache:
    """Tag-keyed in-memory cache for rendered views."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._entries: dict[str, Any] = {}
        # Bumped on every invalidation of a tag; loads that straddle a bump are not stored
        self._generations: dict[str, int] = {}

    def __contains__(self, tag: str) -> bool:
        return tag in self._entries

    def get(self, tag: str, default: Any = None) -> Any:
        return self._entries.get(tag, default)

    def set(self, tag: str, value: Any) -> None:
        if self.enabled:
            self._entries[tag] = value

    async def get_or_load(self, tag: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached view for ``tag``, building it with ``loader`` on a miss."""
        if self.enabled and tag in self._entries:
            return self._entries[tag]
        generation = self._generations.get(tag, 0)
        value = await loader()
        if self._generations.get(tag, 0) == generation:
            self.set(tag, value)
        return value

    def invalidate(self, tags: Iterable[str]) -> None:
        for tag in tags:
            self._generations[tag] = self._generations.get(tag, 0) + 1
            if self._entries.pop(tag, None) is not None:
                logger.debug("Invalidated cached view %s", tag)

    def clear(self) -> None:
        self._entries.clear()

    async def handle_collection_changed(self, collection: str, tags: list[str], operation: str) -> None:
        """Action callback for ``collection_changed``."""
        self.invalidate(tags)


view_cache = ViewCache()


def register_cache_invalidation(registry: HookRegistry = hooks, cache: ViewCache = view_cache) -> None:
    """Subscribe ``cache`` to collection changes. Safe to call more than once."""
    registry.remove_action(COLLECTION_CHANGED, cache.handle_collection_changed)
    registry.add_action(COLLECTION_CHANGED, cache.handle_collection_changed, priority=5)
