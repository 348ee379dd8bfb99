"""Action/filter hooks used to decouple content mutations from their consumers.

Actions run callbacks for their side effects; filters pass a value through
each callback in turn and return the result. Callbacks may be plain
functions or coroutines, and run in ascending priority order.

    from folio.lib.hooks import hooks, COLLECTION_CHANGED

    async def log_change(collection, tags, operation):
        ...

    hooks.add_action(COLLECTION_CHANGED, log_change)
    await hooks.do_action(COLLECTION_CHANGED, "hero_slides", ["hero-slides"], "move")
"""

import asyncio
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

T = TypeVar("T")


@dataclass(order=True)
class HookHandler:
    """A registered callback and its priority."""

    priority: int
    callback: Callable = field(compare=False)

    async def call(self, *args: Any, **kwargs: Any) -> Any:
        result = self.callback(*args, **kwargs)
        if asyncio.iscoroutine(result):
            return await result
        return result


class HookRegistry:
    """Registry of action and filter callbacks keyed by hook name."""

    def __init__(self) -> None:
        self._actions: dict[str, list[HookHandler]] = defaultdict(list)
        self._filters: dict[str, list[HookHandler]] = defaultdict(list)

    def add_action(self, hook_name: str, callback: Callable[..., Any], priority: int = 10) -> None:
        """Register an action callback. Lower priorities run first."""
        self._actions[hook_name].append(HookHandler(priority=priority, callback=callback))
        self._actions[hook_name].sort()

    def add_filter(self, hook_name: str, callback: Callable[..., T], priority: int = 10) -> None:
        """Register a filter callback. Lower priorities run first."""
        self._filters[hook_name].append(HookHandler(priority=priority, callback=callback))
        self._filters[hook_name].sort()

    def remove_action(self, hook_name: str, callback: Callable[..., Any]) -> bool:
        handlers = self._actions.get(hook_name, [])
        for i, handler in enumerate(handlers):
            # Bound methods are rebuilt on each access, so compare by equality
            if handler.callback == callback:
                handlers.pop(i)
                return True
        return False

    def has_action(self, hook_name: str) -> bool:
        return bool(self._actions.get(hook_name))

    async def do_action(self, hook_name: str, *args: Any, **kwargs: Any) -> None:
        """Run every action callback registered for ``hook_name``."""
        from folio.lib.observability import span

        with span(f"hook.action:{hook_name}", hook_name=hook_name):
            for handler in list(self._actions.get(hook_name, [])):
                await handler.call(*args, **kwargs)

    async def apply_filters(self, hook_name: str, value: T, *args: Any, **kwargs: Any) -> T:
        """Thread ``value`` through every filter callback for ``hook_name``."""
        from folio.lib.observability import span

        with span(f"hook.filter:{hook_name}", hook_name=hook_name):
            for handler in list(self._filters.get(hook_name, [])):
                value = await handler.call(value, *args, **kwargs)
            return value

    def clear(self) -> None:
        """Drop every registered hook. Used by tests."""
        self._actions.clear()
        self._filters.clear()


hooks = HookRegistry()


# Actions
# Fired after any committed mutation of an ordered collection:
# callback(collection_name: str, tags: list[str], operation: str)
COLLECTION_CHANGED = "collection_changed"

# Filters
# callback(payload: dict, slide: HeroSlide) -> dict
PUBLIC_HERO_SLIDE = "public_hero_slide"
# callback(nodes: list[dict], menu: str) -> list[dict]
PUBLIC_MENU_TREE = "public_menu_tree"
