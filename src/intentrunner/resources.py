"""Values tied to the lifetime of an external resource (e.g. a browser tab)."""

import asyncio
import logging
import threading
from typing import Any, Callable, Generic, Hashable, TypeVar

from .events import EventSource, ResourceEvents

logger = logging.getLogger(__name__)

V = TypeVar("V")


class RemovalWatcher:
    """Calls back once per watched id when that resource goes away.

    Only listens to the removal event while something is being watched.
    """

    def __init__(self, on_removed: EventSource):
        self.on_removed = on_removed
        self.is_watching = False
        self.watching: dict[Hashable, Callable[[Hashable], Any]] = {}

    def watch(self, resource_id: Hashable, callback: Callable[[Hashable], Any]) -> None:
        if not self.is_watching:
            self.on_removed.add_listener(self._handle_removed)
            self.is_watching = True
        self.watching[resource_id] = callback

    def _handle_removed(self, resource_id: Hashable) -> None:
        callback = self.watching.pop(resource_id, None)
        if not self.watching and self.is_watching:
            self.on_removed.remove_listener(self._handle_removed)
            self.is_watching = False
        if callback:
            callback(resource_id)


class ResourceScopedMap(Generic[V]):
    """Mapping from resource id to value, evicted when the resource is removed.

    With ``eviction_delay`` (seconds) the value lingers that long after
    removal. A ``set`` that lands during the delay is still evicted when
    the delay runs out.
    """

    def __init__(self, events: ResourceEvents, eviction_delay: float = 0.0):
        self.watcher = RemovalWatcher(events.on_removed)
        self.eviction_delay = eviction_delay
        self._values: dict[Hashable, V] = {}

    def set(self, resource_id: Hashable, value: V) -> None:
        if resource_id not in self.watcher.watching:
            self.watcher.watch(resource_id, self._evict)
        self._values[resource_id] = value

    def get(self, resource_id: Hashable, default: Any = None) -> V | None:
        return self._values.get(resource_id, default)

    def delete(self, resource_id: Hashable) -> None:
        self._values.pop(resource_id, None)

    def __contains__(self, resource_id: Hashable) -> bool:
        return resource_id in self._values

    def __len__(self) -> int:
        return len(self._values)

    def _evict(self, resource_id: Hashable) -> None:
        if self.eviction_delay:
            self._schedule_delete(resource_id)
            logger.debug(f"Evicting {resource_id!r} in {self.eviction_delay}s")
        else:
            self.delete(resource_id)

    def _schedule_delete(self, resource_id: Hashable) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Removal delivered from synchronous code: no loop to schedule on
            timer = threading.Timer(self.eviction_delay, self.delete, args=(resource_id,))
            timer.daemon = True
            timer.start()
            return
        loop.call_later(self.eviction_delay, self.delete, resource_id)
