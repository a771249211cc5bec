"""Lifecycle events and waiting on them.

``EventSource`` has the same add/remove listener shape as the browser's
tab events, so code written against it works with either.
"""

import asyncio
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventSource:
    """A single event with listeners, optionally filtered by resource id."""

    def __init__(self, name: str = "event"):
        self.name = name
        self._listeners: list[tuple[Listener, dict | None]] = []

    def add_listener(self, callback: Listener, event_filter: dict | None = None) -> None:
        self._listeners.append((callback, event_filter))

    def remove_listener(self, callback: Listener, event_filter: dict | None = None) -> None:
        try:
            self._listeners.remove((callback, event_filter))
        except ValueError:
            logger.debug(f"{self.name}: listener was not registered")

    def has_listener(self, callback: Listener) -> bool:
        return any(cb == callback for cb, _ in self._listeners)

    def emit(self, *args: Any) -> None:
        """Deliver an event. The first argument is the resource id."""
        for callback, event_filter in list(self._listeners):
            wanted = (event_filter or {}).get("resource_id")
            if wanted is not None and args and args[0] != wanted:
                continue
            callback(*args)


class ResourceEvents:
    """Lifecycle events for one kind of external resource (e.g. tabs).

    on_updated listeners get ``(resource_id, change_info, snapshot)``;
    on_removed listeners get ``(resource_id,)``.
    """

    def __init__(self) -> None:
        self.on_updated = EventSource("updated")
        self.on_removed = EventSource("removed")


async def wait_once(
    subscribe: Callable[[Listener], Any],
    unsubscribe: Callable[[Listener], Any],
    predicate: Callable[..., bool],
) -> tuple:
    """Wait for the first event matching ``predicate``.

    Returns the matching event's arguments. The listener is removed
    exactly once: on the match, when the predicate raises, or when the
    wait is cancelled. If ``subscribe`` raises, so does this.
    """
    future = asyncio.get_running_loop().create_future()
    subscribed = False

    def release() -> None:
        nonlocal subscribed
        if subscribed:
            subscribed = False
            unsubscribe(listener)

    def listener(*args: Any) -> None:
        if future.done():
            return
        try:
            matched = predicate(*args)
        except Exception as e:
            release()
            future.set_exception(e)
            return
        if matched:
            release()
            future.set_result(args)

    subscribe(listener)
    subscribed = True
    try:
        return await future
    finally:
        release()


async def wait_for_update(
    events: ResourceEvents,
    resource_id: Any,
    predicate: Callable[[Any], bool],
) -> Any:
    """Wait until ``resource_id`` reports an update whose snapshot matches.

    Returns the snapshot, e.g. a tab once its URL is the one we loaded.
    """
    event_filter = {"resource_id": resource_id}
    _, _, snapshot = await wait_once(
        lambda cb: events.on_updated.add_listener(cb, event_filter),
        lambda cb: events.on_updated.remove_listener(cb, event_filter),
        lambda _id, _change, snap: predicate(snap),
    )
    return snapshot
