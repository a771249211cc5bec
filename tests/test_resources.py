"""Tests for resource-scoped values."""

import asyncio
import time

import pytest

from intentrunner.events import ResourceEvents
from intentrunner.resources import RemovalWatcher, ResourceScopedMap


@pytest.fixture
def events():
    return ResourceEvents()


def test_evicted_immediately_without_delay(events):
    values = ResourceScopedMap(events)
    values.set(7, "reader mode")

    events.on_removed.emit(7)

    assert values.get(7) is None
    assert 7 not in values


def test_other_resources_untouched(events):
    values = ResourceScopedMap(events)
    values.set(7, "a")
    values.set(8, "b")

    events.on_removed.emit(7)

    assert values.get(8) == "b"
    assert len(values) == 1


def test_get_and_delete_without_removal(events):
    values = ResourceScopedMap(events)
    values.set(1, "x")
    values.delete(1)
    assert values.get(1) is None
    assert values.get(1, "default") == "default"


@pytest.mark.asyncio
async def test_delayed_eviction(events):
    values = ResourceScopedMap(events, eviction_delay=0.05)
    values.set(7, "x")

    events.on_removed.emit(7)
    assert values.get(7) == "x"

    await asyncio.sleep(0.1)
    assert values.get(7) is None


def test_delayed_eviction_from_synchronous_removal(events):
    values = ResourceScopedMap(events, eviction_delay=0.05)
    values.set(7, "x")

    events.on_removed.emit(7)
    assert values.get(7) == "x"

    deadline = time.monotonic() + 2
    while 7 in values and time.monotonic() < deadline:
        time.sleep(0.01)
    assert values.get(7) is None


@pytest.mark.asyncio
async def test_set_during_delay_is_still_evicted(events):
    values = ResourceScopedMap(events, eviction_delay=0.05)
    values.set(7, "old")
    events.on_removed.emit(7)

    values.set(7, "new")
    await asyncio.sleep(0.1)

    assert values.get(7) is None


def test_watcher_stops_listening_when_empty(events):
    values = ResourceScopedMap(events)
    values.set(1, "x")
    assert events.on_removed.has_listener(values.watcher._handle_removed)

    events.on_removed.emit(1)
    assert not values.watcher.is_watching
    assert not events.on_removed.has_listener(values.watcher._handle_removed)

    values.set(2, "y")
    assert values.watcher.is_watching
    events.on_removed.emit(2)
    assert values.get(2) is None


def test_watcher_subscribes_once(events):
    watcher = RemovalWatcher(events.on_removed)
    removed = []
    watcher.watch(1, removed.append)
    watcher.watch(2, removed.append)

    assert len(events.on_removed._listeners) == 1

    events.on_removed.emit(1)
    events.on_removed.emit(1)
    assert removed == [1]
    assert watcher.is_watching
