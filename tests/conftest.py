"""Shared fixtures for the intent runner tests."""

from __future__ import annotations

import pytest

from intentrunner.registry import IntentRunner
from intentrunner.storage import Store


class InMemoryRedis:
    """The slice of the redis client API the store uses."""

    def __init__(self):
        self.data: dict[str, str] = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
        return removed


class Recorder:
    """Builds intent handlers that log their calls in order."""

    def __init__(self):
        self.calls: list[str] = []

    def handler(self, label, error=None, on_call=None):
        async def run(ctx):
            self.calls.append(label)
            if on_call is not None:
                on_call(ctx)
            if error is not None:
                raise error

        return run


@pytest.fixture
def redis_client():
    return InMemoryRedis()


@pytest.fixture
def store(redis_client):
    return Store(client=redis_client, prefix="test:")


@pytest.fixture
def runner(store):
    runner = IntentRunner(store=store)
    runner.load_builtins()
    return runner


@pytest.fixture
def recorder():
    return Recorder()
