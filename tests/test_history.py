"""Tests for the intent history log."""

import pytest

from intentrunner.history import IntentHistory
from intentrunner.protocol import InvocationRecord


def make(name):
    return InvocationRecord(name=name)


class TestIntentHistory:
    @pytest.fixture
    def history(self):
        history = IntentHistory()
        for name in ["a", "b", "c"]:
            history.append(make(name))
        return history

    def test_append_keeps_call_order(self, history):
        assert [r.name for r in history] == ["a", "b", "c"]
        assert len(history) == 3

    def test_last_n_is_chronological(self, history):
        assert [r.name for r in history.last_n(2)] == ["b", "c"]

    def test_last_n_shorter_history(self, history):
        assert [r.name for r in history.last_n(10)] == ["a", "b", "c"]

    def test_last_zero_is_empty(self, history):
        assert history.last_n(0) == []

    def test_last_negative_rejected(self, history):
        with pytest.raises(ValueError):
            history.last_n(-1)

    def test_tail_with_pending_ends_with_pending(self, history):
        pending = make("nicknames.name")
        tail = history.tail(2, pending=pending)
        assert [r.name for r in tail] == ["c", "nicknames.name"]

    def test_tail_with_pending_on_empty_history(self):
        pending = make("nicknames.name")
        assert IntentHistory().tail(2, pending=pending) == [pending]
