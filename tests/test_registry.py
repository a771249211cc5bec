"""Tests for intent registration and dispatch."""

import pytest

from intentrunner.errors import IntentError, UnknownIntent
from intentrunner.protocol import InvocationRecord


class TestRegistration:
    def test_builtins_loaded(self, runner):
        names = runner.list_all()
        assert "nicknames.name" in names
        assert "nicknames.combined" in names
        assert "nicknames.continue" in names

    @pytest.mark.asyncio
    async def test_last_writer_wins(self, runner, recorder):
        runner.register("greet", recorder.handler("first"))
        runner.register("greet", recorder.handler("second"))

        await runner.dispatch(InvocationRecord(name="greet"))

        assert recorder.calls == ["second"]

    def test_get_unknown_intent(self, runner):
        with pytest.raises(UnknownIntent):
            runner.get("nope")


class TestDispatch:
    @pytest.mark.asyncio
    async def test_history_grows_in_call_order(self, runner, recorder):
        for name in ["a", "b", "c"]:
            runner.register(name, recorder.handler(name))

        for name in ["b", "a", "c", "a"]:
            await runner.dispatch(InvocationRecord(name=name))

        assert [r.name for r in runner.history] == ["b", "a", "c", "a"]
        assert len(runner.history) == 4

    @pytest.mark.asyncio
    async def test_dispatch_stamps_times(self, runner, recorder):
        runner.register("a", recorder.handler("a"))
        record = InvocationRecord(name="a")

        await runner.dispatch(record)

        assert record.started_at is not None
        assert record.finished_at >= record.started_at

    @pytest.mark.asyncio
    async def test_unknown_intent_not_recorded(self, runner):
        with pytest.raises(UnknownIntent):
            await runner.dispatch(InvocationRecord(name="missing"))
        assert len(runner.history) == 0

    @pytest.mark.asyncio
    async def test_handler_error_propagates_unchanged(self, runner, recorder):
        error = IntentError("boom", "Something broke")
        runner.register("bad", recorder.handler("bad", error=error))

        with pytest.raises(IntentError) as excinfo:
            await runner.dispatch(InvocationRecord(name="bad"))

        assert excinfo.value is error
        assert excinfo.value.display_message == "Something broke"
        assert len(runner.history) == 0

    @pytest.mark.asyncio
    async def test_no_parent_routine_outside_routines(self, runner):
        seen = []

        async def handler(ctx):
            seen.append(ctx.parent_routine)

        runner.register("probe", handler)
        await runner.dispatch(InvocationRecord(name="probe"))

        assert seen == [None]


class TestInvoke:
    @pytest.mark.asyncio
    async def test_success(self, runner, recorder):
        runner.register("a", recorder.handler("a"))

        outcome = await runner.invoke("a", {"x": "1"}, utterance="do a")

        assert outcome.ok
        assert outcome.display_message is None
        assert runner.history.last_n(1)[0].slots == {"x": "1"}

    @pytest.mark.asyncio
    async def test_display_message_reaches_caller(self, runner, recorder):
        runner.register("bad", recorder.handler("bad", error=IntentError("x", "Try again")))

        outcome = await runner.invoke("bad")

        assert not outcome.ok
        assert outcome.display_message == "Try again"

    @pytest.mark.asyncio
    async def test_generic_error_gets_generic_message(self, runner, recorder):
        runner.register("bad", recorder.handler("bad", error=RuntimeError("internal")))

        outcome = await runner.invoke("bad")

        assert not outcome.ok
        assert outcome.display_message == "Error: bad failed"

    @pytest.mark.asyncio
    async def test_foreign_error_with_display_message(self, runner, recorder):
        error = RuntimeError("internal")
        error.display_message = "Tab closed"
        runner.register("bad", recorder.handler("bad", error=error))

        outcome = await runner.invoke("bad")

        assert outcome.display_message == "Tab closed"

    @pytest.mark.asyncio
    async def test_unknown_intent_is_generic_failure(self, runner):
        outcome = await runner.invoke("missing")
        assert not outcome.ok
        assert outcome.display_message == "Error: missing failed"
