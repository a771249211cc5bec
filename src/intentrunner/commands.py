"""Built-in nickname intents.

name / nameLast save what just ran under a nickname, combined replays a
saved sequence, pause and continue suspend and resume that replay, and
namePage / removePageName manage saved pages.
"""

import logging

from .errors import (
    InsufficientHistory,
    IntentError,
    InvalidCount,
    NoActiveRoutine,
    NoPriorIntent,
    NothingPaused,
    UnknownNickname,
)
from .executor import RoutineExecutor, clear_paused, load_paused
from .nicknames import build_combined
from .numbers import name_to_number
from .protocol import COMBINED_INTENT, DispatchContext, InvocationRecord
from .registry import intent

logger = logging.getLogger(__name__)

# Commands that refer back to history; naming one of them is not allowed
NAMING_INTENTS = {"nicknames.name", "nicknames.nameLast", "nicknames.namePage"}


def _saved_as(record: InvocationRecord, nickname: str) -> InvocationRecord:
    """Copy ``record`` for storage under ``nickname``.

    A routine saved under a second name must pause and resume under that
    name, not the one it was first recorded with.
    """
    saved = record.copy()
    if saved.is_combined:
        saved.nickname = nickname
    return saved


@intent("nicknames.name")
async def name(ctx: DispatchContext) -> None:
    """Give the command that ran just before this one a nickname."""
    recent = ctx.runner.history.tail(2, pending=ctx.record)
    if len(recent) < 2:
        raise NoPriorIntent("No last intent")
    previous = recent[-2]
    if previous.name in NAMING_INTENTS:
        raise NoPriorIntent(f"Cannot name a {previous.name} command")
    nickname = ctx.slots["name"].lower()
    ctx.runner.nicknames.register(nickname, _saved_as(previous, nickname))


@intent("nicknames.remove")
async def remove(ctx: DispatchContext) -> None:
    """Forget a nickname."""
    nickname = ctx.slots["name"].lower()
    if nickname not in ctx.runner.nicknames:
        raise UnknownNickname(nickname)
    ctx.runner.nicknames.register(nickname, None)


@intent("nicknames.nameLast")
async def name_last(ctx: DispatchContext) -> None:
    """Save the last N commands as one routine."""
    nickname = ctx.slots["name"].lower()
    number = name_to_number(ctx.slots.get("number"))
    if number is None or number < 1:
        raise InvalidCount(ctx.slots.get("number"))

    history = ctx.runner.history.last_n(number)
    if len(history) < number:
        raise InsufficientHistory(number, len(history))

    if number == 1:
        ctx.runner.nicknames.register(nickname, _saved_as(history[0], nickname))
        return

    combined = build_combined(history, nickname)
    ctx.runner.nicknames.register(nickname, combined)
    logger.info(
        f"Created combined nickname {nickname} -> "
        + ", ".join(step.name for step in combined.sub_invocations)
    )


@intent(COMBINED_INTENT)
async def combined(ctx: DispatchContext) -> None:
    """Replay a saved routine."""
    record = ctx.record
    logger.info(f"Running a named series ({len(record.sub_invocations)}) of intents")
    routine = RoutineExecutor(ctx.runner, record.nickname, record.sub_invocations)
    await routine.run()


@intent("nicknames.pause")
async def pause(ctx: DispatchContext) -> None:
    """Stop the running routine after this step."""
    routine = ctx.parent_routine
    if routine is None:
        raise NoActiveRoutine("Pause outside of a routine")
    routine.request_pause()


@intent("nicknames.continue")
async def resume(ctx: DispatchContext) -> None:
    """Resume the paused routine from the step after the pause."""
    store = ctx.runner.store
    paused = load_paused(store)
    if paused is None:
        raise NothingPaused("No paused routine")

    try:
        record = ctx.runner.nicknames.lookup(paused.name)
    except UnknownNickname:
        # The routine was removed while paused; the marker can never resume
        clear_paused(store)
        raise

    routine = RoutineExecutor(
        ctx.runner,
        paused.name,
        record.sub_invocations,
        min(paused.next_index, len(record.sub_invocations)),
    )
    clear_paused(store)
    await routine.run()


@intent("nicknames.namePage")
async def name_page(ctx: DispatchContext) -> None:
    """Save the current page's metadata under a name."""
    if ctx.runner.page_metadata is None:
        raise IntentError(
            "No page metadata provider configured",
            "Page information is not available",
        )
    metadata = await ctx.runner.page_metadata()
    ctx.runner.page_names.register(ctx.slots["name"], metadata)


@intent("nicknames.removePageName")
async def remove_page_name(ctx: DispatchContext) -> None:
    """Forget a saved page name."""
    page_name = ctx.slots["name"]
    ctx.runner.page_names.lookup(page_name)
    ctx.runner.page_names.unregister(page_name)
