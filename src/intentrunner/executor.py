"""Routine executor - replays a named sequence of intents.

This is the core of routine playback. It:
1. Walks the recorded steps from a start index
2. Dispatches each step through the runner, one at a time
3. Stops at the next step boundary once a pause is requested,
   persisting where to pick up
4. Stops immediately if a step fails, leaving later steps unexecuted

Only one routine can be paused at a time. Pausing another routine
replaces the saved marker.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from .protocol import InvocationRecord
from .storage import PAUSED_ROUTINE_KEY, Store

if TYPE_CHECKING:
    from .registry import IntentRunner

logger = logging.getLogger(__name__)


class RoutineState(enum.Enum):
    READY = "ready"
    RUNNING = "running"
    COMPLETED = "completed"
    PAUSED = "paused"
    FAILED = "failed"


@dataclass
class PausedRoutineState:
    """Where a paused routine picks up again."""

    name: str
    """Nickname key of the paused routine."""

    next_index: int
    """Index of the first step not yet run."""

    def to_dict(self) -> dict:
        return {"name": self.name, "nextIndex": self.next_index}

    @classmethod
    def from_dict(cls, data: dict) -> PausedRoutineState:
        return cls(name=data["name"], next_index=int(data["nextIndex"]))


def save_paused(store: Store, state: PausedRoutineState) -> None:
    """Persist the pause marker, replacing any previous one."""
    store.set(PAUSED_ROUTINE_KEY, state.to_dict())
    logger.info(f"Saved paused routine {state.name!r} at step {state.next_index}")


def load_paused(store: Store) -> PausedRoutineState | None:
    data = store.get(PAUSED_ROUTINE_KEY)
    if data is None:
        return None
    return PausedRoutineState.from_dict(data)


def clear_paused(store: Store) -> None:
    store.remove(PAUSED_ROUTINE_KEY)


class RoutineExecutor:
    """Runs one pass over a routine's steps.

    An executor runs once. Resuming a paused routine means building a new
    executor at the saved index.
    """

    def __init__(
        self,
        runner: IntentRunner,
        name: str,
        steps: Iterable[InvocationRecord],
        start_index: int = 0,
    ):
        self.runner = runner
        self.name = name
        # Our own list: edits to the saved nickname can't reach a running routine
        self.steps: list[InvocationRecord] = list(steps)
        if not 0 <= start_index <= len(self.steps):
            raise ValueError(
                f"start_index {start_index} out of range for {len(self.steps)} steps"
            )
        self.start_index = start_index
        self.next_index = start_index
        self.stop = False
        self.state = RoutineState.READY

    def request_pause(self) -> None:
        """Ask the routine to stop before its next step and save the marker."""
        self.stop = True
        save_paused(self.runner.store, PausedRoutineState(self.name, self.next_index))

    async def run(self) -> RoutineState:
        """Run the remaining steps.

        Returns:
            COMPLETED or PAUSED. Pausing is a normal outcome.

        Raises:
            Whatever the failing step raised, after moving to FAILED.
        """
        if self.state is not RoutineState.READY:
            raise RuntimeError(f"Routine {self.name!r} already ran ({self.state.value})")

        self.state = RoutineState.RUNNING
        logger.info(
            f"Running routine {self.name!r} "
            f"(steps {self.start_index + 1}-{len(self.steps)} of {len(self.steps)})"
        )

        for index in range(self.start_index, len(self.steps)):
            if self.stop:
                return self._pause(index)

            step = self.steps[index].copy()
            self.next_index = index + 1
            try:
                await self.runner.dispatch(step, parent_routine=self)
            except Exception as e:
                self.state = RoutineState.FAILED
                logger.error(f"Routine {self.name!r} failed at step {index} ({step.name}): {e}")
                raise

        if self.stop:
            return self._pause(len(self.steps))

        self.state = RoutineState.COMPLETED
        logger.info(f"Routine {self.name!r} complete")
        return self.state

    def _pause(self, index: int) -> RoutineState:
        self.next_index = index
        save_paused(self.runner.store, PausedRoutineState(self.name, index))
        self.state = RoutineState.PAUSED
        logger.info(f"Routine {self.name!r} paused before step {index}")
        return self.state
