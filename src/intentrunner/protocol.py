"""Intent protocol - the records that flow through dispatch and the handler contract."""

from __future__ import annotations

import copy
import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

import pendulum

if TYPE_CHECKING:
    from .executor import RoutineExecutor
    from .registry import IntentRunner


COMBINED_INTENT = "nicknames.combined"


@dataclass
class InvocationRecord:
    """One executed or pending command."""

    name: str
    """Name of the intent handler, e.g. 'nicknames.name'."""

    slots: dict[str, Any] = field(default_factory=dict)
    """Command-specific arguments filled in by the recognizer."""

    parameters: dict[str, Any] = field(default_factory=dict)
    """Handler-specific configuration."""

    utterance: str = ""
    """What the user said, for display."""

    fallback: bool = False
    """True when the recognizer only found a best-effort match."""

    sub_invocations: list[InvocationRecord] = field(default_factory=list)
    """Recorded steps. Empty unless this is a combined record."""

    nickname: str | None = None
    """Set only on combined records."""

    started_at: pendulum.DateTime | None = field(default=None, compare=False, repr=False)
    finished_at: pendulum.DateTime | None = field(default=None, compare=False, repr=False)

    @property
    def is_combined(self) -> bool:
        return bool(self.sub_invocations)

    def copy(self) -> InvocationRecord:
        """Return a fresh, unstamped record with the same content."""
        return InvocationRecord(
            name=self.name,
            slots=copy.deepcopy(self.slots),
            parameters=copy.deepcopy(self.parameters),
            utterance=self.utterance,
            fallback=self.fallback,
            sub_invocations=[sub.copy() for sub in self.sub_invocations],
            nickname=self.nickname,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for storage. Timestamps are runtime-only and dropped."""
        data: dict[str, Any] = {
            "name": self.name,
            "slots": self.slots,
            "parameters": self.parameters,
            "utterance": self.utterance,
            "fallback": self.fallback,
        }
        if self.sub_invocations:
            data["subInvocations"] = [sub.to_dict() for sub in self.sub_invocations]
        if self.nickname is not None:
            data["nickname"] = self.nickname
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InvocationRecord:
        return cls(
            name=data["name"],
            slots=dict(data.get("slots") or {}),
            parameters=dict(data.get("parameters") or {}),
            utterance=data.get("utterance", ""),
            fallback=bool(data.get("fallback", False)),
            sub_invocations=[cls.from_dict(sub) for sub in data.get("subInvocations", [])],
            nickname=data.get("nickname"),
        )


class DispatchContext:
    """Context passed to intent handlers during execution.

    The parent routine is held weakly so the executor and the step it is
    running never keep each other alive, and it is never part of the record.
    """

    def __init__(
        self,
        record: InvocationRecord,
        runner: IntentRunner,
        parent_routine: RoutineExecutor | None = None,
    ):
        self.record = record
        self.runner = runner
        self._parent_ref = weakref.ref(parent_routine) if parent_routine is not None else None

    @property
    def slots(self) -> dict[str, Any]:
        return self.record.slots

    @property
    def parent_routine(self) -> RoutineExecutor | None:
        """The routine running this step, or None outside a routine."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()


class Intent(Protocol):
    """Protocol that all intent handlers must implement."""

    async def __call__(self, ctx: DispatchContext) -> None:
        """Run the intent.

        Args:
            ctx: The record being dispatched, the runner it was dispatched
                through, and the parent routine if this is a routine step.

        Raises:
            IntentError: For failures that carry a user-facing message.
        """
        ...
