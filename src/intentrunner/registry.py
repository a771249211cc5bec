"""Intent registry - maps names to handlers and dispatches records to them."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable

import pendulum

from .errors import IntentError, UnknownIntent
from .history import IntentHistory
from .nicknames import NicknameRegistry, PageNameRegistry
from .protocol import DispatchContext, Intent, InvocationRecord
from .storage import Store

if TYPE_CHECKING:
    from .executor import RoutineExecutor

logger = logging.getLogger(__name__)

TIMEZONE = os.getenv("INTENTS_TIMEZONE", "UTC")

# Handlers declared with @intent, installed by IntentRunner.load_builtins()
BUILTIN_INTENTS: dict[str, Intent] = {}


def intent(name: str) -> Callable[[Intent], Intent]:
    """Decorator to declare a built-in intent handler.

    Usage:
        @intent("nicknames.pause")
        async def pause(ctx):
            ...
    """

    def decorator(handler: Intent) -> Intent:
        BUILTIN_INTENTS[name] = handler
        logger.debug(f"Declared intent: {name}")
        return handler

    return decorator


@dataclass
class DispatchOutcome:
    """What the recognizer gets back from an invocation."""

    ok: bool
    display_message: str | None = None


class IntentRunner:
    """Owns the handler table, the history, and the name registries.

    One runner is the process-wide dispatch subsystem; everything that
    mutates history or nicknames goes through it.
    """

    def __init__(
        self,
        store: Store | None = None,
        page_metadata: Callable[[], Awaitable[dict[str, Any]]] | None = None,
    ):
        self.store = store or Store()
        self.history = IntentHistory()
        self.nicknames = NicknameRegistry(self.store)
        self.page_names = PageNameRegistry(self.store)
        self.page_metadata = page_metadata
        self._intents: dict[str, Intent] = {}

    def register(self, name: str, handler: Intent) -> None:
        """Install ``handler`` under ``name``. Re-registering replaces it."""
        if name in self._intents:
            logger.debug(f"Replacing intent: {name}")
        self._intents[name] = handler
        logger.debug(f"Registered intent: {name}")

    def load_builtins(self) -> None:
        """Import the built-in intent modules and install their handlers."""
        from . import commands  # noqa: F401

        for name, handler in BUILTIN_INTENTS.items():
            self.register(name, handler)
        logger.info(f"Loaded {len(self._intents)} intents")

    def get(self, name: str) -> Intent:
        """Get a handler by name.

        Raises:
            UnknownIntent: If no handler is registered under ``name``.
        """
        if name not in self._intents:
            available = ", ".join(sorted(self._intents.keys()))
            raise UnknownIntent(f"Unknown intent: {name}. Available: {available}")
        return self._intents[name]

    def list_all(self) -> list[str]:
        """List all registered intent names."""
        return sorted(self._intents.keys())

    async def dispatch(
        self,
        record: InvocationRecord,
        parent_routine: RoutineExecutor | None = None,
    ) -> None:
        """Run ``record`` through its handler and log it to history.

        Handler errors propagate unchanged; only successful runs are
        appended to history.
        """
        handler = self.get(record.name)
        record.started_at = pendulum.now(TIMEZONE)
        logger.debug(f"Dispatching {record.name} ({record.utterance!r})")

        await handler(DispatchContext(record, self, parent_routine))

        record.finished_at = pendulum.now(TIMEZONE)
        self.history.append(record)

    async def invoke(
        self,
        name: str,
        slots: dict[str, Any] | None = None,
        utterance: str = "",
        fallback: bool = False,
    ) -> DispatchOutcome:
        """Entry point for the recognizer.

        Never raises for handler failures: the outcome carries the message
        to show the user.
        """
        record = InvocationRecord(
            name=name,
            slots=dict(slots or {}),
            utterance=utterance,
            fallback=fallback,
        )
        return await self._run(record)

    async def invoke_nickname(self, name: str) -> DispatchOutcome:
        """Replay whatever was saved under nickname ``name``."""
        try:
            record = self.nicknames.lookup(name)
        except IntentError as e:
            return DispatchOutcome(ok=False, display_message=e.display_message)
        if record.is_combined:
            # Pauses are saved under the key the routine was invoked by
            record.nickname = name.lower()
        logger.info(f"Running nickname {name.lower()!r} -> {record.name}")
        return await self._run(record)

    async def _run(self, record: InvocationRecord) -> DispatchOutcome:
        try:
            await self.dispatch(record)
        except Exception as e:
            logger.exception(f"Intent {record.name} failed: {e}")
            # Handlers outside this package may attach display_message too
            message = getattr(e, "display_message", None)
            return DispatchOutcome(
                ok=False,
                display_message=message or f"Error: {record.name} failed",
            )
        return DispatchOutcome(ok=True)
