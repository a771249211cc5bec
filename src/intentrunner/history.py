"""Intent history - ordered log of successfully dispatched records."""

from __future__ import annotations

from typing import Iterator

from .protocol import InvocationRecord


class IntentHistory:
    """Append-only record of what ran, in completion order.

    Lives for the process lifetime. Trimming is left to whoever owns the
    runner.
    """

    def __init__(self) -> None:
        self._records: list[InvocationRecord] = []

    def append(self, record: InvocationRecord) -> None:
        self._records.append(record)

    def last_n(self, n: int) -> list[InvocationRecord]:
        """Return the last ``n`` records in chronological order."""
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        if n == 0:
            return []
        return self._records[-n:]

    def tail(self, n: int, pending: InvocationRecord | None = None) -> list[InvocationRecord]:
        """Return the last ``n`` entries as seen from an in-flight record.

        With ``pending`` the result ends with that record, preceded by the
        last ``n - 1`` history entries, so a command can look at itself and
        what ran just before it.
        """
        if pending is None:
            return self.last_n(n)
        if n <= 0:
            return []
        return self.last_n(n - 1) + [pending]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[InvocationRecord]:
        return iter(list(self._records))
