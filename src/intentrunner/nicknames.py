"""Nickname and page-name registries.

Both are whole-mapping documents in the store: each change reads the
mapping, edits it, and writes it back.
"""

import logging
from typing import Any, Iterable

from .errors import UnknownNickname, UnknownPageName
from .protocol import COMBINED_INTENT, InvocationRecord
from .storage import NICKNAMES_KEY, PAGE_NAMES_KEY, Store

logger = logging.getLogger(__name__)


def build_combined(sequence: Iterable[InvocationRecord], nickname: str) -> InvocationRecord:
    """Build a combined record that replays ``sequence`` under ``nickname``.

    The steps are copied, so later changes to history never reach a
    routine that was already named.
    """
    return InvocationRecord(
        name=COMBINED_INTENT,
        slots={},
        parameters={},
        utterance=f"Combined actions named {nickname}",
        fallback=False,
        sub_invocations=[record.copy() for record in sequence],
        nickname=nickname,
    )


class NicknameRegistry:
    """Case-insensitive nickname → record mapping."""

    def __init__(self, store: Store):
        self.store = store

    def _load(self) -> dict[str, dict[str, Any]]:
        return self.store.get(NICKNAMES_KEY) or {}

    def register(self, name: str, record: InvocationRecord | None) -> None:
        """Bind ``name`` to ``record``. ``None`` removes the nickname."""
        key = name.lower()
        nicknames = self._load()
        if record is None:
            nicknames.pop(key, None)
            logger.info(f"Removed nickname: {key}")
        else:
            nicknames[key] = record.to_dict()
            logger.info(f"Registered nickname: {key} -> {record.name}")
        self.store.set(NICKNAMES_KEY, nicknames)

    def lookup(self, name: str) -> InvocationRecord:
        """Return the record stored under ``name``.

        Raises:
            UnknownNickname: If nothing is stored under that name.
        """
        data = self._load().get(name.lower())
        if data is None:
            raise UnknownNickname(name.lower())
        return InvocationRecord.from_dict(data)

    def list_all(self) -> list[str]:
        return sorted(self._load().keys())

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._load()


class PageNameRegistry:
    """Name → captured page metadata. Names are kept as given."""

    def __init__(self, store: Store):
        self.store = store

    def _load(self) -> dict[str, Any]:
        return self.store.get(PAGE_NAMES_KEY) or {}

    def register(self, name: str, metadata: dict[str, Any]) -> None:
        pages = self._load()
        pages[name] = metadata
        self.store.set(PAGE_NAMES_KEY, pages)
        logger.info(f"Registered page name: {name}")

    def unregister(self, name: str) -> None:
        pages = self._load()
        if pages.pop(name, None) is not None:
            self.store.set(PAGE_NAMES_KEY, pages)
            logger.info(f"Removed page name: {name}")

    def lookup(self, name: str) -> dict[str, Any]:
        """Raises UnknownPageName if nothing was saved under ``name``."""
        pages = self._load()
        if name not in pages:
            raise UnknownPageName(name)
        return pages[name]

    def list_all(self) -> list[str]:
        return sorted(self._load().keys())
