from __future__ import annotations

import logging
from typing import Generic, Iterable, List, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar("S")


class OperationHistory(Generic[S]):
    """
    Linear undo/redo log for one operator kind.

    ``entries[0]`` is always the identity state. ``cursor`` points at the last
    active entry; entries after it can be redone until the next ``apply``,
    which discards them.
    """

    def __init__(self, identity: S, label: str = "history"):
        self._identity = identity
        self._label = label
        self._entries: List[S] = [identity]
        self._cursor = 0

    @property
    def entries(self) -> List[S]:
        return list(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)

    def active_entries(self) -> List[S]:
        return self._entries[: self._cursor + 1]

    def apply(self, state: S) -> None:
        del self._entries[self._cursor + 1:]
        self._entries.append(state)
        self._cursor = len(self._entries) - 1
        logger.debug("%s: applied entry %d", self._label, self._cursor)

    def undo(self) -> bool:
        if not self.can_undo:
            return False
        self._cursor -= 1
        logger.debug("%s: undo -> cursor %d", self._label, self._cursor)
        return True

    def redo(self) -> bool:
        if not self.can_redo:
            return False
        self._cursor += 1
        logger.debug("%s: redo -> cursor %d", self._label, self._cursor)
        return True

    def reset(self) -> None:
        self._entries = [self._identity]
        self._cursor = 0

    def replace(self, states: Iterable[S]) -> None:
        """Rebuild as identity followed by ``states``, cursor at the tail."""
        self._entries = [self._identity, *states]
        self._cursor = len(self._entries) - 1
