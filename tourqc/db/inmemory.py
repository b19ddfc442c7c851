"""In-memory implementations of repository interfaces."""

import threading
from collections.abc import Iterable

from tourqc.models.actions import CorrectiveAction


class InMemoryCorrectiveActionRepository:
    """In-memory implementation of CorrectiveActionRepository.

    Appends are serialized by a lock. The published collection is an
    immutable tuple swapped in one assignment, so readers never observe a
    half-applied append.
    """

    def __init__(self, initial: Iterable[CorrectiveAction] = ()) -> None:
        self._lock = threading.Lock()
        self._actions: tuple[CorrectiveAction, ...] = ()
        self._ids: frozenset[str] = frozenset()
        for action in initial:
            self.append(action)

    def append(self, action: CorrectiveAction) -> None:
        """Append a corrective action."""
        with self._lock:
            if action.id in self._ids:
                raise ValueError(f"corrective action {action.id!r} already recorded")
            self._ids = self._ids | {action.id}
            self._actions = self._actions + (action,)

    def snapshot(self) -> tuple[CorrectiveAction, ...]:
        """Get all recorded actions."""
        return self._actions

    def contains(self, action_id: str) -> bool:
        """Check whether an action id is taken."""
        return action_id in self._ids
