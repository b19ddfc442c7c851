"""Repository protocol interfaces for runtime-appended records."""

from typing import Protocol

from tourqc.models.actions import CorrectiveAction


class CorrectiveActionRepository(Protocol):
    """Append-only store of corrective actions."""

    def append(self, action: CorrectiveAction) -> None:
        """Append a fully constructed corrective action.

        Args:
            action: Corrective action with a unique id

        Raises:
            ValueError: If the id is already taken
        """
        ...

    def snapshot(self) -> tuple[CorrectiveAction, ...]:
        """Get an immutable view of all recorded actions, in append order.

        Returns:
            Tuple of corrective actions
        """
        ...

    def contains(self, action_id: str) -> bool:
        """Check whether an action id is already taken.

        Args:
            action_id: Corrective action id

        Returns:
            True if recorded
        """
        ...
