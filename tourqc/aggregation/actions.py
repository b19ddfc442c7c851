"""Suggested-action board."""

from collections.abc import Sequence

from tourqc.models.actions import CorrectiveAction, SuggestedAction
from tourqc.models.common import ActionStatus
from tourqc.models.results import ActionBoard


def action_board(
    actions: Sequence[SuggestedAction],
    destination_id: str | None = None,
) -> ActionBoard:
    """Sort suggested actions by urgency and count them per status.

    Args:
        actions: Suggested actions
        destination_id: Restrict to one destination (default: all)

    Returns:
        ActionBoard with actions CRITICAL first (ties by id) and a count for
        every status, zero included
    """
    selected = [a for a in actions if destination_id is None or a.destination_id == destination_id]
    selected.sort(key=lambda a: (a.priority.rank, a.id))

    status_counts = {status: 0 for status in ActionStatus}
    for action in selected:
        status_counts[action.status] += 1

    return ActionBoard(actions=selected, status_counts=status_counts)


def related_corrective_action(
    corrective_actions: Sequence[CorrectiveAction],
    suggested_action_id: str,
) -> CorrectiveAction | None:
    """Most recently implemented corrective action originating from a suggestion."""
    related = [a for a in corrective_actions if a.suggested_action_id == suggested_action_id]
    if not related:
        return None
    return max(related, key=lambda a: a.implemented_at)
