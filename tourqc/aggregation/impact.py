"""Impact aggregator: before/after deltas of corrective actions.

Impact metrics are trusted as supplied. Nothing here re-derives them from
survey responses.
"""

from collections.abc import Callable, Sequence

from tourqc.errors import ValidationError
from tourqc.models.actions import CorrectiveAction, CorrectiveActionInput, SuggestedAction
from tourqc.models.results import ActionImpact, ImpactSummary


def action_impact(action: CorrectiveAction) -> ActionImpact:
    """Compute score and below-threshold deltas (positive = improvement)."""
    metrics = action.impact_metrics
    return ActionImpact(
        action_id=action.id,
        score_delta=metrics.avg_score_after - metrics.avg_score_before,
        pct_delta=metrics.pct_below8_before - metrics.pct_below8_after,
    )


def impact_summary(
    actions: Sequence[CorrectiveAction],
    destination_id: str | None = None,
) -> ImpactSummary:
    """Mean improvement across actions, optionally for one destination.

    An empty set yields zeros, never NaN.
    """
    selected = [a for a in actions if destination_id is None or a.destination_id == destination_id]
    if not selected:
        return ImpactSummary()

    impacts = [action_impact(a) for a in selected]
    return ImpactSummary(
        count=len(impacts),
        avg_score_improvement=sum(i.score_delta for i in impacts) / len(impacts),
        avg_pct_improvement=sum(i.pct_delta for i in impacts) / len(impacts),
    )


def sort_by_implemented(actions: Sequence[CorrectiveAction]) -> list[CorrectiveAction]:
    """Newest implementation first; ties keep input order."""
    return sorted(actions, key=lambda a: a.implemented_at, reverse=True)


def build_corrective_action(
    data: CorrectiveActionInput,
    *,
    action_id: str,
    lookup_suggested: Callable[[str], SuggestedAction | None],
) -> CorrectiveAction:
    """Turn validated input into a CorrectiveAction.

    Fields omitted by the caller are taken from the originating suggested
    action, when there is one.

    Args:
        data: Structurally validated input
        action_id: Fresh unique id
        lookup_suggested: Suggested-action lookup

    Returns:
        New CorrectiveAction

    Raises:
        ValidationError: Unknown suggested action, or no destination/issue tag
    """
    suggested: SuggestedAction | None = None
    if data.suggested_action_id is not None:
        suggested = lookup_suggested(data.suggested_action_id)
        if suggested is None:
            raise ValidationError(
                f"unknown suggested action {data.suggested_action_id!r}",
                [{"loc": ("suggested_action_id",), "msg": "not found"}],
            )

    destination_id = data.destination_id or (suggested.destination_id if suggested else None)
    issue_tag = data.issue_tag or (suggested.issue_tag if suggested else None)
    itinerary_id = data.itinerary_id or (suggested.itinerary_id if suggested else None)
    owner = data.owner if data.owner is not None else (suggested.owner if suggested else "")

    missing = [
        name for name, value in (("destination_id", destination_id), ("issue_tag", issue_tag)) if not value
    ]
    if missing:
        raise ValidationError(
            f"missing required fields: {', '.join(missing)}",
            [{"loc": (name,), "msg": "field required"} for name in missing],
        )

    return CorrectiveAction(
        id=action_id,
        suggested_action_id=data.suggested_action_id,
        destination_id=destination_id,
        itinerary_id=itinerary_id,
        issue_tag=issue_tag,
        action_taken=data.action_taken,
        implemented_at=data.implemented_at,
        owner=owner,
        notes=data.notes,
        impact_metrics=data.impact_metrics,
    )
