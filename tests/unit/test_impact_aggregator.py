"""Unit tests for corrective-action impact and construction."""

from datetime import date

import pytest

from tourqc.aggregation.impact import (
    action_impact,
    build_corrective_action,
    impact_summary,
    sort_by_implemented,
)
from tourqc.errors import ValidationError
from tourqc.models import (
    CorrectiveAction,
    CorrectiveActionInput,
    ImpactMetrics,
    SuggestedAction,
)


def _metrics(before: float = 6.5, after: float = 8.0) -> ImpactMetrics:
    return ImpactMetrics(
        avg_score_before=before,
        avg_score_after=after,
        pct_below8_before=60,
        pct_below8_after=20,
        tours_before_action=8,
        tours_after_action=6,
    )


def _lookup(actions: list[SuggestedAction]):
    by_id = {a.id: a for a in actions}
    return by_id.get


def test_action_impact_improvement_is_positive() -> None:
    """Test that 6.5 -> 8.0 is an improvement of 1.5."""
    action = CorrectiveAction(
        id="ca-x",
        destination_id="d1",
        issue_tag="logistics_failures",
        action_taken="New transport provider",
        implemented_at=date(2024, 12, 1),
        impact_metrics=_metrics(),
    )

    impact = action_impact(action)

    assert impact.action_id == "ca-x"
    assert abs(impact.score_delta - 1.5) < 1e-9
    assert impact.pct_delta == pytest.approx(40.0)


def test_impact_summary_empty_is_zero() -> None:
    """Test that no actions yields zeros, never NaN."""
    summary = impact_summary([])

    assert summary.count == 0
    assert summary.avg_score_improvement == 0.0
    assert summary.avg_pct_improvement == 0.0


def test_impact_summary_means(corrective_actions: list[CorrectiveAction]) -> None:
    """Test mean improvement across all recorded actions."""
    summary = impact_summary(corrective_actions)

    assert summary.count == 4
    assert summary.avg_score_improvement == pytest.approx(1.175)
    assert summary.avg_pct_improvement == pytest.approx(41.5)


def test_impact_summary_per_destination(corrective_actions: list[CorrectiveAction]) -> None:
    """Test restriction to one destination."""
    summary = impact_summary(corrective_actions, destination_id="d1")

    assert summary.count == 2
    assert summary.avg_score_improvement == pytest.approx((1.6 + 0.7) / 2)
    assert impact_summary(corrective_actions, destination_id="d404").count == 0


def test_sort_by_implemented_newest_first(corrective_actions: list[CorrectiveAction]) -> None:
    """Test newest-first ordering."""
    assert [a.id for a in sort_by_implemented(corrective_actions)] == ["ca-1", "ca-4", "ca-2", "ca-3"]


def test_build_from_explicit_fields() -> None:
    """Test construction without an originating suggestion."""
    data = CorrectiveActionInput(
        destination_id="d1",
        issue_tag="logistics_failures",
        action_taken="New transport provider",
        implemented_at=date(2024, 12, 1),
        notes="",
        impact_metrics=_metrics(),
    )

    action = build_corrective_action(data, action_id="ca-new", lookup_suggested=_lookup([]))

    assert action.id == "ca-new"
    assert action.destination_id == "d1"
    assert action.itinerary_id is None
    assert action.owner == ""
    assert action.suggested_action_id is None


def test_build_defaults_from_suggestion(suggested_actions: list[SuggestedAction]) -> None:
    """Test that omitted fields come from the suggested action."""
    data = CorrectiveActionInput(
        suggested_action_id="sa-2",
        action_taken="Replaced bus provider",
        implemented_at=date(2024, 12, 18),
        notes="Contract signed",
        impact_metrics=_metrics(),
    )

    action = build_corrective_action(
        data, action_id="ca-new", lookup_suggested=_lookup(suggested_actions)
    )

    assert action.destination_id == "d2"
    assert action.itinerary_id == "i3"
    assert action.issue_tag == "logistics_failures"
    assert action.owner == "Marco R."
    assert action.notes == "Contract signed"


def test_build_explicit_fields_override_suggestion(suggested_actions: list[SuggestedAction]) -> None:
    """Test that supplied fields win over the suggestion's values."""
    data = CorrectiveActionInput(
        suggested_action_id="sa-2",
        owner="Sofia L.",
        issue_tag="comfort_issues",
        action_taken="Replaced bus provider",
        implemented_at=date(2024, 12, 18),
        notes="",
        impact_metrics=_metrics(),
    )

    action = build_corrective_action(
        data, action_id="ca-new", lookup_suggested=_lookup(suggested_actions)
    )

    assert action.owner == "Sofia L."
    assert action.issue_tag == "comfort_issues"
    assert action.destination_id == "d2"


def test_build_unknown_suggestion_fails() -> None:
    """Test that a dangling suggested_action_id is rejected."""
    data = CorrectiveActionInput(
        suggested_action_id="sa-404",
        action_taken="Something",
        implemented_at=date(2024, 12, 1),
        notes="",
        impact_metrics=_metrics(),
    )

    with pytest.raises(ValidationError, match="unknown suggested action") as exc_info:
        build_corrective_action(data, action_id="ca-new", lookup_suggested=_lookup([]))

    assert exc_info.value.errors[0]["loc"] == ("suggested_action_id",)


def test_build_without_destination_fails() -> None:
    """Test that destination and issue tag are required without a suggestion."""
    data = CorrectiveActionInput(
        action_taken="Something",
        implemented_at=date(2024, 12, 1),
        notes="",
        impact_metrics=_metrics(),
    )

    with pytest.raises(ValidationError, match="destination_id, issue_tag"):
        build_corrective_action(data, action_id="ca-new", lookup_suggested=_lookup([]))
