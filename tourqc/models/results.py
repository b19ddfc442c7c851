"""Result models - immutable aggregates returned to the presentation layer."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field

from tourqc.models.actions import CorrectiveAction, SuggestedAction
from tourqc.models.common import ActionStatus, Grain, Severity
from tourqc.models.entities import SurveyResponse


def _round_half_up(value: float, step: str) -> Decimal:
    """Round halves away from zero, as the dashboard tables display them."""
    return Decimal(value).quantize(Decimal(step), rounding=ROUND_HALF_UP)


def empty_severity_counts() -> dict[Severity, int]:
    return {severity: 0 for severity in Severity}


class IssueCluster(BaseModel):
    """Occurrences of one issue tag within a scope."""

    model_config = ConfigDict(frozen=True)

    count: int = 0
    severity_counts: dict[Severity, int] = Field(default_factory=empty_severity_counts)


# scope key -> issue tag -> cluster
IssueClusters = dict[str, dict[str, IssueCluster]]


class DestinationSummary(BaseModel):
    """Trend statistics for one destination (or itinerary at itinerary grain).

    Percentages and averages keep full precision; the *_display properties
    give the rounded values shown in tables.
    """

    model_config = ConfigDict(frozen=True)

    grain: Grain = Grain.DESTINATION
    destination_id: str
    destination_name: str
    itinerary_id: str | None = None
    itinerary_name: str | None = None
    response_count: int
    avg_overall: float
    pct_below_threshold: float
    delta: float | None = None  # None: no data in the current or previous period
    top_issue: str | None = None
    top_issue_count: int = 0

    @property
    def group_id(self) -> str:
        if self.grain == Grain.ITINERARY and self.itinerary_id is not None:
            return self.itinerary_id
        return self.destination_id

    @property
    def group_name(self) -> str:
        if self.grain == Grain.ITINERARY and self.itinerary_name is not None:
            return self.itinerary_name
        return self.destination_name

    @property
    def avg_overall_display(self) -> float:
        return float(_round_half_up(self.avg_overall, "0.1"))

    @property
    def pct_below_display(self) -> int:
        return int(_round_half_up(self.pct_below_threshold, "1"))


class SeriesPoint(BaseModel):
    """One period of a destination trend chart."""

    model_config = ConfigDict(frozen=True)

    period_label: str
    start_date: date
    response_count: int
    avg_overall: float
    pct_below_threshold: float


class ActionImpact(BaseModel):
    """Before/after deltas of one corrective action (positive = improvement)."""

    model_config = ConfigDict(frozen=True)

    action_id: str
    score_delta: float
    pct_delta: float


class ImpactSummary(BaseModel):
    """Mean improvement across a set of corrective actions."""

    model_config = ConfigDict(frozen=True)

    count: int = 0
    avg_score_improvement: float = 0.0
    avg_pct_improvement: float = 0.0


class ActionBoard(BaseModel):
    """Suggested actions sorted by urgency, with per-status counts."""

    model_config = ConfigDict(frozen=True)

    actions: list[SuggestedAction]
    status_counts: dict[ActionStatus, int]


class IssueMention(BaseModel):
    """A response comment supporting an issue tag."""

    model_config = ConfigDict(frozen=True)

    response_id: str
    comment: str
    severity: Severity
    snippet: str


class TourSummary(BaseModel):
    """Per-tour survey digest."""

    model_config = ConfigDict(frozen=True)

    tour_id: str
    start_date: date
    end_date: date
    dmc_name: str
    coordinator_name: str
    itinerary_name: str | None = None
    destination_name: str | None = None
    response_count: int
    avg_scores: dict[str, float]
    mentions_by_tag: dict[str, list[IssueMention]]


class IssueDrilldown(BaseModel):
    """Responses carrying one issue tag within a response subset."""

    model_config = ConfigDict(frozen=True)

    tag: str
    responses: list[SurveyResponse]
    severity_counts: dict[Severity, int] = Field(default_factory=empty_severity_counts)
    affected_destination_ids: list[str] = Field(default_factory=list)


class OverviewKpis(BaseModel):
    """Headline numbers for the overview page."""

    model_config = ConfigDict(frozen=True)

    response_count: int = 0
    avg_overall: float = 0.0
    pct_below_threshold: float = 0.0
    worsening_count: int = 0
    improving_count: int = 0
    top_issue: str | None = None
    hot_issue_count: int = 0


class CorrectiveActionView(BaseModel):
    """A corrective action paired with its computed impact."""

    model_config = ConfigDict(frozen=True)

    action: CorrectiveAction
    impact: ActionImpact
