"""Models package - re-exports for convenience."""

from tourqc.models.actions import (
    CorrectiveAction,
    CorrectiveActionInput,
    ImpactMetrics,
    SuggestedAction,
)
from tourqc.models.common import (
    TAG_DEFINITIONS,
    ActionStatus,
    ActionType,
    Grain,
    IssueScope,
    Period,
    Priority,
    ProductLine,
    Severity,
    tag_label,
)
from tourqc.models.entities import (
    Annotation,
    AnnotationTags,
    Destination,
    Itinerary,
    SurveyComments,
    SurveyResponse,
    SurveyScores,
    Tour,
)
from tourqc.models.filters import DateRange, FilterSpec
from tourqc.models.results import (
    ActionBoard,
    ActionImpact,
    CorrectiveActionView,
    DestinationSummary,
    ImpactSummary,
    IssueCluster,
    IssueClusters,
    IssueDrilldown,
    IssueMention,
    OverviewKpis,
    SeriesPoint,
    TourSummary,
)

__all__ = [
    # Common
    "ProductLine",
    "Severity",
    "Period",
    "Grain",
    "IssueScope",
    "ActionType",
    "Priority",
    "ActionStatus",
    "TAG_DEFINITIONS",
    "tag_label",
    # Entities
    "Destination",
    "Itinerary",
    "Tour",
    "SurveyScores",
    "SurveyComments",
    "SurveyResponse",
    "AnnotationTags",
    "Annotation",
    # Actions
    "SuggestedAction",
    "ImpactMetrics",
    "CorrectiveAction",
    "CorrectiveActionInput",
    # Filters
    "DateRange",
    "FilterSpec",
    # Results
    "IssueCluster",
    "IssueClusters",
    "DestinationSummary",
    "SeriesPoint",
    "ActionImpact",
    "ImpactSummary",
    "ActionBoard",
    "IssueMention",
    "TourSummary",
    "IssueDrilldown",
    "OverviewKpis",
    "CorrectiveActionView",
]
