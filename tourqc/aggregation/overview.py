"""Overview KPIs computed from a filtered response subset."""

from collections.abc import Sequence

from tourqc.aggregation.issues import ALL_SCOPE_KEY, aggregate_issues, top_issue
from tourqc.aggregation.trends import score_stats
from tourqc.db.store import EntityStore
from tourqc.models.common import IssueScope
from tourqc.models.entities import SurveyResponse
from tourqc.models.results import DestinationSummary, OverviewKpis


def overview_kpis(
    store: EntityStore,
    responses: Sequence[SurveyResponse],
    summaries: Sequence[DestinationSummary],
    *,
    threshold: float,
    worsening_delta: float,
    improving_delta: float,
    hot_issue_min_count: int,
) -> OverviewKpis:
    """Headline numbers for a response subset.

    Args:
        store: Entity store
        responses: Already-filtered response subset
        summaries: Destination summaries of the same subset
        threshold: Satisfaction threshold
        worsening_delta: A destination is worsening when delta < -worsening_delta
        improving_delta: A destination is improving when delta > improving_delta
        hot_issue_min_count: A tag is hot when its count exceeds this value

    Returns:
        OverviewKpis (zeros for an empty subset)
    """
    avg, pct = score_stats(responses, threshold)
    clusters = aggregate_issues(store, responses, IssueScope.ALL).get(ALL_SCOPE_KEY, {})
    top = top_issue(clusters)

    return OverviewKpis(
        response_count=len(responses),
        avg_overall=avg,
        pct_below_threshold=pct,
        worsening_count=sum(1 for s in summaries if s.delta is not None and s.delta < -worsening_delta),
        improving_count=sum(1 for s in summaries if s.delta is not None and s.delta > improving_delta),
        top_issue=top[0] if top else None,
        hot_issue_count=sum(1 for c in clusters.values() if c.count > hot_issue_min_count),
    )
