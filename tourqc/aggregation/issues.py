"""Issue aggregator: clusters annotation tags by scope with severity breakdowns."""

from collections.abc import Callable, Mapping, Sequence

from tourqc.db.store import EntityStore
from tourqc.models.common import IssueScope, Severity
from tourqc.models.entities import SurveyResponse
from tourqc.models.results import IssueCluster, IssueClusters, IssueDrilldown, empty_severity_counts

ALL_SCOPE_KEY = "all"

ScopeKeyFn = Callable[[SurveyResponse], str | None]


def scope_key_fn(store: EntityStore, scope: IssueScope) -> ScopeKeyFn:
    """Key function mapping a response to its scope bucket (None = unresolvable)."""
    if scope == IssueScope.ALL:
        return lambda response: ALL_SCOPE_KEY

    if scope == IssueScope.TOUR:

        def by_tour(response: SurveyResponse) -> str | None:
            tour = store.tour_for(response)
            return tour.id if tour else None

        return by_tour

    if scope == IssueScope.ITINERARY:

        def by_itinerary(response: SurveyResponse) -> str | None:
            itinerary = store.itinerary_for_response(response)
            return itinerary.id if itinerary else None

        return by_itinerary

    def by_destination(response: SurveyResponse) -> str | None:
        destination = store.destination_for_response(response)
        return destination.id if destination else None

    return by_destination


def aggregate_issues(
    store: EntityStore,
    responses: Sequence[SurveyResponse],
    scope: IssueScope = IssueScope.ALL,
) -> IssueClusters:
    """Count issue tags and their severities per scope.

    Each annotated response contributes once per distinct tag across its
    product and coordinator tags. Responses without an annotation, or whose
    scope key cannot be resolved, are skipped.

    Args:
        store: Entity store
        responses: Already-filtered response subset
        scope: Bucketing scope

    Returns:
        Mapping scope key -> issue tag -> IssueCluster
    """
    key_for = scope_key_fn(store, scope)
    counts: dict[str, dict[str, int]] = {}
    severities: dict[str, dict[str, dict[Severity, int]]] = {}

    for response in responses:
        annotation = store.annotation_for(response.id)
        if annotation is None:
            continue

        scope_key = key_for(response)
        if scope_key is None:
            continue

        scope_counts = counts.setdefault(scope_key, {})
        scope_severities = severities.setdefault(scope_key, {})
        for tag in annotation.issue_tags:
            scope_counts[tag] = scope_counts.get(tag, 0) + 1
            tag_severities = scope_severities.setdefault(tag, empty_severity_counts())
            tag_severities[annotation.severity] += 1

    return {
        scope_key: {
            tag: IssueCluster(count=count, severity_counts=severities[scope_key][tag])
            for tag, count in tag_counts.items()
        }
        for scope_key, tag_counts in counts.items()
    }


def rank_issues(clusters: Mapping[str, IssueCluster]) -> list[tuple[str, IssueCluster]]:
    """Sort tags by count descending, ties by tag name ascending."""
    return sorted(clusters.items(), key=lambda item: (-item[1].count, item[0]))


def top_issue(clusters: Mapping[str, IssueCluster] | None) -> tuple[str, IssueCluster] | None:
    """Highest-ranked tag of a scope, or None when the scope has no issues."""
    if not clusters:
        return None
    return rank_issues(clusters)[0]


def issue_drilldown(
    store: EntityStore,
    responses: Sequence[SurveyResponse],
    tag: str,
) -> IssueDrilldown:
    """Collect the responses carrying one issue tag.

    Args:
        store: Entity store
        responses: Already-filtered response subset
        tag: Issue tag to drill into

    Returns:
        IssueDrilldown with matching responses (input order), severity counts
        and the sorted ids of affected destinations
    """
    matching: list[SurveyResponse] = []
    severity_counts = empty_severity_counts()
    destination_ids: set[str] = set()

    for response in responses:
        annotation = store.annotation_for(response.id)
        if annotation is None or tag not in annotation.issue_tags:
            continue

        matching.append(response)
        severity_counts[annotation.severity] += 1

        destination = store.destination_for_response(response)
        if destination is not None:
            destination_ids.add(destination.id)

    return IssueDrilldown(
        tag=tag,
        responses=matching,
        severity_counts=severity_counts,
        affected_destination_ids=sorted(destination_ids),
    )
