"""Trend/stat aggregator: per-group score summaries, period deltas and series.

Period buckets have a fixed length (7/30/90 days) counted from an epoch date.
Calendar months and quarters are approximated: a "month" is
any 30-day bucket, so bucket boundaries drift from calendar boundaries.
"""

from collections.abc import Sequence
from datetime import date, timedelta

from tourqc.aggregation.issues import aggregate_issues, top_issue
from tourqc.db.store import EntityStore
from tourqc.errors import ValidationError
from tourqc.models.common import Grain, IssueScope, Period
from tourqc.models.entities import SurveyResponse
from tourqc.models.results import DestinationSummary, SeriesPoint


def period_index(day: date, period: Period, epoch: date) -> int:
    """Bucket index of a day: floor(days since epoch / bucket length)."""
    return (day - epoch).days // period.days


def period_bounds(index: int, period: Period, epoch: date) -> tuple[date, date]:
    """Half-open [start, end) date range of a bucket."""
    start = epoch + timedelta(days=index * period.days)
    return start, start + timedelta(days=period.days)


def period_label(index: int, period: Period) -> str:
    """Display label of a bucket, e.g. W1 for the first week after the epoch."""
    return f"{period.label_prefix}{index + 1}"


def score_stats(responses: Sequence[SurveyResponse], threshold: float) -> tuple[float, float]:
    """Mean overall score and percentage below threshold (0, 0 when empty)."""
    if not responses:
        return 0.0, 0.0
    total = len(responses)
    avg = sum(r.overall for r in responses) / total
    below = sum(1 for r in responses if r.overall < threshold)
    return avg, below / total * 100


class _Group:
    """Responses of one destination or itinerary, bucketed by period."""

    def __init__(self, destination_id: str, destination_name: str) -> None:
        self.destination_id = destination_id
        self.destination_name = destination_name
        self.itinerary_id: str | None = None
        self.itinerary_name: str | None = None
        self.responses: list[SurveyResponse] = []
        self.by_bucket: dict[int, list[SurveyResponse]] = {}

    def add(self, response: SurveyResponse, bucket: int) -> None:
        self.responses.append(response)
        self.by_bucket.setdefault(bucket, []).append(response)

    @property
    def name(self) -> str:
        return self.itinerary_name if self.itinerary_name is not None else self.destination_name


def destination_summaries(
    store: EntityStore,
    responses: Sequence[SurveyResponse],
    period: Period,
    *,
    threshold: float,
    epoch: date,
    lookback: int = 1,
    current_index: int | None = None,
    grain: Grain = Grain.DESTINATION,
) -> list[DestinationSummary]:
    """Summarize scores per destination (or itinerary) with period-over-period delta.

    delta = avg(current bucket) - avg(current - lookback bucket). It is None
    when either bucket holds no responses for the group; such groups are
    listed after the ranked ones. Groups with no responses are omitted.

    Args:
        store: Entity store
        responses: Already-filtered response subset
        period: Bucket granularity
        threshold: Satisfaction threshold
        epoch: First day of bucket 0
        lookback: Number of buckets between current and previous period
        current_index: Current bucket (default: latest bucket present in responses)
        grain: Group by destination or by itinerary

    Returns:
        Summaries, defined deltas ascending (most worsening first), then
        undefined deltas by name
    """
    if lookback < 1:
        raise ValidationError(f"lookback must be >= 1, got {lookback}")

    groups: dict[str, _Group] = {}
    for response in responses:
        tour = store.tour_for(response)
        if tour is None:
            continue
        itinerary = store.itinerary_for(tour)
        if itinerary is None:
            continue
        destination = store.destination_for(itinerary)
        if destination is None:
            continue

        key = itinerary.id if grain == Grain.ITINERARY else destination.id
        group = groups.get(key)
        if group is None:
            group = _Group(destination.id, destination.name)
            if grain == Grain.ITINERARY:
                group.itinerary_id = itinerary.id
                group.itinerary_name = itinerary.name
            groups[key] = group
        group.add(response, period_index(tour.start_date, period, epoch))

    if not groups:
        return []

    if current_index is None:
        current_index = max(bucket for group in groups.values() for bucket in group.by_bucket)
    previous_index = current_index - lookback

    scope = IssueScope.ITINERARY if grain == Grain.ITINERARY else IssueScope.DESTINATION
    issues = aggregate_issues(store, responses, scope)

    summaries: list[DestinationSummary] = []
    for key, group in groups.items():
        avg, pct = score_stats(group.responses, threshold)

        delta: float | None = None
        current = group.by_bucket.get(current_index)
        previous = group.by_bucket.get(previous_index)
        if current and previous:
            delta = score_stats(current, threshold)[0] - score_stats(previous, threshold)[0]

        top = top_issue(issues.get(key))
        summaries.append(
            DestinationSummary(
                grain=grain,
                destination_id=group.destination_id,
                destination_name=group.destination_name,
                itinerary_id=group.itinerary_id,
                itinerary_name=group.itinerary_name,
                response_count=len(group.responses),
                avg_overall=avg,
                pct_below_threshold=pct,
                delta=delta,
                top_issue=top[0] if top else None,
                top_issue_count=top[1].count if top else 0,
            )
        )

    ranked = sorted(
        (s for s in summaries if s.delta is not None),
        key=lambda s: (s.delta, s.group_name, s.group_id),
    )
    unranked = sorted(
        (s for s in summaries if s.delta is None),
        key=lambda s: (s.group_name, s.group_id),
    )
    return ranked + unranked


def worsening_destinations(summaries: Sequence[DestinationSummary]) -> list[DestinationSummary]:
    """Summaries with a negative delta, most worsening first."""
    return sorted(
        (s for s in summaries if s.delta is not None and s.delta < 0),
        key=lambda s: (s.delta, s.group_name, s.group_id),
    )


def period_series(
    store: EntityStore,
    destination_id: str,
    responses: Sequence[SurveyResponse],
    period: Period,
    *,
    threshold: float,
    epoch: date,
    periods: int,
) -> list[SeriesPoint]:
    """Per-period trend of one destination for charting.

    Args:
        store: Entity store
        destination_id: Destination to chart
        responses: Already-filtered response subset
        period: Bucket granularity
        threshold: Satisfaction threshold
        epoch: First day of bucket 0
        periods: Number of buckets from the epoch

    Returns:
        Exactly `periods` points; empty buckets report zeros
    """
    destination_tours = store.tour_ids_for_destination(destination_id)
    buckets: dict[int, list[SurveyResponse]] = {}

    for response in responses:
        if response.tour_id not in destination_tours:
            continue
        tour = store.tour_for(response)
        if tour is None:
            continue
        index = period_index(tour.start_date, period, epoch)
        if 0 <= index < periods:
            buckets.setdefault(index, []).append(response)

    points: list[SeriesPoint] = []
    for index in range(periods):
        bucket = buckets.get(index, [])
        avg, pct = score_stats(bucket, threshold)
        points.append(
            SeriesPoint(
                period_label=period_label(index, period),
                start_date=period_bounds(index, period, epoch)[0],
                response_count=len(bucket),
                avg_overall=avg,
                pct_below_threshold=pct,
            )
        )
    return points
