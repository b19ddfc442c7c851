"""Quality engine: the library interface consumed by the presentation layer.

Every read operation is a pure computation over the entity store snapshot
and explicit arguments. The only write, record_corrective_action, appends
through a single-writer repository.
"""

import logging
import time
import uuid
from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from typing import Any, TypeVar

from pydantic import ValidationError as PydanticValidationError

from tourqc.aggregation import actions as actions_agg
from tourqc.aggregation import filters, impact, issues, overview, tours, trends
from tourqc.config import Settings, get_settings
from tourqc.db.inmemory import InMemoryCorrectiveActionRepository
from tourqc.db.repositories import CorrectiveActionRepository
from tourqc.db.store import EntityStore
from tourqc.errors import ValidationError
from tourqc.models.actions import CorrectiveAction, CorrectiveActionInput, SuggestedAction
from tourqc.models.common import Grain, IssueScope, Period
from tourqc.models.entities import Annotation, Destination, Itinerary, SurveyResponse, Tour
from tourqc.models.filters import FilterSpec
from tourqc.models.results import (
    ActionBoard,
    CorrectiveActionView,
    DestinationSummary,
    ImpactSummary,
    IssueClusters,
    IssueDrilldown,
    OverviewKpis,
    SeriesPoint,
    TourSummary,
)

logger = logging.getLogger(__name__)

EnumT = TypeVar("EnumT", bound=Enum)

# Attempts at drawing an unused corrective action id
_ID_ATTEMPTS = 5


# Metrics interface (implemented by PrometheusEngineMetrics)
class EngineMetrics:
    """Interface for engine metrics."""

    def record_latency(self, operation: str, latency_ms: float) -> None:
        """Record engine operation latency."""
        pass

    def inc_validation_failure(self, kind: str) -> None:
        """Increment rejected-input counter."""
        pass

    def inc_corrective_action(self) -> None:
        """Increment recorded corrective action counter."""
        pass

    def inc_lookup_miss(self, entity: str) -> None:
        """Increment lookup miss counter."""
        pass


# Logging interface (implemented by StructuredEngineLogger)
class EngineLogger:
    """Interface for structured logging."""

    def log_call(
        self,
        operation: str,
        latency_ms: float,
        input_count: int,
        output_count: int,
    ) -> None:
        """Log a completed engine operation."""
        pass

    def log_rejection(self, operation: str, reason: str, fields: list[str] | None = None) -> None:
        """Log a rejected caller input."""
        pass


class QualityEngine:
    """Filter, aggregate and record over one entity store snapshot."""

    def __init__(
        self,
        store: EntityStore,
        *,
        corrective_actions: CorrectiveActionRepository | None = None,
        settings: Settings | None = None,
        metrics: EngineMetrics | None = None,
        logger: EngineLogger | None = None,
    ) -> None:
        """Initialize engine.

        Args:
            store: Loaded entity store
            corrective_actions: Corrective action repository (default: empty in-memory)
            settings: Engine settings (default: cached environment settings)
            metrics: Metrics recorder (optional, defaults to no-op). Also counts
                the store's lookup misses unless the store already has a hook
            logger: Structured logger (optional, defaults to no-op)
        """
        self._store = store
        self._corrective = corrective_actions or InMemoryCorrectiveActionRepository()
        self._settings = settings or get_settings()
        self._metrics = metrics or EngineMetrics()
        self._logger = logger or EngineLogger()
        self._store.bind_lookup_miss(self._metrics.inc_lookup_miss)

    @classmethod
    def from_collections(
        cls,
        *,
        destinations: Iterable[Destination] = (),
        itineraries: Iterable[Itinerary] = (),
        tours: Iterable[Tour] = (),
        responses: Iterable[SurveyResponse] = (),
        annotations: Iterable[Annotation] = (),
        suggested_actions: Iterable[SuggestedAction] = (),
        corrective_actions: Iterable[CorrectiveAction] = (),
        settings: Settings | None = None,
        metrics: EngineMetrics | None = None,
        logger: EngineLogger | None = None,
    ) -> "QualityEngine":
        """Build the store and an in-memory corrective action log, then the engine."""
        store = EntityStore(
            destinations=destinations,
            itineraries=itineraries,
            tours=tours,
            responses=responses,
            annotations=annotations,
            suggested_actions=suggested_actions,
        )
        return cls(
            store,
            corrective_actions=InMemoryCorrectiveActionRepository(corrective_actions),
            settings=settings,
            metrics=metrics,
            logger=logger,
        )

    @property
    def store(self) -> EntityStore:
        return self._store

    @property
    def settings(self) -> Settings:
        return self._settings

    # Filtering

    def filter_responses(self, spec: FilterSpec | Mapping[str, Any] | None = None) -> list[SurveyResponse]:
        """Apply a filter spec to the full response population.

        Args:
            spec: FilterSpec, or a mapping of its fields (default: FilterSpec())

        Returns:
            Ordered response subset

        Raises:
            ValidationError: If a mapping spec is malformed
        """
        start = time.monotonic()
        parsed = self._parse_filter_spec(spec)
        result = filters.filter_responses(
            self._store, parsed, self._settings.satisfaction_threshold
        )
        self._observe("filter_responses", start, len(self._store.responses), len(result))
        return result

    # Issues

    def aggregate_issues(
        self,
        responses: Sequence[SurveyResponse],
        scope: IssueScope | str = IssueScope.ALL,
    ) -> IssueClusters:
        """Cluster issue tags of a response subset by scope."""
        start = time.monotonic()
        scope = self._coerce(IssueScope, scope, "aggregate_issues")
        result = issues.aggregate_issues(self._store, responses, scope)
        self._observe("aggregate_issues", start, len(responses), len(result))
        return result

    def issue_drilldown(self, responses: Sequence[SurveyResponse], tag: str) -> IssueDrilldown:
        """Responses, severities and destinations behind one issue tag."""
        start = time.monotonic()
        result = issues.issue_drilldown(self._store, responses, tag)
        self._observe("issue_drilldown", start, len(responses), len(result.responses))
        return result

    # Trends

    def destination_summaries(
        self,
        responses: Sequence[SurveyResponse],
        period: Period | str = Period.WEEK,
        *,
        grain: Grain | str = Grain.DESTINATION,
        current_index: int | None = None,
        lookback: int | None = None,
    ) -> list[DestinationSummary]:
        """Per-destination (or per-itinerary) summaries ranked most-worsening first.

        Args:
            responses: Already-filtered response subset
            period: Bucket granularity
            grain: Group by destination or itinerary
            current_index: Current bucket (default: latest bucket with data)
            lookback: Buckets back to the previous period (default: settings)

        Returns:
            Summaries for groups with at least one response
        """
        start = time.monotonic()
        period = self._coerce(Period, period, "destination_summaries")
        grain = self._coerce(Grain, grain, "destination_summaries")
        try:
            result = trends.destination_summaries(
                self._store,
                responses,
                period,
                threshold=self._settings.satisfaction_threshold,
                epoch=self._settings.epoch_start,
                lookback=lookback if lookback is not None else self._settings.delta_lookback_periods,
                current_index=current_index,
                grain=grain,
            )
        except ValidationError as e:
            self._reject("destination_summaries", str(e))
            raise
        self._observe("destination_summaries", start, len(responses), len(result))
        return result

    def worsening_destinations(
        self,
        responses: Sequence[SurveyResponse],
        period: Period | str = Period.WEEK,
        **kwargs: Any,
    ) -> list[DestinationSummary]:
        """Destinations whose average dropped versus the previous period."""
        return trends.worsening_destinations(self.destination_summaries(responses, period, **kwargs))

    def period_series(
        self,
        destination_id: str,
        responses: Sequence[SurveyResponse],
        period: Period | str = Period.WEEK,
        periods: int | None = None,
    ) -> list[SeriesPoint]:
        """Fixed-length trend series of one destination."""
        start = time.monotonic()
        period = self._coerce(Period, period, "period_series")
        result = trends.period_series(
            self._store,
            destination_id,
            responses,
            period,
            threshold=self._settings.satisfaction_threshold,
            epoch=self._settings.epoch_start,
            periods=periods if periods is not None else self._settings.series_periods,
        )
        self._observe("period_series", start, len(responses), len(result))
        return result

    def weekly_series(self, destination_id: str, responses: Sequence[SurveyResponse]) -> list[SeriesPoint]:
        """Weekly trend series of one destination."""
        return self.period_series(destination_id, responses, Period.WEEK)

    def overview(
        self,
        responses: Sequence[SurveyResponse],
        period: Period | str = Period.WEEK,
    ) -> OverviewKpis:
        """Headline KPIs of a response subset."""
        summaries = self.destination_summaries(responses, period)
        start = time.monotonic()
        result = overview.overview_kpis(
            self._store,
            responses,
            summaries,
            threshold=self._settings.satisfaction_threshold,
            worsening_delta=self._settings.worsening_delta,
            improving_delta=self._settings.improving_delta,
            hot_issue_min_count=self._settings.hot_issue_min_count,
        )
        self._observe("overview", start, len(responses), 1)
        return result

    # Tours

    def tour_summary(self, tour_id: str) -> TourSummary | None:
        """Survey digest of one tour, or None for an unknown tour."""
        start = time.monotonic()
        result = tours.tour_summary(self._store, tour_id)
        self._observe("tour_summary", start, 1, 0 if result is None else result.response_count)
        return result

    def tour_report(self, tour_id: str) -> str | None:
        """Plain-text summary report of one tour."""
        summary = self.tour_summary(tour_id)
        if summary is None:
            return None
        return tours.format_tour_report(summary)

    # Actions

    def action_board(self, destination_id: str | None = None) -> ActionBoard:
        """Suggested actions by urgency with status counts."""
        start = time.monotonic()
        result = actions_agg.action_board(self._store.suggested_actions, destination_id)
        self._observe("action_board", start, len(self._store.suggested_actions), len(result.actions))
        return result

    def related_corrective_action(self, suggested_action_id: str) -> CorrectiveAction | None:
        """Corrective action recorded for a suggested action, if any."""
        return actions_agg.related_corrective_action(self._corrective.snapshot(), suggested_action_id)

    def corrective_actions(self, destination_id: str | None = None) -> list[CorrectiveActionView]:
        """Recorded corrective actions with their impact, newest first."""
        snapshot = self._corrective.snapshot()
        selected = [a for a in snapshot if destination_id is None or a.destination_id == destination_id]
        return [
            CorrectiveActionView(action=action, impact=impact.action_impact(action))
            for action in impact.sort_by_implemented(selected)
        ]

    def impact_summary(
        self,
        corrective_actions: Sequence[CorrectiveAction] | None = None,
        destination_id: str | None = None,
    ) -> ImpactSummary:
        """Mean improvement across corrective actions.

        Args:
            corrective_actions: Actions to summarize (default: every recorded action)
            destination_id: Restrict to one destination

        Returns:
            ImpactSummary (zeros for an empty set)
        """
        start = time.monotonic()
        actions = self._corrective.snapshot() if corrective_actions is None else corrective_actions
        result = impact.impact_summary(actions, destination_id)
        self._observe("impact_summary", start, len(actions), result.count)
        return result

    def record_corrective_action(self, data: CorrectiveActionInput | Mapping[str, Any]) -> str:
        """Validate and append a new corrective action.

        Only structural completeness and declared ranges are checked; the
        impact numbers are trusted as supplied.

        Args:
            data: CorrectiveActionInput, or a mapping of its fields

        Returns:
            Id of the new corrective action

        Raises:
            ValidationError: Missing fields, out-of-range numbers or an
                unknown suggested action
        """
        start = time.monotonic()
        if isinstance(data, CorrectiveActionInput):
            parsed = data
        else:
            try:
                parsed = CorrectiveActionInput.model_validate(data)
            except PydanticValidationError as e:
                error = ValidationError.from_pydantic(e, "corrective action")
                self._reject("record_corrective_action", str(error), error.errors)
                raise error from e

        for _ in range(_ID_ATTEMPTS):
            action_id = f"{self._settings.corrective_action_id_prefix}-{uuid.uuid4().hex[:12]}"
            if self._corrective.contains(action_id):
                continue
            try:
                action = impact.build_corrective_action(
                    parsed, action_id=action_id, lookup_suggested=self._store.get_suggested_action
                )
            except ValidationError as e:
                self._reject("record_corrective_action", str(e), e.errors)
                raise
            try:
                self._corrective.append(action)
            except ValueError:
                continue
            break
        else:
            raise RuntimeError("could not allocate a unique corrective action id")

        self._metrics.inc_corrective_action()
        self._observe("record_corrective_action", start, 1, 1)
        logger.info(f"Recorded corrective action {action.id} for destination {action.destination_id}")
        return action.id

    # Internals

    def _parse_filter_spec(self, spec: FilterSpec | Mapping[str, Any] | None) -> FilterSpec:
        if spec is None:
            return FilterSpec()
        if isinstance(spec, FilterSpec):
            return spec
        try:
            return FilterSpec.model_validate(spec)
        except PydanticValidationError as e:
            error = ValidationError.from_pydantic(e, "filter spec")
            self._reject("filter_responses", str(error), error.errors)
            raise error from e

    def _coerce(self, enum_type: type[EnumT], value: EnumT | str, operation: str) -> EnumT:
        try:
            return enum_type(value)
        except ValueError as e:
            message = f"invalid {enum_type.__name__}: {value!r}"
            self._reject(operation, message)
            raise ValidationError(message) from e

    def _reject(self, operation: str, reason: str, errors: list[dict[str, Any]] | None = None) -> None:
        fields = [".".join(str(p) for p in err.get("loc", ())) for err in errors or []]
        self._metrics.inc_validation_failure(operation)
        self._logger.log_rejection(operation, reason, fields or None)

    def _observe(self, operation: str, start: float, input_count: int, output_count: int) -> None:
        latency_ms = (time.monotonic() - start) * 1000
        self._metrics.record_latency(operation, latency_ms)
        self._logger.log_call(operation, latency_ms, input_count, output_count)
