"""Shared pytest fixtures for all test suites.

The sample snapshot (week buckets from 2024-11-01):

    d1 Bali     i1: t1 (W0) r1=9 r2=6 | t2 (W1) r3=7 r4=8
                i2: t3 (W1) r5=5
    d2 Iceland  i3: t4 (W0) r6=8 r7=9 | t5 (W1) r8=6 r9=7
    d3 Jordan   (no itineraries)
    i4 -> unknown destination d99:  t6 (W1) r10=4
    r11=3 references unknown tour t-missing
"""

from datetime import date

import pytest

from tourqc.config import Settings
from tourqc.db.store import EntityStore
from tourqc.engine import QualityEngine
from tourqc.models import (
    ActionStatus,
    ActionType,
    Annotation,
    AnnotationTags,
    CorrectiveAction,
    Destination,
    ImpactMetrics,
    Itinerary,
    Priority,
    ProductLine,
    Severity,
    SuggestedAction,
    SurveyComments,
    SurveyResponse,
    SurveyScores,
    Tour,
)


def make_scores(overall: float, **overrides: float) -> SurveyScores:
    """Scores with every category equal to overall unless overridden."""
    values = {name: overall for name in SurveyScores.model_fields}
    values.update(overrides)
    return SurveyScores(**values)


def make_response(response_id: str, tour_id: str, overall: float, **overrides: float) -> SurveyResponse:
    """Survey response with uniform category scores."""
    return SurveyResponse(
        id=response_id,
        tour_id=tour_id,
        created_at=date(2024, 11, 1),
        scores=make_scores(overall, **overrides),
        comments=SurveyComments(
            general="Some aspects could be improved" if overall < 8 else "Great experience overall"
        ),
        domain="weroad.com",
    )


def make_annotation(
    response_id: str,
    product_tags: tuple[str, ...] = (),
    coordinator_tags: tuple[str, ...] = (),
    severity: Severity = Severity.LOW,
) -> Annotation:
    """Annotation with a single evidence snippet."""
    return Annotation(
        response_id=response_id,
        tags=AnnotationTags(product_tags=product_tags, coordinator_tags=coordinator_tags),
        severity=severity,
        confidence=0.9,
        evidence_snippets=(f"evidence for {response_id}",),
    )


def make_tour(
    tour_id: str,
    itinerary_id: str,
    start: date,
    product_line: ProductLine = ProductLine.WR,
    dmc_name: str = "Adventure DMC",
    coordinator_name: str = "Sarah M.",
) -> Tour:
    """Seven-day tour."""
    return Tour(
        id=tour_id,
        itinerary_id=itinerary_id,
        start_date=start,
        end_date=date.fromordinal(start.toordinal() + 7),
        product_line=product_line,
        dmc_name=dmc_name,
        coordinator_name=coordinator_name,
    )


def make_impact(
    before: float, after: float, pct_before: float, pct_after: float
) -> ImpactMetrics:
    """Impact metrics with fixed tour counts."""
    return ImpactMetrics(
        avg_score_before=before,
        avg_score_after=after,
        pct_below8_before=pct_before,
        pct_below8_after=pct_after,
        tours_before_action=8,
        tours_after_action=6,
    )


@pytest.fixture
def settings() -> Settings:
    """Settings pinned independently of the environment."""
    return Settings(
        _env_file=None,
        satisfaction_threshold=8.0,
        epoch_start=date(2024, 11, 1),
        series_periods=12,
        delta_lookback_periods=1,
        worsening_delta=0.2,
        improving_delta=0.2,
        hot_issue_min_count=5,
    )


@pytest.fixture
def destinations() -> list[Destination]:
    return [
        Destination(id="d1", name="Bali", country="Indonesia"),
        Destination(id="d2", name="Iceland", country="Iceland"),
        Destination(id="d3", name="Jordan", country="Jordan"),
    ]


@pytest.fixture
def itineraries() -> list[Itinerary]:
    return [
        Itinerary(id="i1", name="Bali Beach & Culture", destination_id="d1"),
        Itinerary(id="i2", name="Bali Adventure Trek", destination_id="d1"),
        Itinerary(id="i3", name="Iceland Ring Road", destination_id="d2"),
        Itinerary(id="i4", name="Orphan Route", destination_id="d99"),
    ]


@pytest.fixture
def tours() -> list[Tour]:
    week0 = date(2024, 11, 1)
    week1 = date(2024, 11, 8)
    return [
        make_tour("t1", "i1", week0),
        make_tour("t2", "i1", week1, ProductLine.WRX, "Local Connect", "Marco R."),
        make_tour("t3", "i2", week1, coordinator_name="Lisa K."),
        make_tour("t4", "i3", week0, dmc_name="Global Tours"),
        make_tour("t5", "i3", week1, ProductLine.WRX, "Global Tours", "Ahmed B."),
        make_tour("t6", "i4", week1),
    ]


@pytest.fixture
def responses() -> list[SurveyResponse]:
    return [
        make_response("r1", "t1", 9, qp=10),
        make_response("r2", "t1", 6, qp=5),
        make_response("r3", "t2", 7),
        make_response("r4", "t2", 8),
        make_response("r5", "t3", 5),
        make_response("r6", "t4", 8),
        make_response("r7", "t4", 9),
        make_response("r8", "t5", 6),
        make_response("r9", "t5", 7),
        make_response("r10", "t6", 4),
        make_response("r11", "t-missing", 3),
    ]


@pytest.fixture
def annotations() -> list[Annotation]:
    return [
        make_annotation("r2", ("poor_accommodation_quality",), severity=Severity.MEDIUM),
        make_annotation(
            "r3",
            ("logistics_failures", "poor_accommodation_quality"),
            ("weak_leadership_decision_making",),
            Severity.LOW,
        ),
        make_annotation("r5", ("cleanliness_hygiene",), severity=Severity.HIGH),
        make_annotation("r8", ("logistics_failures",), severity=Severity.HIGH),
        make_annotation("r9", ("logistics_failures",), severity=Severity.MEDIUM),
        make_annotation("r10", ("comfort_issues",), severity=Severity.LOW),
        make_annotation("r11", ("comfort_issues",), severity=Severity.HIGH),
    ]


@pytest.fixture
def suggested_actions() -> list[SuggestedAction]:
    return [
        SuggestedAction(
            id="sa-1",
            destination_id="d1",
            itinerary_id="i1",
            issue_tag="poor_accommodation_quality",
            action_type=ActionType.ACCOMMODATION_UPGRADE,
            description="Review and upgrade hotel in Ubud",
            priority=Priority.HIGH,
            status=ActionStatus.IN_PROGRESS,
            created_at=date(2024, 12, 1),
            due_date=date(2025, 1, 15),
            owner="Anna P.",
            affected_tours=8,
        ),
        SuggestedAction(
            id="sa-2",
            destination_id="d2",
            itinerary_id="i3",
            issue_tag="logistics_failures",
            action_type=ActionType.SUPPLIER_REVIEW,
            description="Replace bus transfer provider",
            priority=Priority.CRITICAL,
            status=ActionStatus.PLANNED,
            created_at=date(2024, 12, 5),
            due_date=date(2024, 12, 20),
            owner="Marco R.",
            affected_tours=12,
        ),
        SuggestedAction(
            id="sa-3",
            destination_id="d1",
            issue_tag="cleanliness_hygiene",
            action_type=ActionType.DMC_CHANGE,
            description="Switch DMC for trek accommodation",
            priority=Priority.LOW,
            status=ActionStatus.SUGGESTED,
            created_at=date(2024, 12, 8),
            due_date=date(2025, 1, 10),
            owner="Emma T.",
            affected_tours=3,
        ),
        SuggestedAction(
            id="sa-4",
            destination_id="d3",
            issue_tag="weak_leadership_decision_making",
            action_type=ActionType.COORDINATOR_TRAINING,
            priority=Priority.HIGH,
            status=ActionStatus.COMPLETED,
            created_at=date(2024, 11, 15),
            due_date=date(2024, 12, 1),
            owner="Lisa K.",
        ),
    ]


@pytest.fixture
def corrective_actions() -> list[CorrectiveAction]:
    return [
        CorrectiveAction(
            id="ca-1",
            suggested_action_id="sa-4",
            destination_id="d3",
            issue_tag="weak_leadership_decision_making",
            action_taken="Leadership workshop for coordinators",
            implemented_at=date(2024, 12, 1),
            owner="Lisa K.",
            impact_metrics=make_impact(6.8, 7.9, 65, 28),
        ),
        CorrectiveAction(
            id="ca-2",
            destination_id="d1",
            itinerary_id="i2",
            issue_tag="logistics_failures",
            action_taken="Switched to new transport provider",
            implemented_at=date(2024, 11, 20),
            owner="Sarah M.",
            impact_metrics=make_impact(6.5, 8.1, 72, 15),
        ),
        CorrectiveAction(
            id="ca-3",
            destination_id="d2",
            itinerary_id="i3",
            issue_tag="poor_accommodation_quality",
            action_taken="Upgraded accommodation to 4-star boutique hotel",
            implemented_at=date(2024, 11, 10),
            owner="Sofia L.",
            impact_metrics=make_impact(7.1, 8.4, 58, 12),
        ),
        CorrectiveAction(
            id="ca-4",
            destination_id="d1",
            itinerary_id="i1",
            issue_tag="communication_clarity_issues",
            action_taken="Pre-departure info templates and communication training",
            implemented_at=date(2024, 11, 25),
            owner="Lisa K.",
            impact_metrics=make_impact(7.3, 8.0, 48, 22),
        ),
    ]


@pytest.fixture
def store(
    destinations: list[Destination],
    itineraries: list[Itinerary],
    tours: list[Tour],
    responses: list[SurveyResponse],
    annotations: list[Annotation],
    suggested_actions: list[SuggestedAction],
) -> EntityStore:
    """Entity store over the sample snapshot."""
    return EntityStore(
        destinations=destinations,
        itineraries=itineraries,
        tours=tours,
        responses=responses,
        annotations=annotations,
        suggested_actions=suggested_actions,
    )


@pytest.fixture
def engine(
    destinations: list[Destination],
    itineraries: list[Itinerary],
    tours: list[Tour],
    responses: list[SurveyResponse],
    annotations: list[Annotation],
    suggested_actions: list[SuggestedAction],
    corrective_actions: list[CorrectiveAction],
    settings: Settings,
) -> QualityEngine:
    """Engine over the sample snapshot with no-op metrics and logging."""
    return QualityEngine.from_collections(
        destinations=destinations,
        itineraries=itineraries,
        tours=tours,
        responses=responses,
        annotations=annotations,
        suggested_actions=suggested_actions,
        corrective_actions=corrective_actions,
        settings=settings,
    )
