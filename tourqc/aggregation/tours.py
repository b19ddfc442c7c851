"""Per-tour survey digest and its plain-text report."""

from tourqc.db.store import EntityStore
from tourqc.models.common import tag_label
from tourqc.models.entities import SCORE_FIELDS
from tourqc.models.results import IssueMention, TourSummary

# Categories listed in the text report, with their labels
REPORT_SCORES: tuple[tuple[str, str], ...] = (
    ("overall", "Overall"),
    ("qp", "Quality/Price"),
    ("accommodation", "Accommodation"),
    ("logistics", "Logistics"),
    ("coordinator_courtesy", "Coordinator Courtesy"),
)


def tour_summary(store: EntityStore, tour_id: str) -> TourSummary | None:
    """Summarize the survey responses of one tour.

    Args:
        store: Entity store
        tour_id: Tour to summarize

    Returns:
        TourSummary, or None if the tour does not exist
    """
    tour = store.get_tour(tour_id)
    if tour is None:
        return None

    itinerary = store.itinerary_for(tour)
    destination = store.destination_for(itinerary) if itinerary else None
    responses = store.responses_for_tour(tour.id)

    avg_scores = {name: 0.0 for name in SCORE_FIELDS}
    if responses:
        for name in SCORE_FIELDS:
            avg_scores[name] = sum(getattr(r.scores, name) for r in responses) / len(responses)

    mentions: dict[str, list[IssueMention]] = {}
    for response in responses:
        annotation = store.annotation_for(response.id)
        if annotation is None:
            continue
        for tag in annotation.issue_tags:
            mentions.setdefault(tag, []).append(
                IssueMention(
                    response_id=response.id,
                    comment=response.comments.first_non_empty(),
                    severity=annotation.severity,
                    snippet=annotation.evidence_snippets[0],
                )
            )

    return TourSummary(
        tour_id=tour.id,
        start_date=tour.start_date,
        end_date=tour.end_date,
        dmc_name=tour.dmc_name,
        coordinator_name=tour.coordinator_name,
        itinerary_name=itinerary.name if itinerary else None,
        destination_name=destination.name if destination else None,
        response_count=len(responses),
        avg_scores=avg_scores,
        mentions_by_tag=mentions,
    )


def format_tour_report(summary: TourSummary) -> str:
    """Render a tour summary as the shareable plain-text report."""
    lines = [
        "Tour Summary Report",
        f"Tour ID: {summary.tour_id}",
        f"Dates: {summary.start_date.isoformat()} to {summary.end_date.isoformat()}",
        f"Itinerary: {summary.itinerary_name or 'Unknown'}",
        f"Destination: {summary.destination_name or 'Unknown'}",
        f"DMC: {summary.dmc_name}",
        f"Coordinator: {summary.coordinator_name}",
        "",
        f"Survey Results ({summary.response_count} responses):",
    ]
    for name, label in REPORT_SCORES:
        lines.append(f"- {label}: {summary.avg_scores[name]:.1f}")

    lines.append("")
    lines.append("Key Issues:")
    ranked = sorted(summary.mentions_by_tag.items(), key=lambda item: (-len(item[1]), item[0]))
    for tag, mentions in ranked:
        lines.append(f"- {tag_label(tag)}: {len(mentions)} mentions")
    if not ranked:
        lines.append("- None")

    return "\n".join(lines)
