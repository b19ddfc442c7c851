"""Filter engine: the single normalization point for response subsets."""

from collections.abc import Callable, Sequence

from tourqc.db.store import EntityStore
from tourqc.models.entities import SurveyResponse, Tour
from tourqc.models.filters import FilterSpec

TourPredicate = Callable[[Tour], bool]


def is_below_threshold(response: SurveyResponse, threshold: float) -> bool:
    """Whether a response's overall score is below the satisfaction threshold."""
    return response.overall < threshold


def _tour_predicates(store: EntityStore, spec: FilterSpec) -> list[TourPredicate]:
    """Build tour-level predicates in their fixed application order."""
    predicates: list[TourPredicate] = []

    # 1. Destination membership via itinerary -> tour chain
    if spec.destination_id is not None:
        destination_tours = store.tour_ids_for_destination(spec.destination_id)
        predicates.append(lambda tour: tour.id in destination_tours)

    # 2. Itinerary membership
    if spec.itinerary_id is not None:
        itinerary_id = spec.itinerary_id
        predicates.append(lambda tour: tour.itinerary_id == itinerary_id)

    # 3. Product line
    if spec.product_line is not None:
        product_line = spec.product_line
        predicates.append(lambda tour: tour.product_line == product_line)

    # 4. DMC, then coordinator
    if spec.dmc_name is not None:
        dmc_name = spec.dmc_name
        predicates.append(lambda tour: tour.dmc_name == dmc_name)
    if spec.coordinator_name is not None:
        coordinator_name = spec.coordinator_name
        predicates.append(lambda tour: tour.coordinator_name == coordinator_name)

    # 5. Date window on tour start date
    if spec.date_range is not None:
        date_range = spec.date_range
        predicates.append(lambda tour: date_range.contains(tour.start_date))

    return predicates


def filter_responses(
    store: EntityStore,
    spec: FilterSpec,
    threshold: float,
    population: Sequence[SurveyResponse] | None = None,
) -> list[SurveyResponse]:
    """Apply a FilterSpec to the response population.

    Filters combine with logical AND: threshold on the overall score first,
    then every tour-based filter. Input order is preserved. A response whose
    tour cannot be resolved fails any tour-based filter.

    Args:
        store: Entity store
        spec: Filter specification
        threshold: Satisfaction threshold for the below-threshold filter
        population: Responses to filter (default: every response in the store)

    Returns:
        Ordered subset of the population
    """
    responses = list(store.responses if population is None else population)

    if spec.is_empty:
        return responses

    if spec.score_below_threshold:
        responses = [r for r in responses if is_below_threshold(r, threshold)]

    predicates = _tour_predicates(store, spec)
    if not predicates:
        return responses

    filtered: list[SurveyResponse] = []
    for response in responses:
        tour = store.tour_for(response)
        if tour is None:
            continue
        if all(predicate(tour) for predicate in predicates):
            filtered.append(response)

    return filtered
