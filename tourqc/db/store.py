"""Entity store: read-only indexed snapshot of the loaded collections."""

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import TypeVar

from tourqc.db.indexing import index_by_id, index_children, lookup
from tourqc.models.actions import SuggestedAction
from tourqc.models.entities import Annotation, Destination, Itinerary, SurveyResponse, Tour

logger = logging.getLogger(__name__)

V = TypeVar("V")


class EntityStore:
    """Immutable snapshot of the operational hierarchy with parent/child indices.

    Built once at load time. Lookups return None for missing ids; callers
    exclude the affected entity from their grouping instead of failing.
    """

    def __init__(
        self,
        *,
        destinations: Iterable[Destination] = (),
        itineraries: Iterable[Itinerary] = (),
        tours: Iterable[Tour] = (),
        responses: Iterable[SurveyResponse] = (),
        annotations: Iterable[Annotation] = (),
        suggested_actions: Iterable[SuggestedAction] = (),
        on_lookup_miss: Callable[[str], None] | None = None,
    ) -> None:
        """Build all indices.

        Args:
            destinations: Destination collection
            itineraries: Itinerary collection
            tours: Tour collection
            responses: Survey response collection (order is preserved)
            annotations: Annotations, at most one per response
            suggested_actions: Suggested action collection
            on_lookup_miss: Called with the entity kind when a foreign key
                resolves to nothing

        Raises:
            ValueError: On duplicate ids or more than one annotation per response
        """
        self._destinations = tuple(destinations)
        self._itineraries = tuple(itineraries)
        self._tours = tuple(tours)
        self._responses = tuple(responses)
        self._annotations = tuple(annotations)
        self._suggested_actions = tuple(suggested_actions)
        self._on_lookup_miss = on_lookup_miss

        self._destination_by_id = index_by_id(self._destinations)
        self._itinerary_by_id = index_by_id(self._itineraries)
        self._tour_by_id = index_by_id(self._tours)
        self._response_by_id = index_by_id(self._responses)
        self._suggested_by_id = index_by_id(self._suggested_actions)

        self._annotation_by_response: dict[str, Annotation] = {}
        for annotation in self._annotations:
            if annotation.response_id in self._annotation_by_response:
                raise ValueError(f"response {annotation.response_id!r} has more than one annotation")
            self._annotation_by_response[annotation.response_id] = annotation

        self._itineraries_by_destination = index_children(
            self._destinations, self._itineraries, "destination_id"
        )
        self._tours_by_itinerary = index_children(self._itineraries, self._tours, "itinerary_id")
        self._responses_by_tour = index_children(self._tours, self._responses, "tour_id")

        self._tour_ids_by_destination: dict[str, frozenset[str]] = {
            destination_id: frozenset(
                tour_id
                for itinerary_id in itinerary_ids
                for tour_id in self._tours_by_itinerary[itinerary_id]
            )
            for destination_id, itinerary_ids in self._itineraries_by_destination.items()
        }

        logger.debug(
            "Entity store loaded",
            extra={
                "structured": {
                    "destinations": len(self._destinations),
                    "itineraries": len(self._itineraries),
                    "tours": len(self._tours),
                    "responses": len(self._responses),
                    "annotations": len(self._annotations),
                }
            },
        )

    def bind_lookup_miss(self, hook: Callable[[str], None]) -> None:
        """Install the lookup-miss hook unless one was supplied at load."""
        if self._on_lookup_miss is None:
            self._on_lookup_miss = hook

    # Collections

    @property
    def destinations(self) -> tuple[Destination, ...]:
        return self._destinations

    @property
    def itineraries(self) -> tuple[Itinerary, ...]:
        return self._itineraries

    @property
    def tours(self) -> tuple[Tour, ...]:
        return self._tours

    @property
    def responses(self) -> tuple[SurveyResponse, ...]:
        return self._responses

    @property
    def annotations(self) -> tuple[Annotation, ...]:
        return self._annotations

    @property
    def suggested_actions(self) -> tuple[SuggestedAction, ...]:
        return self._suggested_actions

    # Lookups by id

    def get_destination(self, destination_id: str | None) -> Destination | None:
        return lookup(self._destination_by_id, destination_id)

    def get_itinerary(self, itinerary_id: str | None) -> Itinerary | None:
        return lookup(self._itinerary_by_id, itinerary_id)

    def get_tour(self, tour_id: str | None) -> Tour | None:
        return lookup(self._tour_by_id, tour_id)

    def get_response(self, response_id: str | None) -> SurveyResponse | None:
        return lookup(self._response_by_id, response_id)

    def get_suggested_action(self, action_id: str | None) -> SuggestedAction | None:
        return lookup(self._suggested_by_id, action_id)

    def annotation_for(self, response_id: str) -> Annotation | None:
        """Annotation of a response; None means the response carries no issue."""
        return self._annotation_by_response.get(response_id)

    # Chain resolution (response -> tour -> itinerary -> destination)

    def tour_for(self, response: SurveyResponse) -> Tour | None:
        return self._resolve(self._tour_by_id, response.tour_id, "tour")

    def itinerary_for(self, tour: Tour) -> Itinerary | None:
        return self._resolve(self._itinerary_by_id, tour.itinerary_id, "itinerary")

    def destination_for(self, itinerary: Itinerary) -> Destination | None:
        return self._resolve(self._destination_by_id, itinerary.destination_id, "destination")

    def itinerary_for_response(self, response: SurveyResponse) -> Itinerary | None:
        tour = self.tour_for(response)
        if tour is None:
            return None
        return self.itinerary_for(tour)

    def destination_for_response(self, response: SurveyResponse) -> Destination | None:
        itinerary = self.itinerary_for_response(response)
        if itinerary is None:
            return None
        return self.destination_for(itinerary)

    # Child indices

    def itinerary_ids_for_destination(self, destination_id: str) -> list[str]:
        return list(self._itineraries_by_destination.get(destination_id, ()))

    def tour_ids_for_itinerary(self, itinerary_id: str) -> list[str]:
        return list(self._tours_by_itinerary.get(itinerary_id, ()))

    def tour_ids_for_destination(self, destination_id: str) -> frozenset[str]:
        return self._tour_ids_by_destination.get(destination_id, frozenset())

    def responses_for_tour(self, tour_id: str) -> list[SurveyResponse]:
        return [self._response_by_id[rid] for rid in self._responses_by_tour.get(tour_id, ())]

    def _resolve(self, index: Mapping[str, V], entity_id: str, kind: str) -> V | None:
        entity = lookup(index, entity_id)
        if entity is None and self._on_lookup_miss is not None:
            self._on_lookup_miss(kind)
        return entity
