"""Index primitives shared by the entity store.

Every aggregator reuses these indices instead of rescanning collections.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, TypeVar


class HasId(Protocol):
    """Any entity with a string id."""

    @property
    def id(self) -> str: ...


E = TypeVar("E", bound=HasId)
V = TypeVar("V")


def index_by_id(collection: Iterable[E]) -> dict[str, E]:
    """Index entities by id.

    Raises:
        ValueError: If two entities share an id
    """
    index: dict[str, E] = {}
    for entity in collection:
        if entity.id in index:
            raise ValueError(f"duplicate id {entity.id!r} in {type(entity).__name__} collection")
        index[entity.id] = entity
    return index


def index_children(
    parents: Iterable[HasId],
    children: Iterable[Any],
    fk_field: str,
) -> dict[str, list[str]]:
    """Map each parent id to the ordered ids of its children.

    Every parent gets an entry, possibly empty. Children keep collection
    order. A child whose foreign key names an unknown parent is left out.

    Args:
        parents: Parent collection
        children: Child collection
        fk_field: Attribute on the child holding the parent id

    Returns:
        Mapping parent id -> list of child ids
    """
    index: dict[str, list[str]] = {parent.id: [] for parent in parents}
    for child in children:
        parent_id = getattr(child, fk_field)
        if parent_id in index:
            index[parent_id].append(child.id)
    return index


def lookup(index: Mapping[str, V], entity_id: str | None) -> V | None:
    """Get an entity by id, or None when it is missing.

    Never raises: upstream data may reference entities that were never loaded.
    """
    if entity_id is None:
        return None
    return index.get(entity_id)
