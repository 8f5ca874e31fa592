"""
Entity Registry
================
Integer entity IDs with one component store per component type.

The World is also the live obstacle registry. Removal is two-phase:
destroy_entity() only marks, and process_dead_entities() deregisters
everything marked once the tick's passes are done.
"""

from collections import defaultdict
from typing import Any, Callable, DefaultDict, Dict, Iterator, List, Optional, Set, Tuple, Type, TypeVar
import itertools
import logging

logger = logging.getLogger(__name__)

C = TypeVar('C')

Cleanup = Callable[['World', int], None]


class World:

    def __init__(self):
        self._next_id = itertools.count()
        self._alive: Set[int] = set()
        self._pending_removal: Set[int] = set()
        self._stores: DefaultDict[Type, Dict[int, Any]] = defaultdict(dict)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def create_entity(self) -> int:
        entity_id = next(self._next_id)
        self._alive.add(entity_id)
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        """Mark for removal at the next sweep. Unknown IDs are ignored."""
        if entity_id in self._alive:
            self._pending_removal.add(entity_id)

    def is_marked(self, entity_id: int) -> bool:
        return entity_id in self._pending_removal

    def is_alive(self, entity_id: int) -> bool:
        """Registered, whether or not it is marked."""
        return entity_id in self._alive

    def entity_count(self) -> int:
        return len(self._alive)

    def process_dead_entities(self, cleanup: Optional[Cleanup] = None) -> List[int]:
        """
        Deregister every marked entity, lowest ID first.

        cleanup(world, entity_id) runs before the entity's components
        are dropped. Returns the removed IDs.
        """
        doomed = sorted(self._pending_removal & self._alive)
        self._pending_removal = set()

        for entity_id in doomed:
            if cleanup is not None:
                cleanup(self, entity_id)
            self._alive.discard(entity_id)
            for store in self._stores.values():
                store.pop(entity_id, None)

        if doomed:
            logger.debug("swept %d entities", len(doomed))
        return doomed

    # -------------------------------------------------------------------------
    # Components
    # -------------------------------------------------------------------------

    def add_component(self, entity_id: int, component: Any) -> None:
        self._stores[type(component)][entity_id] = component

    def get_component(self, entity_id: int, component_type: Type[C]) -> Optional[C]:
        store = self._stores.get(component_type)
        return store.get(entity_id) if store else None

    def has_component(self, entity_id: int, component_type: Type) -> bool:
        return entity_id in self._stores.get(component_type, ())

    def query(self, *component_types: Type) -> Iterator[Tuple[Any, ...]]:
        """
        Yield (entity_id, comp1, comp2, ...) for every registered entity
        holding all the given types, in creation order.

        The matching IDs are collected before the first yield, so callers
        may create or mark entities mid-iteration. Marked entities are
        still yielded until the sweep.
        """
        stores = [self._stores.get(ct) for ct in component_types]
        if not stores or any(not store for store in stores):
            return

        smallest = min(stores, key=len)
        matches = sorted(
            eid for eid in smallest
            if eid in self._alive and all(eid in store for store in stores)
        )

        for entity_id in matches:
            # A cleanup elsewhere in the tick may have dropped a component
            if any(entity_id not in store for store in stores):
                continue
            yield (entity_id,) + tuple(store[entity_id] for store in stores)

    def get_entities_with(self, *component_types: Type) -> Iterator[int]:
        for result in self.query(*component_types):
            yield result[0]
