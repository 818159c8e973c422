"""
Entity-Component-System Core
=============================
Integer entity IDs with one component dictionary per component type.

Removal is deferred: systems mark entities dead while they iterate, and
the simulation compacts the arena once at the end of each step.
"""

from typing import Dict, Type, TypeVar, Optional, Iterator, Tuple, Any


# Type variable for component types
C = TypeVar('C')


class World:
    """
    Arena that owns every live entity of a session.

    Component stores are plain dicts, so iteration follows creation
    order. Collision resolution depends on that ordering.
    """

    def __init__(self):
        self._next_entity_id: int = 0
        self._entities: Dict[int, None] = {}
        self._components: Dict[Type, Dict[int, Any]] = {}
        self._dead_entities: Dict[int, None] = {}  # Marked for removal

    def create_entity(self) -> int:
        """Create a new entity and return its ID."""
        entity_id = self._next_entity_id
        self._next_entity_id += 1
        self._entities[entity_id] = None
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        """Mark an entity dead. It stays in storage until compaction."""
        if entity_id in self._entities:
            self._dead_entities[entity_id] = None

    def process_dead_entities(self) -> int:
        """Drop every entity marked dead. Returns how many were removed."""
        removed = 0
        for entity_id in self._dead_entities:
            if entity_id in self._entities:
                del self._entities[entity_id]
                for component_store in self._components.values():
                    component_store.pop(entity_id, None)
                removed += 1
        self._dead_entities.clear()
        return removed

    def add_component(self, entity_id: int, component: Any) -> None:
        """Attach a component, replacing any existing one of the same type."""
        component_type = type(component)
        if component_type not in self._components:
            self._components[component_type] = {}
        self._components[component_type][entity_id] = component

    def remove_component(self, entity_id: int, component_type: Type[C]) -> None:
        """Detach a component if the entity has it."""
        if component_type in self._components:
            self._components[component_type].pop(entity_id, None)

    def get_component(self, entity_id: int, component_type: Type[C]) -> Optional[C]:
        """Get a component for an entity, or None if not found."""
        if component_type in self._components:
            return self._components[component_type].get(entity_id)
        return None

    def has_component(self, entity_id: int, component_type: Type) -> bool:
        """Check if an entity has a specific component."""
        if component_type in self._components:
            return entity_id in self._components[component_type]
        return False

    def query(self, *component_types: Type) -> Iterator[Tuple[int, ...]]:
        """
        Query for live entities that have ALL specified component types.

        Yields tuples of (entity_id, component1, component2, ...) in
        entity creation order. Entities marked dead are skipped, even if
        they were marked during the iteration.
        """
        if not component_types:
            return

        stores = []
        for component_type in component_types:
            store = self._components.get(component_type)
            if not store:
                return
            stores.append(store)

        # Snapshot the ids so systems may create entities mid-query
        for entity_id in sorted(stores[0]):
            if entity_id in self._dead_entities:
                continue
            if not all(entity_id in store for store in stores[1:]):
                continue
            # A component may have been removed earlier in this iteration
            if entity_id not in stores[0]:
                continue
            yield (entity_id,) + tuple(store[entity_id] for store in stores)

    def count(self, *component_types: Type) -> int:
        """Number of live entities carrying all of the given components."""
        return sum(1 for _ in self.query(*component_types))

    def entity_count(self) -> int:
        """Return the number of live entities."""
        return len(self._entities) - len(self._dead_entities)

    def is_alive(self, entity_id: int) -> bool:
        """Check if an entity exists and is not marked dead."""
        return entity_id in self._entities and entity_id not in self._dead_entities

    def pending_removals(self) -> int:
        """Entities marked dead but not yet compacted."""
        return len(self._dead_entities)
