"""
In-memory entity store and id allocation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from .entities import Entity, EntityKind, create_entity
from .geometry import Point

logger = logging.getLogger(__name__)


@dataclass
class IdAllocator:
    """
    Monotonic id source shared by every entity kind.

    Numbers are never reused, including after deletes and store resets.
    """

    next_number: int = 1

    def allocate(self, kind: EntityKind | str) -> tuple[str, int]:
        """
        Mint a new id.

        Returns:
            (id, number) e.g. ("PIPE-4", 4)
        """
        kind = EntityKind.parse(kind)
        number = self.next_number
        self.next_number += 1
        return f"{kind.id_prefix}-{number}", number


class EntityStore:
    """
    Ordered collection of placed entities.

    Insertion order is preserved and is the draw order.
    """

    def __init__(self, allocator: IdAllocator | None = None):
        self.allocator = allocator or IdAllocator()
        self._entities: dict[str, Entity] = {}

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._entities.values()))

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    @property
    def ids(self) -> list[str]:
        return list(self._entities)

    def get(self, entity_id: str) -> Entity | None:
        return self._entities.get(entity_id)

    def get_many(self, entity_ids: Iterable[str]) -> list[Entity]:
        """Entities for the given ids, silently skipping unknown ones."""
        return [self._entities[i] for i in entity_ids if i in self._entities]

    def add(self, entity: Entity) -> Entity:
        if entity.id in self._entities:
            raise ValueError(f"Duplicate entity id {entity.id!r}")
        self._entities[entity.id] = entity
        logger.info("Added %s at (%.1f, %.1f)", entity.id, *entity.center)
        return entity

    def create(self, kind: EntityKind | str, center: Point, **fields: Any) -> tuple[Entity, int]:
        """
        Allocate an id and add a new entity of ``kind``.

        Returns:
            (entity, allocated number)
        """
        entity_id, number = self.allocator.allocate(kind)
        entity = create_entity(kind, entity_id, center, **fields)
        return self.add(entity), number

    def remove(self, entity_id: str) -> Entity | None:
        entity = self._entities.pop(entity_id, None)
        if entity is None:
            logger.debug("Ignoring remove of unknown id %s", entity_id)
        else:
            logger.info("Removed %s", entity_id)
        return entity

    def others(self, entity_id: str) -> Iterator[Entity]:
        """Every entity except ``entity_id``, in store order."""
        return (e for e in self._entities.values() if e.id != entity_id)

    def clear(self) -> None:
        """Remove every entity. The id allocator keeps counting."""
        self._entities.clear()
        logger.info("Store cleared")
