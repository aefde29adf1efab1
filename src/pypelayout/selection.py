"""
Selection model: click, additive toggle and rectangular box-select.

The selection is an ordered set of ids; the last id added is the primary
selection shown in detail panels.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum

from .geometry import Bounds, Point
from .store import EntityStore

logger = logging.getLogger(__name__)


class SelectionState(str, Enum):
    EMPTY = "empty"
    SINGLE = "single"
    MULTI = "multi"
    BOX_SELECTING = "box_selecting"


def entities_in_rect(store: EntityStore, corner_a: Point, corner_b: Point) -> list[str]:
    """
    Ids whose approximate bounds overlap the rectangle spanned by two corners.

    The corners may be given in any order. A zero-area rectangle selects
    nothing. Touching edges do not count as overlap.
    """
    rect = Bounds.from_corners(corner_a, corner_b)
    if rect.is_empty:
        return []
    return [e.id for e in store if rect.intersects(e.approx_bounds())]


class SelectionModel:
    """
    Tracks which entities are active.

    Args:
        store: Entity store used for box-select bounds and id validation
    """

    def __init__(self, store: EntityStore):
        self.store = store
        self._ids: list[str] = []
        self._box_start: Point | None = None
        self._box_current: Point | None = None

    # ----- queries -----

    @property
    def ids(self) -> list[str]:
        return list(self._ids)

    @property
    def primary(self) -> str | None:
        return self._ids[-1] if self._ids else None

    @property
    def state(self) -> SelectionState:
        if self._box_start is not None:
            return SelectionState.BOX_SELECTING
        if not self._ids:
            return SelectionState.EMPTY
        return SelectionState.SINGLE if len(self._ids) == 1 else SelectionState.MULTI

    @property
    def box_rect(self) -> Bounds | None:
        """Current box-select rectangle while a box drag is active."""
        if self._box_start is None or self._box_current is None:
            return None
        return Bounds.from_corners(self._box_start, self._box_current)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    # ----- commands -----

    def click(self, entity_id: str, additive: bool = False) -> None:
        """
        Click on an entity.

        Without ``additive`` the selection becomes just this entity; with it
        the entity's membership is toggled.
        """
        if entity_id not in self.store:
            logger.debug("Ignoring click on unknown id %s", entity_id)
            return
        if not additive:
            self._ids = [entity_id]
        elif entity_id in self._ids:
            self._ids.remove(entity_id)
        else:
            self._ids.append(entity_id)

    def replace(self, entity_ids: Iterable[str]) -> None:
        """Replace the selection, dropping unknown and duplicate ids."""
        ids: list[str] = []
        for entity_id in entity_ids:
            if entity_id in self.store and entity_id not in ids:
                ids.append(entity_id)
        self._ids = ids

    def discard(self, entity_id: str) -> None:
        if entity_id in self._ids:
            self._ids.remove(entity_id)

    def clear(self) -> None:
        self._ids = []

    # ----- box select -----

    def begin_box(self, world_point: Point) -> None:
        self._box_start = world_point
        self._box_current = world_point

    def update_box(self, world_point: Point) -> None:
        if self._box_start is None:
            return
        self._box_current = world_point

    def end_box(self) -> list[str]:
        """
        Finish the box drag and replace the selection in one step.

        Returns:
            The newly selected ids
        """
        if self._box_start is None or self._box_current is None:
            return self.ids
        selected = entities_in_rect(self.store, self._box_start, self._box_current)
        self._box_start = self._box_current = None
        self._ids = selected
        logger.debug("Box select picked %d entities", len(selected))
        return self.ids

    def cancel_box(self) -> None:
        self._box_start = self._box_current = None
