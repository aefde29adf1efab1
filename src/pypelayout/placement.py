"""
Placement engine: drag moves, keyboard nudges and neighbour-aware snapping.

Snapping compares the dragged entity's candidate position against every other
entity and applies three rules in priority order:

    A. Pipe onto a support: the pipe bottom drops onto the support top when
       within the wide gravity distance.
    B. Pipe/elbow to pipe/elbow: bottoms align, and centerlines align in X,
       within the general distance. Skipped once any Y snap has happened.
    C. Support to support: X and base lines align within the general distance.

Multi-entity moves and nudges never snap; snapping many entities against
each other at once makes them collapse onto one another.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .entities import Entity, Pipe, SupportBase
from .geometry import Point
from .settings import EditorSettings
from .store import EntityStore

logger = logging.getLogger(__name__)


@dataclass
class SnapContext:
    """
    Values fixed for the whole snap pass of one move.

    Attributes:
        entity: The entity being dragged
        bottom_offset: Its center-to-bottom distance
        target_bottom: Bottom edge at the unsnapped candidate position
        general: Peer alignment distance
        gravity: Pipe onto support distance
    """

    entity: Entity
    bottom_offset: float
    target_bottom: float
    general: float
    gravity: float


@dataclass
class SnapState:
    """Candidate position, refined rule by rule."""

    x: float
    y: float
    snapped: bool = False

    @property
    def point(self) -> Point:
        return (self.x, self.y)


SnapRule = Callable[[SnapContext, Entity, SnapState], None]


def snap_pipe_to_support(ctx: SnapContext, other: Entity, state: SnapState) -> None:
    if not (isinstance(ctx.entity, Pipe) and other.is_support):
        return
    top = other.center[1]
    if abs(ctx.target_bottom - top) < ctx.gravity:
        state.y = top - ctx.bottom_offset
        state.snapped = True


def snap_piping_connection(ctx: SnapContext, other: Entity, state: SnapState) -> None:
    if state.snapped or not (ctx.entity.is_piping and other.is_piping):
        return
    other_bottom = other.center[1] + other.bottom_offset()
    if abs(ctx.target_bottom - other_bottom) < ctx.general:
        state.y = other_bottom - ctx.bottom_offset
        state.snapped = True
    if abs(state.x - other.center[0]) < ctx.general:
        state.x = other.center[0]


def snap_support_to_support(ctx: SnapContext, other: Entity, state: SnapState) -> None:
    if not (isinstance(ctx.entity, SupportBase) and isinstance(other, SupportBase)):
        return
    if abs(state.x - other.center[0]) < ctx.general:
        state.x = other.center[0]
    my_height = ctx.entity.height
    if abs(state.y + my_height - other.base_y) < ctx.general:
        state.y = other.base_y - my_height


# Priority order matters: earlier rules win the Y axis
SNAP_RULES: tuple[SnapRule, ...] = (
    snap_pipe_to_support,
    snap_piping_connection,
    snap_support_to_support,
)


def snap_position(
    entity: Entity,
    candidate: Point,
    neighbours: Iterable[Entity],
    general: float = 15.0,
    gravity: float = 40.0,
) -> Point:
    """
    Snap a candidate center against neighbouring entities.

    Pure function: nothing is mutated.

    Args:
        entity: The dragged entity (its dimensions, not its center, are used)
        candidate: Unsnapped new center
        neighbours: Every other entity, in store order
        general: Peer alignment distance (strict less-than)
        gravity: Pipe onto support distance (strict less-than)

    Returns:
        Snapped center
    """
    offset = entity.bottom_offset()
    ctx = SnapContext(
        entity=entity,
        bottom_offset=offset,
        target_bottom=candidate[1] + offset,
        general=general,
        gravity=gravity,
    )
    state = SnapState(float(candidate[0]), float(candidate[1]))
    for other in neighbours:
        if other.id == entity.id:
            continue
        for rule in SNAP_RULES:
            rule(ctx, other, state)
    return state.point


class PlacementEngine:
    """
    Applies world-space moves to entities in the store.

    Args:
        store: Entity store to mutate
        settings: Snap distances and nudge step
    """

    def __init__(self, store: EntityStore, settings: EditorSettings | None = None):
        self.store = store
        self.settings = settings or EditorSettings()

    def move(
        self,
        entity_id: str,
        delta: Point,
        suppress_snap: bool = False,
        selection: Iterable[str] = (),
    ) -> list[str]:
        """
        Move an entity, or the whole selection when it is part of one.

        Args:
            entity_id: The entity under the pointer
            delta: World-space delta
            suppress_snap: Disable snapping even for a single entity
            selection: Current selection ids

        Returns:
            Ids that moved
        """
        entity = self.store.get(entity_id)
        if entity is None:
            logger.debug("Ignoring move of unknown id %s", entity_id)
            return []

        selection = list(selection)
        if entity_id in selection and len(selection) > 1:
            return self.move_group(selection, delta)

        dx, dy = delta
        x, y = entity.center
        candidate = (x + dx, y + dy)
        if not suppress_snap:
            snap = self.settings.snap
            candidate = snap_position(
                entity, candidate, self.store.others(entity_id), snap.general, snap.gravity
            )
            if candidate != (x + dx, y + dy):
                logger.debug("Snapped %s to (%.2f, %.2f)", entity_id, *candidate)
        entity.move_to(candidate)
        return [entity_id]

    def move_group(self, entity_ids: Iterable[str], delta: Point) -> list[str]:
        """Shift every entity by the same delta, without snapping."""
        moved = []
        for entity in self.store.get_many(dict.fromkeys(entity_ids)):
            entity.move_by(*delta)
            moved.append(entity.id)
        return moved

    def nudge(self, entity_ids: Iterable[str], dx_steps: int, dy_steps: int) -> list[str]:
        """Keyboard nudge by whole steps; each entity moves exactly once."""
        step = self.settings.nudge_step
        return self.move_group(entity_ids, (dx_steps * step, dy_steps * step))
