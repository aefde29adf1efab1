"""
Resize engine.

A resize is a (delta_width, delta_height) pair coming from stepped buttons
or from dragging a handle. Each entity kind interprets the pair with its own
anchor rule; the dispatch table ``RESIZERS`` maps entity classes to those
rules. Kinds without an entry (elbows, text) ignore resizes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from .entities import Circle, Entity, Pipe, Rectangle, SupportBase, Zone
from .geometry import Point
from .settings import EditorSettings, MinimumSizes
from .store import EntityStore

logger = logging.getLogger(__name__)

# =============================================================================
# HANDLES
# =============================================================================

# Handle name -> linear map from a pointer delta to (dW, dH). The opposite
# edge mirrors the dragged one about the center, hence the factor of two.
HANDLE_FACTORS: dict[str, tuple[tuple[float, float], tuple[float, float]]] = {
    # name: ((dx->dW, dy->dW), (dx->dH, dy->dH))
    "e": ((2.0, 0.0), (0.0, 0.0)),
    "w": ((-2.0, 0.0), (0.0, 0.0)),
    "s": ((0.0, 0.0), (0.0, 2.0)),
    "n": ((0.0, 0.0), (0.0, -2.0)),
    "se": ((2.0, 0.0), (0.0, 2.0)),
    "sw": ((-2.0, 0.0), (0.0, 2.0)),
    "ne": ((2.0, 0.0), (0.0, -2.0)),
    "nw": ((-2.0, 0.0), (0.0, -2.0)),
    "r": ((2.0, 0.0), (0.0, 0.0)),
}


def handle_delta(handle: str, dx: float, dy: float) -> tuple[float, float]:
    """
    Convert a world-space handle drag into (delta_width, delta_height).

    Raises:
        ValueError: For an unknown handle name
    """
    try:
        (wx, wy), (hx, hy) = HANDLE_FACTORS[handle]
    except KeyError:
        valid = ", ".join(HANDLE_FACTORS)
        raise ValueError(f"Unknown resize handle {handle!r}. Expected one of: {valid}") from None
    return (wx * dx + wy * dy, hx * dx + hy * dy)


def resize_handles(entity: Entity) -> dict[str, Point]:
    """
    Handle positions for an entity.

    Rectangles and zones get four corners around the center, supports four
    corners of their top-anchored box, circles a single radius handle on the
    right. Other kinds have no handles.
    """
    x, y = entity.center
    if isinstance(entity, Circle):
        return {"r": (x + entity.radius, y)}
    if isinstance(entity, SupportBase):
        left, right = x - entity.width / 2, x + entity.width / 2
        top, bottom = y, y + entity.height
    elif isinstance(entity, (Rectangle, Zone)):
        left, right = x - entity.width / 2, x + entity.width / 2
        top, bottom = y - entity.height / 2, y + entity.height / 2
    else:
        return {}
    return {"nw": (left, top), "ne": (right, top), "sw": (left, bottom), "se": (right, bottom)}


# =============================================================================
# PER-KIND RULES
# =============================================================================


def _resize_box(entity: Rectangle | Zone, dw: float, dh: float, minimums: MinimumSizes) -> None:
    entity.width = max(minimums.generic, entity.width + dw)
    entity.height = max(minimums.generic, entity.height + dh)


def _resize_support(entity: SupportBase, dw: float, dh: float, minimums: MinimumSizes) -> None:
    # Base line stays fixed, the top contact surface moves
    base = entity.base_y
    entity.width = max(minimums.generic, entity.width + dw)
    entity.height = max(minimums.generic, entity.height + dh)
    entity.center = (entity.center[0], base - entity.height)


def _resize_circle(entity: Circle, dw: float, dh: float, minimums: MinimumSizes) -> None:
    entity.diameter = max(minimums.circle, entity.diameter + max(dw, dh))


def _resize_pipe(entity: Pipe, dw: float, dh: float, minimums: MinimumSizes) -> None:
    delta = dw if abs(dw) > abs(dh) else dh
    entity.length = max(minimums.pipe_length, entity.length + delta)


Resizer = Callable[[Entity, float, float, MinimumSizes], None]

RESIZERS: dict[type[Entity], Resizer] = {
    Rectangle: _resize_box,
    Zone: _resize_box,
    SupportBase: _resize_support,
    Circle: _resize_circle,
    Pipe: _resize_pipe,
}


def _resizer_for(entity: Entity) -> Resizer | None:
    for cls in type(entity).__mro__:
        if cls in RESIZERS:
            return RESIZERS[cls]
    return None


def resize_entity(
    entity: Entity, delta_width: float, delta_height: float, minimums: MinimumSizes | None = None
) -> bool:
    """
    Resize one entity in place.

    Returns:
        False when the kind ignores resizes
    """
    resizer = _resizer_for(entity)
    if resizer is None:
        return False
    resizer(entity, float(delta_width), float(delta_height), minimums or MinimumSizes())
    return True


class ResizeEngine:
    """
    Applies resize deltas to entities in the store.

    Args:
        store: Entity store to mutate
        settings: Minimum clamps
    """

    def __init__(self, store: EntityStore, settings: EditorSettings | None = None):
        self.store = store
        self.settings = settings or EditorSettings()

    def resize(self, entity_ids: str | Iterable[str], delta_width: float, delta_height: float) -> list[str]:
        """
        Resize each entity independently by the same deltas.

        Returns:
            Ids that actually changed size
        """
        if isinstance(entity_ids, str):
            entity_ids = [entity_ids]
        changed = []
        for entity_id in entity_ids:
            entity = self.store.get(entity_id)
            if entity is None:
                logger.debug("Ignoring resize of unknown id %s", entity_id)
                continue
            if resize_entity(entity, delta_width, delta_height, self.settings.minimums):
                changed.append(entity_id)
            else:
                logger.debug("%s does not resize", entity_id)
        return changed

    def drag_handle(self, entity_id: str, handle: str, dx: float, dy: float) -> list[str]:
        """Resize from a handle drag given in world units."""
        delta_width, delta_height = handle_delta(handle, dx, dy)
        return self.resize(entity_id, delta_width, delta_height)
