"""
Layout editor facade.

``LayoutEditor`` is the single entry point a UI layer drives: every pointer
or keyboard gesture maps to one method here, which runs to completion and
leaves every touched entity with an up-to-date outline.

Example:
    >>> editor = LayoutEditor()
    >>> support = editor.add("support")
    >>> pipe = editor.add("pipe")
    >>> editor.move(pipe.id, (0, 70))
    ['PIPE-2']
    >>> pipe.center
    (400.0, 290.0)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from .entities import Circle, Elbow, Entity, EntityKind, Pipe, coerce_dimension
from .geometry import NOMINAL_PIPE_DIAMETERS, Bounds, Point, nominal_size_label
from .placement import PlacementEngine
from .progress import (
    ProgressSummary,
    StageStatus,
    completion_stages,
    stage_applies,
    validate_stage_key,
)
from .resize import ResizeEngine, resize_handles
from .selection import SelectionModel
from .settings import EditorSettings
from .store import EntityStore
from .view import ViewTransform

logger = logging.getLogger(__name__)


# =============================================================================
# DEFAULT NAMES
# =============================================================================

# Kind -> (label template, note). {n} is the allocated number, {size} the
# nominal pipe size.
DEFAULT_NAMES: dict[EntityKind, tuple[str, str]] = {
    EntityKind.SUPPORT: ("Rack {n}", "Adjustable floor support"),
    EntityKind.CANTILEVER: ("T-Support {n}", "Cantilever bracket"),
    EntityKind.FLOATING_SUPPORT: ("Floating Support {n}", "Loose block support"),
    EntityKind.RECTANGLE: ("Rectangle {n}", "Area marker"),
    EntityKind.CIRCLE: ("Circle {n}", "Area marker"),
    EntityKind.PIPE: ('Pipe {size}" {n}', "Carbon steel pipe"),
    EntityKind.ELBOW: ('Elbow {size}" {n}', '90° {size}" LR elbow'),
    EntityKind.ZONE: ("Work Zone {n}", "Activity area"),
    EntityKind.TEXT: ("Text {n}", ""),
}


def resolve_diameter(value: float | str) -> float:
    """
    Accept a world diameter or a nominal size such as '6"' / "6in".

    Raises:
        ValueError: If the value is neither a known nominal size nor a
            positive number
    """
    if isinstance(value, str):
        key = value.strip().rstrip('"').removesuffix("in").strip()
        if key in NOMINAL_PIPE_DIAMETERS:
            return NOMINAL_PIPE_DIAMETERS[key]
    diameter = coerce_dimension(value, 0.0)
    if diameter <= 0:
        valid = ", ".join(f'{k}"' for k in NOMINAL_PIPE_DIAMETERS)
        raise ValueError(f"Invalid diameter {value!r}. Use a positive number or one of: {valid}")
    return diameter


class LayoutEditor:
    """
    Spatial layout engine for a piping diagram.

    Args:
        settings: Editor settings; stock defaults when omitted
        store: Existing entity store to edit
    """

    def __init__(self, settings: EditorSettings | None = None, store: EntityStore | None = None):
        self.settings = settings or EditorSettings()
        self.store = store or EntityStore()
        self.selection = SelectionModel(self.store)
        self.placement = PlacementEngine(self.store, self.settings)
        self.resizer = ResizeEngine(self.store, self.settings)
        self.view = ViewTransform(limits=self.settings.zoom)
        self.current_diameter = self.settings.pipe_diameter

    # ===== QUERIES =====

    def entities(self) -> list[Entity]:
        """Every entity in draw order; outlines resolve on access."""
        return list(self.store)

    def get(self, entity_id: str) -> Entity | None:
        return self.store.get(entity_id)

    @property
    def selected_ids(self) -> list[str]:
        return self.selection.ids

    @property
    def primary(self) -> Entity | None:
        primary = self.selection.primary
        return self.store.get(primary) if primary else None

    def selected(self) -> list[Entity]:
        return self.store.get_many(self.selection.ids)

    def handles(self, entity_id: str) -> dict[str, Point]:
        entity = self.store.get(entity_id)
        return resize_handles(entity) if entity else {}

    def _targets(self, entity_ids: str | Iterable[str] | None) -> list[Entity]:
        if entity_ids is None:
            return self.selected()
        if isinstance(entity_ids, str):
            entity_ids = [entity_ids]
        return self.store.get_many(entity_ids)

    # ===== CREATE / DELETE =====

    def add(self, kind: EntityKind | str, center: Point | None = None, select: bool = True, **fields: Any) -> Entity:
        """
        Add an entity with its kind defaults.

        Args:
            kind: Entity kind or kind name
            center: Spawn point, the kind default when omitted
            select: Make the new entity the sole selection
            **fields: Overrides for the kind's fields
        """
        kind = EntityKind.parse(kind)
        defaults = self.settings.defaults_for(kind)
        values: dict[str, Any] = dict(defaults.dimensions)
        if kind in (EntityKind.PIPE, EntityKind.ELBOW):
            values.setdefault("diameter", self.current_diameter)
        values.update(fields)

        entity, number = self.store.create(kind, defaults.position if center is None else center, **values)
        label_template, note = DEFAULT_NAMES[kind]
        size = nominal_size_label(getattr(entity, "diameter", self.current_diameter))
        if "label" not in fields:
            entity.label = label_template.format(n=number, size=size)
        if "note" not in fields:
            entity.note = note.format(n=number, size=size)
        if select:
            self.selection.replace([entity.id])
        return entity

    def delete(self, entity_ids: str | Iterable[str]) -> list[str]:
        removed = []
        for entity in self._targets(entity_ids):
            self.store.remove(entity.id)
            self.selection.discard(entity.id)
            removed.append(entity.id)
        return removed

    def delete_selected(self) -> list[str]:
        removed = self.delete(self.selection.ids)
        self.selection.clear()
        return removed

    def clone_selection(self) -> list[Entity]:
        """Duplicate the selection with an offset; the clones become the selection."""
        clones = []
        for entity in self.selected():
            new_id, _ = self.store.allocator.allocate(entity.kind)
            clones.append(self.store.add(entity.clone(new_id, self.settings.clone_offset)))
        if clones:
            self.selection.replace(c.id for c in clones)
        return clones

    def create_zone(self) -> Entity | None:
        """Enclose the selection in a new work zone and select it."""
        box = Bounds.union(e.footprint_bounds() for e in self.selected())
        if box is None:
            logger.debug("create_zone with empty selection")
            return None
        pad = self.settings.zone_padding
        return self.add(
            EntityKind.ZONE,
            center=box.center,
            width=box.width + pad * 2,
            height=box.height + pad * 2,
        )

    def reset(self) -> None:
        """Drop every entity. Ids keep counting from where they were."""
        self.selection.clear()
        self.selection.cancel_box()
        self.store.clear()

    # ===== SELECTION =====

    def click(self, entity_id: str, additive: bool = False) -> None:
        self.selection.click(entity_id, additive)

    def select(self, entity_ids: Iterable[str]) -> None:
        self.selection.replace(entity_ids)

    def clear_selection(self) -> None:
        self.selection.clear()

    def begin_box_select(self, world_point: Point) -> None:
        self.selection.begin_box(world_point)

    def update_box_select(self, world_point: Point) -> None:
        self.selection.update_box(world_point)

    def end_box_select(self) -> list[str]:
        return self.selection.end_box()

    def box_select(self, corner_a: Point, corner_b: Point) -> list[str]:
        """Run a complete box-select between two world corners."""
        self.selection.begin_box(corner_a)
        self.selection.update_box(corner_b)
        return self.selection.end_box()

    def box_select_screen(self, corner_a: Point, corner_b: Point) -> list[str]:
        return self.box_select(self.view.screen_to_world(corner_a), self.view.screen_to_world(corner_b))

    # ===== MOVE =====

    def move(self, entity_id: str, world_delta: Point, suppress_snap: bool = False) -> list[str]:
        """Move an entity (or the selection it belongs to) by a world delta."""
        return self.placement.move(entity_id, world_delta, suppress_snap, self.selection.ids)

    def drag(self, entity_id: str, screen_delta: Point) -> list[str]:
        """Move by a pointer delta in screen pixels."""
        return self.move(entity_id, self.view.screen_delta_to_world(screen_delta))

    def nudge(self, dx_steps: int, dy_steps: int) -> list[str]:
        """Arrow-key nudge of the selection, never snapped."""
        return self.placement.nudge(self.selection.ids, dx_steps, dy_steps)

    # ===== RESIZE / ROTATE =====

    def resize(self, delta_width: float, delta_height: float, entity_ids: str | Iterable[str] | None = None) -> list[str]:
        """Resize the given entities, or the selection, by stepped deltas."""
        ids = [e.id for e in self._targets(entity_ids)]
        return self.resizer.resize(ids, delta_width, delta_height)

    def drag_handle(self, entity_id: str, handle: str, screen_delta: Point) -> list[str]:
        dx, dy = self.view.screen_delta_to_world(screen_delta)
        return self.resizer.drag_handle(entity_id, handle, dx, dy)

    def rotate(self, entity_ids: str | Iterable[str] | None = None) -> list[str]:
        """Rotate pipes and elbows; other kinds are skipped."""
        return [e.id for e in self._targets(entity_ids) if e.rotate()]

    def set_diameter(self, diameter: float | str) -> list[str]:
        """
        Change the working pipe diameter and apply it to the selected
        pipes, elbows and circles.
        """
        diameter = resolve_diameter(diameter)
        self.current_diameter = diameter
        changed = []
        for entity in self.selected():
            if isinstance(entity, (Pipe, Elbow, Circle)):
                entity.diameter = diameter
                changed.append(entity.id)
        return changed

    # ===== TEXT FIELDS =====

    def set_label(self, entity_id: str, text: str) -> bool:
        entity = self.store.get(entity_id)
        if entity is None:
            logger.debug("Ignoring label edit of unknown id %s", entity_id)
            return False
        entity.label = str(text)
        return True

    def set_note(self, entity_id: str, text: str) -> list[str]:
        """Edit the note; applies to the whole selection when the target is in it."""
        if entity_id in self.selection:
            targets = self.selected()
        else:
            targets = self._targets(entity_id)
        for entity in targets:
            entity.note = str(text)
        return [e.id for e in targets]

    # ===== PROGRESS =====

    def update_stage(
        self,
        stage: str,
        status: StageStatus | str,
        date: str | None = None,
        entity_ids: str | Iterable[str] | None = None,
    ) -> list[str]:
        """
        Set one lifecycle stage on the given entities or the selection.

        Piping-only stages are skipped on other kinds.
        """
        validate_stage_key(stage)
        status = StageStatus.parse(status)
        updated = []
        for entity in self._targets(entity_ids):
            if not stage_applies(stage, entity.is_piping):
                continue
            record = entity.stages[stage]
            record.status = status
            record.date = date
            updated.append(entity.id)
        return updated

    def mark_complete(self, date: str | None = None, entity_ids: str | Iterable[str] | None = None) -> list[str]:
        targets = self._targets(entity_ids)
        for entity in targets:
            for stage in completion_stages(entity.is_piping):
                entity.stages[stage].status = StageStatus.COMPLETED
                entity.stages[stage].date = date
        return [e.id for e in targets]

    def set_joint_state(
        self,
        joint_index: int,
        status: StageStatus | str,
        entity_ids: str | Iterable[str] | None = None,
    ) -> list[str]:
        """Set the weld status of joint 0 or 1 on pipes and elbows."""
        if joint_index not in (0, 1):
            raise IndexError(f"Joint index must be 0 or 1, got {joint_index}")
        status = StageStatus.parse(status)
        updated = []
        for entity in self._targets(entity_ids):
            if isinstance(entity, (Pipe, Elbow)):
                entity.joints[joint_index] = status
                updated.append(entity.id)
        return updated

    def progress_summary(self, stage: str) -> ProgressSummary:
        """Status counts for one stage over the entities it applies to."""
        validate_stage_key(stage)
        summary = ProgressSummary(stage)
        for entity in self.store:
            if stage_applies(stage, entity.is_piping):
                summary.counts[entity.stage_status(stage)] += 1
        return summary

    # ===== VIEW =====

    def pan(self, dx: float, dy: float) -> None:
        self.view.pan_by(dx, dy)

    def zoom_in(self, viewport_center: Point) -> float:
        return self.view.zoom_step(viewport_center, 1)

    def zoom_out(self, viewport_center: Point) -> float:
        return self.view.zoom_step(viewport_center, -1)

    def wheel_zoom(self, screen_point: Point, notches: float) -> float:
        return self.view.wheel(screen_point, notches)
