"""
Layout entity model.

Each entity kind is its own dataclass carrying strongly-typed, named
dimensions. The vector outline is never stored by hand: it is derived on
read from the fields listed in ``geometry_fields`` and regenerated whenever
any of them changes, so a mutated entity can never expose a stale outline.

Coordinates follow screen conventions: +X right, +Y down.
"""

from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar

from .geometry import (
    Bounds,
    Outline,
    Point,
    bend_radius,
    elbow_joint_points,
    make_cantilever_outline,
    make_circle_outline,
    make_elbow_outline,
    make_floating_support_outline,
    make_pipe_outline,
    make_rack_outline,
    make_rectangle_outline,
    make_text_outline,
    make_zone_outline,
    normalize_rotation,
    pipe_joint_points,
    text_extent,
)
from .progress import StageRecord, StageStatus, create_default_stages, validate_stage_key

# =============================================================================
# ENTITY KINDS
# =============================================================================


class EntityKind(str, Enum):
    """Every placeable entity kind, with its id prefix as value."""

    PIPE = "PIPE"
    ELBOW = "ELBOW"
    SUPPORT = "SUP"
    CANTILEVER = "CANT"
    FLOATING_SUPPORT = "FLOAT"
    RECTANGLE = "RECT"
    CIRCLE = "CIRC"
    ZONE = "ZONE"
    TEXT = "TEXT"

    @property
    def id_prefix(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: EntityKind | str) -> EntityKind:
        """
        Resolve a kind from an enum member, member name, or id prefix.

        Raises:
            ValueError: If the name matches no kind
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip().upper().replace("-", "_")
        aliases = {"FLOATING": "FLOATING_SUPPORT", "FLOATINGSUPPORT": "FLOATING_SUPPORT"}
        text = aliases.get(text, text)
        for kind in cls:
            if text in (kind.name, kind.value):
                return kind
        valid = ", ".join(k.name.lower() for k in cls)
        raise ValueError(f"Unknown entity kind {value!r}. Expected one of: {valid}")


_LEADING_NUMBER = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


def coerce_dimension(value: Any, default: float) -> float:
    """
    Parse a dimension as a positive float, falling back to ``default``.

    Strings are read up to their first non-numeric character so values such
    as "6m" or "150 mm" are accepted. Missing, unparsable, non-finite and
    non-positive values all yield the default; this never raises.
    """
    if isinstance(value, bool) or value is None:
        return float(default)
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value))
        if not match:
            return float(default)
        number = float(match.group(1))
    if not math.isfinite(number) or number <= 0:
        return float(default)
    return number


def coerce_point(value: Any, default: Point = (0.0, 0.0)) -> Point:
    """Coerce a 2-sequence into a float point, keeping the default on failure."""
    try:
        x, y = float(value[0]), float(value[1])
    except (TypeError, ValueError, IndexError):
        return (float(default[0]), float(default[1]))
    if not (math.isfinite(x) and math.isfinite(y)):
        return (float(default[0]), float(default[1]))
    return (x, y)


# =============================================================================
# BASE ENTITY
# =============================================================================


@dataclass
class Entity(ABC):
    """
    A placed element of the layout.

    Attributes:
        id: Unique, immutable identifier (e.g. "PIPE-3")
        center: World anchor point all geometry is built from
        label: Display name
        note: Free-text description
        stages: Construction lifecycle stages keyed by stage name
    """

    id: str
    center: Point = (0.0, 0.0)
    label: str = ""
    note: str = ""
    stages: dict[str, StageRecord] = field(default_factory=create_default_stages)

    kind: ClassVar[EntityKind]
    # Field names whose values determine the outline (center always does)
    geometry_fields: ClassVar[tuple[str, ...]] = ()
    # Default value per dimension field, used when coercing input
    dimension_defaults: ClassVar[dict[str, float]] = {}
    is_support: ClassVar[bool] = False
    is_piping: ClassVar[bool] = False

    _outline_cache: tuple[tuple, Outline] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        self.center = coerce_point(self.center)
        self.label = "" if self.label is None else str(self.label)
        self.note = "" if self.note is None else str(self.note)
        for name, default in self.dimension_defaults.items():
            setattr(self, name, coerce_dimension(getattr(self, name), default))

    # ----- geometry -----

    def geometry_key(self) -> tuple:
        return (self.center, *(getattr(self, name) for name in self.geometry_fields))

    @property
    def outline(self) -> Outline:
        """The entity outline, regenerated if any geometry field changed."""
        key = self.geometry_key()
        if self._outline_cache is None or self._outline_cache[0] != key:
            self._outline_cache = (key, self.generate_outline())
        return self._outline_cache[1]

    @abstractmethod
    def generate_outline(self) -> Outline:
        """Build the outline from the current fields."""

    @abstractmethod
    def half_extent(self) -> tuple[float, float]:
        """Half width and half height of the approximate selection box."""

    def approx_bounds(self) -> Bounds:
        """Approximate axis-aligned box used for box-select hit testing."""
        hw, hh = self.half_extent()
        return Bounds.from_center(self.center, hw, hh)

    def footprint_half_extent(self) -> tuple[float, float]:
        """Half sizes used when enclosing entities in a new zone."""
        return self.half_extent()

    def footprint_bounds(self) -> Bounds:
        hw, hh = self.footprint_half_extent()
        return Bounds.from_center(self.center, hw, hh)

    def bottom_offset(self) -> float:
        """Distance from center.y down to the lowest contact edge."""
        return 0.0

    def joint_points(self) -> tuple[Point, ...]:
        return ()

    def rotate(self) -> bool:
        """Rotate by one step. Returns False for kinds that do not rotate."""
        return False

    @property
    def dimensions(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in self.dimension_defaults}

    # ----- mutation helpers -----

    def move_by(self, dx: float, dy: float) -> None:
        x, y = self.center
        self.center = (x + dx, y + dy)

    def move_to(self, center: Point) -> None:
        self.center = coerce_point(center, self.center)

    def clone(self, new_id: str, offset: Point = (0.0, 0.0)) -> Entity:
        """Copy with a new id, shifted center and fresh lifecycle stages."""
        x, y = self.center
        return replace(
            self,
            id=new_id,
            center=(x + offset[0], y + offset[1]),
            label=f"{self.label} (copy)" if self.label else "",
            stages=create_default_stages(),
            **self._clone_overrides(),
        )

    def _clone_overrides(self) -> dict[str, Any]:
        return {}

    def stage_status(self, key: str) -> StageStatus:
        """Current status of one lifecycle stage; unknown stage names raise ValueError."""
        return self.stages[validate_stage_key(key)].status


# =============================================================================
# PIPING
# =============================================================================


def _default_joints() -> list[StageStatus]:
    return [StageStatus.NOT_STARTED, StageStatus.NOT_STARTED]


@dataclass
class Pipe(Entity):
    """
    Straight pipe run drawn as a capsule.

    Attributes:
        length: Run length along the pipe axis
        diameter: Outside diameter
        vertical: Axis orientation, horizontal when False
        joints: Weld status of the near and far end
    """

    length: float = 200.0
    diameter: float = 20.0
    vertical: bool = False
    joints: list[StageStatus] = field(default_factory=_default_joints)

    kind: ClassVar[EntityKind] = EntityKind.PIPE
    geometry_fields: ClassVar[tuple[str, ...]] = ("length", "diameter", "vertical")
    dimension_defaults: ClassVar[dict[str, float]] = {"length": 200.0, "diameter": 20.0}
    is_piping: ClassVar[bool] = True

    def __post_init__(self):
        super().__post_init__()
        self.vertical = bool(self.vertical)

    def generate_outline(self) -> Outline:
        return make_pipe_outline(self.center, self.length, self.diameter, self.vertical)

    def half_extent(self) -> tuple[float, float]:
        along, across = self.length / 2, self.diameter / 2
        return (across, along) if self.vertical else (along, across)

    def footprint_half_extent(self) -> tuple[float, float]:
        along = self.length / 2
        return (20.0, along) if self.vertical else (along, 20.0)

    def bottom_offset(self) -> float:
        return self.length / 2 if self.vertical else self.diameter / 2

    def joint_points(self) -> tuple[Point, ...]:
        return pipe_joint_points(self.center, self.length, self.vertical)

    def rotate(self) -> bool:
        self.vertical = not self.vertical
        return True

    def _clone_overrides(self) -> dict[str, Any]:
        return {"joints": list(self.joints)}


@dataclass
class Elbow(Entity):
    """
    90° long-radius elbow.

    Attributes:
        diameter: Pipe diameter
        rotation: Quarter turns 0..3 about the center
        joints: Weld status of the two faces
    """

    diameter: float = 20.0
    rotation: int = 0
    joints: list[StageStatus] = field(default_factory=_default_joints)

    kind: ClassVar[EntityKind] = EntityKind.ELBOW
    geometry_fields: ClassVar[tuple[str, ...]] = ("diameter", "rotation")
    dimension_defaults: ClassVar[dict[str, float]] = {"diameter": 20.0}
    is_piping: ClassVar[bool] = True

    # Selection box half size; elbows carry no length/height to size it from
    SELECTION_HALF_SIZE: ClassVar[float] = 10.0
    FOOTPRINT_HALF_SIZE: ClassVar[float] = 30.0

    def __post_init__(self):
        super().__post_init__()
        try:
            self.rotation = normalize_rotation(int(self.rotation))
        except (TypeError, ValueError):
            self.rotation = 0

    def generate_outline(self) -> Outline:
        return make_elbow_outline(self.center, self.diameter, self.rotation)

    def half_extent(self) -> tuple[float, float]:
        return (self.SELECTION_HALF_SIZE, self.SELECTION_HALF_SIZE)

    def footprint_half_extent(self) -> tuple[float, float]:
        return (self.FOOTPRINT_HALF_SIZE, self.FOOTPRINT_HALF_SIZE)

    def bottom_offset(self) -> float:
        return self.diameter / 2

    @property
    def bend_radius(self) -> float:
        return bend_radius(self.diameter)

    def joint_points(self) -> tuple[Point, ...]:
        return elbow_joint_points(self.center, self.diameter, self.rotation)

    def rotate(self) -> bool:
        self.rotation = normalize_rotation(self.rotation + 1)
        return True

    def _clone_overrides(self) -> dict[str, Any]:
        return {"joints": list(self.joints)}


# =============================================================================
# SUPPORTS
# =============================================================================


@dataclass
class SupportBase(Entity):
    """
    Common base of the top-anchored supports.

    center.y is the top contact surface; the structure extends down to
    ``base_y = center.y + height``.
    """

    width: float = 150.0
    height: float = 80.0

    geometry_fields: ClassVar[tuple[str, ...]] = ("width", "height")
    is_support: ClassVar[bool] = True

    @property
    def top_y(self) -> float:
        return self.center[1]

    @property
    def base_y(self) -> float:
        return self.center[1] + self.height

    def half_extent(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)

    def approx_bounds(self) -> Bounds:
        x, y = self.center
        return Bounds(x - self.width / 2, y, x + self.width / 2, y + self.height)


@dataclass
class RackSupport(SupportBase):
    """Pipe rack: beam on two legs with feet and optional bracing."""

    kind: ClassVar[EntityKind] = EntityKind.SUPPORT
    dimension_defaults: ClassVar[dict[str, float]] = {"width": 150.0, "height": 80.0}

    def generate_outline(self) -> Outline:
        return make_rack_outline(self.center, self.width, self.height)


@dataclass
class Cantilever(SupportBase):
    """Single-post cantilever bracket."""

    width: float = 100.0
    height: float = 120.0

    kind: ClassVar[EntityKind] = EntityKind.CANTILEVER
    dimension_defaults: ClassVar[dict[str, float]] = {"width": 100.0, "height": 120.0}

    def generate_outline(self) -> Outline:
        return make_cantilever_outline(self.center, self.width, self.height)


@dataclass
class FloatingSupport(SupportBase):
    """Loose block support."""

    width: float = 30.0
    height: float = 30.0

    kind: ClassVar[EntityKind] = EntityKind.FLOATING_SUPPORT
    dimension_defaults: ClassVar[dict[str, float]] = {"width": 30.0, "height": 30.0}

    def generate_outline(self) -> Outline:
        return make_floating_support_outline(self.center, self.width, self.height)


# =============================================================================
# ANNOTATION SHAPES
# =============================================================================


@dataclass
class Rectangle(Entity):
    width: float = 100.0
    height: float = 100.0

    kind: ClassVar[EntityKind] = EntityKind.RECTANGLE
    geometry_fields: ClassVar[tuple[str, ...]] = ("width", "height")
    dimension_defaults: ClassVar[dict[str, float]] = {"width": 100.0, "height": 100.0}

    def generate_outline(self) -> Outline:
        return make_rectangle_outline(self.center, self.width, self.height)

    def half_extent(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)


@dataclass
class Zone(Entity):
    """Work zone rectangle with a labelled callout below it."""

    width: float = 200.0
    height: float = 200.0

    kind: ClassVar[EntityKind] = EntityKind.ZONE
    # The callout is sized from the text, so label and note are geometry too
    geometry_fields: ClassVar[tuple[str, ...]] = ("width", "height", "label", "note")
    dimension_defaults: ClassVar[dict[str, float]] = {"width": 200.0, "height": 200.0}

    def generate_outline(self) -> Outline:
        return make_zone_outline(self.center, self.width, self.height, self.label, self.note)

    def half_extent(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)


@dataclass
class Circle(Entity):
    diameter: float = 100.0

    kind: ClassVar[EntityKind] = EntityKind.CIRCLE
    geometry_fields: ClassVar[tuple[str, ...]] = ("diameter",)
    dimension_defaults: ClassVar[dict[str, float]] = {"diameter": 100.0}

    @property
    def radius(self) -> float:
        return self.diameter / 2

    def generate_outline(self) -> Outline:
        return make_circle_outline(self.center, self.diameter)

    def half_extent(self) -> tuple[float, float]:
        return (self.radius, self.radius)


@dataclass
class Text(Entity):
    """Free text label; the label field is the displayed text."""

    font_size: float = 14.0

    kind: ClassVar[EntityKind] = EntityKind.TEXT
    geometry_fields: ClassVar[tuple[str, ...]] = ("label", "font_size")
    dimension_defaults: ClassVar[dict[str, float]] = {"font_size": 14.0}

    def generate_outline(self) -> Outline:
        return make_text_outline(self.center, self.label, self.font_size)

    def half_extent(self) -> tuple[float, float]:
        width, height = text_extent(self.label, self.font_size)
        return (width / 2, height / 2)


# =============================================================================
# FACTORY
# =============================================================================

ENTITY_TYPES: dict[EntityKind, type[Entity]] = {
    EntityKind.PIPE: Pipe,
    EntityKind.ELBOW: Elbow,
    EntityKind.SUPPORT: RackSupport,
    EntityKind.CANTILEVER: Cantilever,
    EntityKind.FLOATING_SUPPORT: FloatingSupport,
    EntityKind.RECTANGLE: Rectangle,
    EntityKind.CIRCLE: Circle,
    EntityKind.ZONE: Zone,
    EntityKind.TEXT: Text,
}


def create_entity(kind: EntityKind | str, entity_id: str, center: Point, **fields: Any) -> Entity:
    """
    Build an entity of the given kind.

    Unknown field names raise TypeError from the dataclass constructor;
    dimension values are coerced with their kind default.
    """
    cls = ENTITY_TYPES[EntityKind.parse(kind)]
    return cls(id=entity_id, center=center, **fields)
