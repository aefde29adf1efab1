"""
Editor settings schema.

Every tunable constant of the layout engine lives in ``EditorSettings``.
Settings can be:
- Used as-is (the defaults reproduce the stock editor behaviour)
- Loaded from a YAML file with ``EditorSettings.from_yaml``
- Written back out with ``to_yaml`` as a starting point for editing
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from .entities import ENTITY_TYPES, EntityKind, coerce_dimension, coerce_point
from .geometry import Point


def _check_keys(cls: type, data: dict[str, Any], context: str) -> None:
    """Raise ValueError for keys that are not fields of ``cls``."""
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown {context} setting(s): {', '.join(unknown)}")


def _coerce_fields(obj: Any) -> None:
    """Coerce every float field of a flat settings dataclass in place."""
    for f in fields(obj):
        setattr(obj, f.name, coerce_dimension(getattr(obj, f.name), f.default))


@dataclass
class SnapSettings:
    """
    Snapping thresholds in world units.

    Attributes:
        general: Peer-to-peer alignment distance (pipe to pipe, support to support)
        gravity: Pipe onto support distance, deliberately wider than general
    """

    general: float = 15.0
    gravity: float = 40.0

    def __post_init__(self):
        _coerce_fields(self)


@dataclass
class MinimumSizes:
    """Smallest dimension a resize may produce."""

    generic: float = 20.0
    pipe_length: float = 50.0
    circle: float = 20.0

    def __post_init__(self):
        _coerce_fields(self)


@dataclass
class ZoomSettings:
    """
    Zoom limits and step sizes.

    Attributes:
        min_scale: Most zoomed-out scale
        max_scale: Most zoomed-in scale
        wheel_step: Scale change per wheel notch
        button_step: Scale change per zoom button press
    """

    min_scale: float = 0.2
    max_scale: float = 3.0
    wheel_step: float = 0.1
    button_step: float = 0.2

    def __post_init__(self):
        _coerce_fields(self)
        if self.min_scale > self.max_scale:
            raise ValueError(
                f"zoom.min_scale ({self.min_scale}) must not exceed zoom.max_scale ({self.max_scale})"
            )


@dataclass
class KindDefaults:
    """
    Spawn position and dimensions for one entity kind.

    Attributes:
        position: World point new entities are placed at
        dimensions: Field name -> value, passed to the entity constructor
    """

    position: Point = (400.0, 300.0)
    dimensions: dict[str, float] = field(default_factory=dict)

    def __post_init__(self):
        # Convert lists to tuples if needed (from YAML loading)
        self.position = coerce_point(self.position, (400.0, 300.0))
        if not isinstance(self.dimensions or {}, dict):
            raise ValueError(f"Kind dimensions must be a mapping, got {type(self.dimensions).__name__}")
        self.dimensions = {str(k): v for k, v in (self.dimensions or {}).items()}

    def coerce_for(self, kind: EntityKind) -> None:
        """
        Check dimension names against ``kind`` and coerce their values.

        Values fall back to the entity default the same way entity fields do.

        Raises:
            ValueError: If a dimension is not a field of the kind
        """
        allowed = ENTITY_TYPES[kind].dimension_defaults
        unknown = sorted(set(self.dimensions) - set(allowed))
        if unknown:
            raise ValueError(f"Unknown kinds.{kind.name} dimension(s): {', '.join(unknown)}")
        self.dimensions = {k: coerce_dimension(v, allowed[k]) for k, v in self.dimensions.items()}


def _stock_kind_defaults() -> dict[str, KindDefaults]:
    return {
        EntityKind.SUPPORT.name: KindDefaults((400.0, 300.0), {"width": 150.0, "height": 80.0}),
        EntityKind.CANTILEVER.name: KindDefaults((400.0, 300.0), {"width": 100.0, "height": 120.0}),
        EntityKind.FLOATING_SUPPORT.name: KindDefaults((400.0, 300.0), {"width": 30.0, "height": 30.0}),
        EntityKind.RECTANGLE.name: KindDefaults((400.0, 300.0), {"width": 100.0, "height": 100.0}),
        EntityKind.CIRCLE.name: KindDefaults((400.0, 300.0), {"diameter": 100.0}),
        EntityKind.PIPE.name: KindDefaults((400.0, 250.0), {"length": 200.0}),
        EntityKind.ELBOW.name: KindDefaults((400.0, 250.0), {}),
        EntityKind.ZONE.name: KindDefaults((400.0, 300.0), {"width": 200.0, "height": 200.0}),
        EntityKind.TEXT.name: KindDefaults((400.0, 300.0), {"font_size": 14.0}),
    }


@dataclass
class EditorSettings:
    """
    Complete editor configuration.

    Attributes:
        snap: Snapping thresholds
        minimums: Resize minimum clamps
        zoom: Zoom limits and steps
        nudge_step: Keyboard nudge distance in world units
        clone_offset: Offset applied to cloned entities
        zone_padding: Margin around the selection when creating a zone
        pipe_diameter: Diameter used for newly added pipes and elbows
        kinds: Per-kind spawn defaults keyed by kind name (e.g. "PIPE")
    """

    snap: SnapSettings = field(default_factory=SnapSettings)
    minimums: MinimumSizes = field(default_factory=MinimumSizes)
    zoom: ZoomSettings = field(default_factory=ZoomSettings)
    nudge_step: float = 1.0
    clone_offset: Point = (30.0, 30.0)
    zone_padding: float = 30.0
    pipe_diameter: float = 20.0
    kinds: dict[str, KindDefaults] = field(default_factory=_stock_kind_defaults)

    def __post_init__(self):
        # Convert nested dicts to dataclasses if needed (from YAML loading)
        if isinstance(self.snap, dict):
            _check_keys(SnapSettings, self.snap, "snap")
            self.snap = SnapSettings(**self.snap)
        if isinstance(self.minimums, dict):
            _check_keys(MinimumSizes, self.minimums, "minimums")
            self.minimums = MinimumSizes(**self.minimums)
        if isinstance(self.zoom, dict):
            _check_keys(ZoomSettings, self.zoom, "zoom")
            self.zoom = ZoomSettings(**self.zoom)

        self.nudge_step = coerce_dimension(self.nudge_step, 1.0)
        self.zone_padding = coerce_dimension(self.zone_padding, 30.0)
        self.pipe_diameter = coerce_dimension(self.pipe_diameter, 20.0)
        self.clone_offset = coerce_point(self.clone_offset, (30.0, 30.0))

        # Partial kind tables from YAML are merged over the stock defaults
        merged = _stock_kind_defaults()
        for name, value in (self.kinds or {}).items():
            kind = EntityKind.parse(name)
            if value is None:
                # An empty YAML entry keeps the stock defaults
                continue
            if isinstance(value, dict):
                _check_keys(KindDefaults, value, f"kinds.{kind.name}")
                value = KindDefaults(**value)
            elif not isinstance(value, KindDefaults):
                raise ValueError(f"kinds.{kind.name} must be a mapping, got {type(value).__name__}")
            value.coerce_for(kind)
            merged[kind.name] = value
        self.kinds = merged

    def defaults_for(self, kind: EntityKind | str) -> KindDefaults:
        return self.kinds[EntityKind.parse(kind).name]

    # ----- YAML -----

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> EditorSettings:
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings must be a mapping, got {type(data).__name__}")
        _check_keys(cls, data, "editor")
        return cls(**data)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> EditorSettings:
        """Load editor settings from a YAML file."""
        with open(yaml_path) as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data)

    def to_yaml(self, yaml_path: str | Path) -> None:
        """Save the editor settings to a YAML file."""
        data = self._to_dict()
        with open(yaml_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def _to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary suitable for YAML serialization."""
        return {
            "snap": {"general": self.snap.general, "gravity": self.snap.gravity},
            "minimums": {
                "generic": self.minimums.generic,
                "pipe_length": self.minimums.pipe_length,
                "circle": self.minimums.circle,
            },
            "zoom": {
                "min_scale": self.zoom.min_scale,
                "max_scale": self.zoom.max_scale,
                "wheel_step": self.zoom.wheel_step,
                "button_step": self.zoom.button_step,
            },
            "nudge_step": self.nudge_step,
            "clone_offset": list(self.clone_offset),
            "zone_padding": self.zone_padding,
            "pipe_diameter": self.pipe_diameter,
            "kinds": {
                name: {"position": list(d.position), "dimensions": dict(d.dimensions)}
                for name, d in self.kinds.items()
            },
        }
