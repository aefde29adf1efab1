"""
pypelayout - 2D piping layout engine

Procedural outlines for pipes, elbows, supports and annotation shapes, plus
the interactive placement layer: move with neighbour snapping, resize with
per-shape anchors, rotation, selection and pan/zoom.
"""

# Entity model
from .entities import (
    Cantilever,
    Circle,
    Elbow,
    Entity,
    EntityKind,
    FloatingSupport,
    Pipe,
    RackSupport,
    Rectangle,
    SupportBase,
    Text,
    Zone,
    coerce_dimension,
    create_entity,
)

# Editor and engines
from .editor import LayoutEditor, resolve_diameter
from .placement import PlacementEngine, snap_position
from .resize import ResizeEngine, handle_delta, resize_entity, resize_handles
from .selection import SelectionModel, SelectionState, entities_in_rect
from .store import EntityStore, IdAllocator
from .view import ViewTransform

# Progress bookkeeping
from .progress import StageRecord, StageStatus

# Configuration and output
from .logging_config import setup_logging
from .settings import EditorSettings
from .svg_export import render_svg, write_svg

__version__ = "0.1.0"

__all__ = [
    # Entities
    "Entity",
    "EntityKind",
    "Pipe",
    "Elbow",
    "SupportBase",
    "RackSupport",
    "Cantilever",
    "FloatingSupport",
    "Rectangle",
    "Zone",
    "Circle",
    "Text",
    "create_entity",
    "coerce_dimension",
    # Engines
    "LayoutEditor",
    "EntityStore",
    "IdAllocator",
    "SelectionModel",
    "SelectionState",
    "PlacementEngine",
    "ResizeEngine",
    "ViewTransform",
    "entities_in_rect",
    "snap_position",
    "resize_entity",
    "resize_handles",
    "handle_delta",
    "resolve_diameter",
    # Progress
    "StageStatus",
    "StageRecord",
    # Config / output
    "EditorSettings",
    "setup_logging",
    "render_svg",
    "write_svg",
]
