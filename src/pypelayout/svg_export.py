"""
Minimal SVG document writer.

One unstyled <path> per entity, in store order. The viewBox fits the
approximate bounds of every entity plus a margin.
"""

from __future__ import annotations

from collections.abc import Iterable
from html import escape
from pathlib import Path

from .entities import Entity
from .geometry import Bounds
from .geometry.outline import format_number

DEFAULT_MARGIN = 20.0


def path_element(entity: Entity) -> str:
    """SVG path element for one entity."""
    return (
        f'<path id="{escape(entity.id)}" data-kind="{entity.kind.name}" '
        f'd="{entity.outline.to_svg_path()}" fill="none" stroke="black"/>'
    )


def render_svg(entities: Iterable[Entity], margin: float = DEFAULT_MARGIN) -> str:
    """Render entities to a standalone SVG document string."""
    entities = list(entities)
    box = Bounds.union(e.approx_bounds() for e in entities)
    for e in entities:
        vertices = e.outline.vertices()
        if len(vertices):
            outline_box = Bounds(*vertices.min(axis=0), *vertices.max(axis=0))
            box = outline_box if box is None else Bounds.union([box, outline_box])
    if box is None:
        box = Bounds(0.0, 0.0, 0.0, 0.0)
    box = box.expand(margin)

    view_box = " ".join(format_number(v) for v in (box.min_x, box.min_y, box.width, box.height))
    lines = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="{view_box}" '
        f'width="{format_number(box.width)}" height="{format_number(box.height)}">'
    ]
    lines.extend(f"  {path_element(e)}" for e in entities)
    lines.append("</svg>")
    return "\n".join(lines) + "\n"


def write_svg(entities: Iterable[Entity], path: str | Path, margin: float = DEFAULT_MARGIN) -> Path:
    """Write entities to an SVG file and return its path."""
    path = Path(path)
    path.write_text(render_svg(entities, margin), encoding="utf-8")
    return path
