"""
Annotation shape outline generators: rectangle, work zone, circle and the
text hit box.

Text sizes use a monospace-style width estimate, not real font metrics.
"""

from __future__ import annotations

from .outline import ArcTo, Contour, Outline, Point, clamp_extent, polyline

# =============================================================================
# TEXT METRICS
# =============================================================================

# Average glyph width as a fraction of the font size
GLYPH_WIDTH_RATIO = 0.6
DEFAULT_TEXT_WIDTH = 50.0
DEFAULT_FONT_SIZE = 12.0

# =============================================================================
# ZONE CALLOUT
# =============================================================================

LEADER_LENGTH = 40.0
LABEL_CHAR_WIDTH = 9.0
NOTE_CHAR_WIDTH = 7.0
CALLOUT_PADDING = 30.0
CALLOUT_MIN_WIDTH = 160.0
CALLOUT_HEIGHT = 40.0
CALLOUT_HEIGHT_WITH_NOTE = 60.0


def _box(center: Point, width: float, height: float) -> list[Point]:
    x, y = center
    hw = width / 2
    hh = height / 2
    return [(x - hw, y - hh), (x + hw, y - hh), (x + hw, y + hh), (x - hw, y + hh)]


def make_rectangle_outline(center: Point, width: float, height: float) -> Outline:
    """Axis-aligned rectangle centered on center."""
    return Outline((polyline(_box(center, clamp_extent(width), clamp_extent(height)), closed=True),))


def _as_text(value: object) -> str:
    return "" if value is None else str(value)


def callout_size(label: str, note: str = "") -> tuple[float, float]:
    """
    Estimate the zone callout box size from its text.

    Returns:
        (width, height)
    """
    label, note = _as_text(label), _as_text(note)
    has_note = bool(note and note.strip())
    note_len = len(note) if has_note else 0
    width = max(
        CALLOUT_MIN_WIDTH,
        len(label) * LABEL_CHAR_WIDTH + CALLOUT_PADDING,
        note_len * NOTE_CHAR_WIDTH + CALLOUT_PADDING,
    )
    height = CALLOUT_HEIGHT_WITH_NOTE if has_note else CALLOUT_HEIGHT
    return width, height


def make_zone_outline(
    center: Point,
    width: float,
    height: float,
    label: str = "",
    note: str = "",
) -> Outline:
    """
    Work zone: the zone rectangle, a leader line dropping from its bottom edge
    and a callout box sized to the label and note.
    """
    x, y = center
    w = clamp_extent(width)
    h = clamp_extent(height)
    bottom = y + h / 2
    box_top = bottom + LEADER_LENGTH
    box_w, box_h = callout_size(label, note)

    zone = polyline(_box(center, w, h), closed=True)
    leader = polyline([(x, bottom), (x, box_top)])
    callout = polyline(
        [
            (x - box_w / 2, box_top),
            (x + box_w / 2, box_top),
            (x + box_w / 2, box_top + box_h),
            (x - box_w / 2, box_top + box_h),
        ],
        closed=True,
    )
    return Outline((zone, leader, callout))


def make_circle_outline(center: Point, diameter: float) -> Outline:
    """Full circle drawn as two half-circle arcs."""
    x, y = center
    r = clamp_extent(diameter) / 2
    contour = Contour(
        start=(x - r, y),
        segments=(
            ArcTo(r, (x + r, y), large_arc=True, sweep=False),
            ArcTo(r, (x - r, y), large_arc=True, sweep=False),
        ),
    )
    return Outline((contour,))


def text_extent(text: str, font_size: float) -> tuple[float, float]:
    """
    Estimated (width, height) of a single line of text.

    Empty text and a zero font size fall back to default sizes.
    """
    try:
        font_size = float(font_size)
    except (TypeError, ValueError):
        font_size = 0.0
    if font_size != font_size or font_size < 0:
        font_size = 0.0
    text = _as_text(text)
    width = len(text) * font_size * GLYPH_WIDTH_RATIO or DEFAULT_TEXT_WIDTH
    height = font_size or DEFAULT_FONT_SIZE
    return width, height


def make_text_outline(center: Point, text: str, font_size: float) -> Outline:
    """Invisible hit box around a text label, used only for selection."""
    width, height = text_extent(text, font_size)
    return make_rectangle_outline(center, width, height)
