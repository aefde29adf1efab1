"""
Tests for the typed entity model, the entity store and id allocation.
"""

import logging

import numpy as np
import pytest

from pypelayout.entities import (
    Cantilever,
    Circle,
    Elbow,
    EntityKind,
    FloatingSupport,
    Pipe,
    RackSupport,
    Rectangle,
    Text,
    Zone,
    coerce_dimension,
    create_entity,
)
from pypelayout.geometry import Bounds
from pypelayout.progress import StageStatus
from pypelayout.store import EntityStore, IdAllocator


# =============================================================================
# PARSING TESTS
# =============================================================================


class TestCoerceDimension:
    """Numeric fields parse with a fallback and never raise."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (12, 12.0),
            (12.5, 12.5),
            ("150", 150.0),
            ("6m", 6.0),
            ("1e2 mm", 100.0),
            (" 7.5 ", 7.5),
        ],
    )
    def test_parses(self, value, expected: float):
        assert coerce_dimension(value, 99.0) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", -3, 0, float("nan"), float("inf"), True, [1]])
    def test_falls_back(self, value):
        assert coerce_dimension(value, 99.0) == 99.0


class TestEntityKind:
    """Kind lookup by name, alias or id prefix."""

    @pytest.mark.parametrize(
        "name,kind",
        [
            ("pipe", EntityKind.PIPE),
            ("SUPPORT", EntityKind.SUPPORT),
            ("SUP", EntityKind.SUPPORT),
            ("floating", EntityKind.FLOATING_SUPPORT),
            ("floating-support", EntityKind.FLOATING_SUPPORT),
            (EntityKind.TEXT, EntityKind.TEXT),
        ],
    )
    def test_parse(self, name, kind: EntityKind):
        assert EntityKind.parse(name) is kind

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError, match="Unknown entity kind"):
            EntityKind.parse("valve")

    @pytest.mark.parametrize(
        "kind,cls",
        [
            ("pipe", Pipe),
            ("elbow", Elbow),
            ("support", RackSupport),
            ("cantilever", Cantilever),
            ("floating_support", FloatingSupport),
            ("rectangle", Rectangle),
            ("circle", Circle),
            ("zone", Zone),
            ("text", Text),
        ],
    )
    def test_factory(self, kind: str, cls: type):
        entity = create_entity(kind, "X-1", (0, 0))
        assert type(entity) is cls
        assert entity.kind.name == EntityKind.parse(kind).name


# =============================================================================
# ENTITY TESTS
# =============================================================================


class TestEntityFields:
    """Construction coerces fields to their typed form."""

    def test_unparsable_dimension_uses_kind_default(self):
        pipe = Pipe("P-1", (0, 0), length="abc", diameter=None)
        assert pipe.length == 200.0
        assert pipe.diameter == 20.0

    def test_string_dimensions_are_parsed(self):
        support = RackSupport("S-1", ["10", "20"], width="120", height="60cm")
        assert support.center == (10.0, 20.0)
        assert support.width == 120.0
        assert support.height == 60.0

    def test_elbow_rotation_normalized(self):
        assert Elbow("E-1", rotation=7).rotation == 3
        assert Elbow("E-2", rotation="bad").rotation == 0

    def test_kind_defaults(self):
        assert (Cantilever("C").width, Cantilever("C").height) == (100.0, 120.0)
        assert (FloatingSupport("F").width, FloatingSupport("F").height) == (30.0, 30.0)
        assert Circle("O").diameter == 100.0

    def test_dimensions_property(self):
        assert RackSupport("S").dimensions == {"width": 150.0, "height": 80.0}

    def test_label_and_note_become_text(self):
        zone = Zone("Z-1", (0, 0), label=5, note=None)
        assert (zone.label, zone.note) == ("5", "")
        assert zone.outline.contours

    def test_text_outline_with_numeric_label(self):
        text = Text("T-1", (0, 0), label=123, font_size=10)
        np.testing.assert_allclose(text.approx_bounds().width, 18.0)
        assert text.outline.to_svg_path().startswith("M -9 -5")


class TestOutlineCache:
    """Outlines are derived and can never go stale."""

    def test_outline_reused_while_unchanged(self):
        pipe = Pipe("P-1", (0, 0))
        assert pipe.outline is pipe.outline

    @pytest.mark.parametrize(
        "field,value",
        [("length", 300.0), ("diameter", 25.0), ("vertical", True), ("center", (5.0, 5.0))],
    )
    def test_geometry_change_regenerates(self, field: str, value):
        pipe = Pipe("P-1", (0, 0))
        before = pipe.outline
        setattr(pipe, field, value)
        after = pipe.outline
        assert after != before
        assert after == Pipe("P-2", pipe.center, length=pipe.length, diameter=pipe.diameter,
                             vertical=pipe.vertical).outline

    def test_label_is_geometry_for_zone_only(self):
        zone = Zone("Z-1", (0, 0))
        rect = Rectangle("R-1", (0, 0))
        zone_before, rect_before = zone.outline, rect.outline
        zone.label = "A much longer zone label than before"
        rect.label = "Anything"
        assert zone.outline != zone_before
        assert rect.outline is rect_before

    def test_text_outline_follows_text(self):
        text = Text("T-1", (0, 0), label="ab", font_size=10)
        narrow = np.ptp(text.outline.vertices()[:, 0])
        text.label = "abcdef"
        wide = np.ptp(text.outline.vertices()[:, 0])
        assert narrow == pytest.approx(12)
        assert wide == pytest.approx(36)


class TestEntityGeometryQueries:
    """Bounds, bottom offsets, joints and rotation per kind."""

    def test_pipe_bounds_follow_orientation(self):
        pipe = Pipe("P", (400, 250), length=200, diameter=20)
        assert pipe.approx_bounds() == Bounds(300, 240, 500, 260)
        pipe.vertical = True
        assert pipe.approx_bounds() == Bounds(390, 150, 410, 350)

    def test_elbow_bounds_use_fixed_half_size(self):
        elbow = Elbow("E", (0, 0), diameter=25)
        assert elbow.approx_bounds() == Bounds(-10, -10, 10, 10)

    def test_support_bounds_are_top_anchored(self):
        support = RackSupport("S", (400, 300))
        assert support.approx_bounds() == Bounds(325, 300, 475, 380)
        assert support.top_y == 300
        assert support.base_y == 380

    def test_text_bounds_use_width_heuristic(self):
        text = Text("T", (0, 0), label="abc", font_size=10)
        assert text.approx_bounds() == Bounds(-9, -5, 9, 5)

    @pytest.mark.parametrize(
        "entity,offset",
        [
            (Pipe("P", diameter=20), 10.0),
            (Pipe("P", length=200, vertical=True), 100.0),
            (Elbow("E", diameter=30), 15.0),
            (RackSupport("S"), 0.0),
            (Rectangle("R"), 0.0),
        ],
    )
    def test_bottom_offset(self, entity, offset: float):
        assert entity.bottom_offset() == offset

    def test_rotation(self):
        pipe, elbow, rect = Pipe("P", (5, 5)), Elbow("E", (5, 5), rotation=3), Rectangle("R")
        assert pipe.rotate() and pipe.vertical
        assert elbow.rotate() and elbow.rotation == 0
        assert not rect.rotate()
        assert pipe.center == elbow.center == (5.0, 5.0)

    def test_joint_points(self):
        assert Pipe("P", (0, 0), length=100).joint_points() == ((-50, 0), (50, 0))
        assert len(Elbow("E").joint_points()) == 2
        assert RackSupport("S").joint_points() == ()

    def test_clone(self):
        pipe = Pipe("P-1", (10, 10), label="Line A", joints=[StageStatus.COMPLETED, StageStatus.NOT_STARTED])
        pipe.stages["lifting"].status = StageStatus.COMPLETED
        copy = pipe.clone("P-9", (30, 30))
        assert copy.id == "P-9"
        assert copy.center == (40.0, 40.0)
        assert copy.label == "Line A (copy)"
        assert copy.joints == pipe.joints and copy.joints is not pipe.joints
        assert copy.stages["lifting"].status is StageStatus.NOT_STARTED
        assert copy.length == pipe.length

    def test_stage_status(self):
        support = RackSupport("S-1")
        assert support.stage_status("scaffolding") is StageStatus.NOT_STARTED
        support.stages["scaffolding"].status = StageStatus.BLOCKED
        assert support.stage_status("scaffolding") is StageStatus.BLOCKED
        with pytest.raises(ValueError, match="Unknown stage"):
            support.stage_status("painting")


# =============================================================================
# STORE TESTS
# =============================================================================


class TestIdAllocator:
    def test_shared_monotonic_counter(self):
        allocator = IdAllocator()
        assert allocator.allocate("pipe") == ("PIPE-1", 1)
        assert allocator.allocate("support") == ("SUP-2", 2)
        assert allocator.allocate(EntityKind.FLOATING_SUPPORT) == ("FLOAT-3", 3)


class TestEntityStore:
    """Test the entity store."""

    def test_create_and_get(self):
        store = EntityStore()
        entity, number = store.create("circle", (1, 2))
        assert number == 1
        assert store.get(entity.id) is entity
        assert entity.id in store
        assert len(store) == 1

    def test_ids_never_reused(self):
        store = EntityStore()
        first, _ = store.create("pipe", (0, 0))
        store.remove(first.id)
        second, _ = store.create("pipe", (0, 0))
        store.clear()
        third, _ = store.create("pipe", (0, 0))
        assert [first.id, second.id, third.id] == ["PIPE-1", "PIPE-2", "PIPE-3"]

    def test_duplicate_id_rejected(self):
        store = EntityStore()
        store.add(Rectangle("R-1"))
        with pytest.raises(ValueError, match="Duplicate"):
            store.add(Rectangle("R-1"))

    def test_remove_unknown_is_ignored(self, caplog):
        store = EntityStore()
        with caplog.at_level(logging.DEBUG, logger="pypelayout"):
            assert store.remove("NOPE-1") is None
        assert "unknown id NOPE-1" in caplog.text

    def test_others_and_order(self):
        store = EntityStore()
        ids = [store.create(kind, (0, 0))[0].id for kind in ("support", "pipe", "elbow")]
        assert store.ids == ids
        assert [e.id for e in store.others(ids[1])] == [ids[0], ids[2]]
        assert [e.id for e in store.get_many(["ELBOW-3", "X", "SUP-1"])] == ["ELBOW-3", "SUP-1"]
