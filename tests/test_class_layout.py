"""Layout tests for class diagrams -- grid placement, box sizing and
relationship markers."""
from __future__ import annotations

import math

import pytest

from mermaid_layout import LayoutOptions, Size, layout, parse
from mermaid_layout.class_diagram.layout import CLS, layout_class_diagram, marker_points
from mermaid_layout.class_diagram.types import ClassDiagram
from mermaid_layout.examples import CLASS
from mermaid_layout.types import Point

SIZE = Size(800, 600)


def positioned(text: str, size: Size = SIZE, options: LayoutOptions | None = None):
    return layout_class_diagram(parse(text).payload, size, options)


def box(result, name: str):
    return next(c for c in result.classes if c.name == name)


def approx_point(p: Point, x: float, y: float) -> bool:
    return p.x == pytest.approx(x) and p.y == pytest.approx(y)


# ============================================================================
# Grid placement
# ============================================================================


class TestGrid:
    def test_empty_diagram_uses_default_canvas(self):
        result = layout_class_diagram(ClassDiagram(), SIZE)
        assert result.classes == []
        assert (result.width, result.height) == (800, 600)

    def test_fourth_class_wraps_to_second_row(self):
        result = positioned(CLASS)
        animal, duck, fish, zebra = (box(result, n) for n in ("Animal", "Duck", "Fish", "Zebra"))
        assert animal.y == duck.y == fish.y
        assert animal.x < duck.x < fish.x
        assert zebra.y > animal.y

    def test_rows_do_not_overlap(self):
        result = positioned(CLASS)
        first_row = [box(result, n) for n in ("Animal", "Duck", "Fish")]
        zebra = box(result, "Zebra")
        row_bottom = max(c.y + c.height / 2 for c in first_row)
        assert zebra.y - zebra.height / 2 >= row_bottom + CLS["v_spacing"] - 1e-9

    def test_cells_do_not_overlap(self):
        result = positioned(CLASS)
        row = sorted((box(result, n) for n in ("Animal", "Duck", "Fish")), key=lambda c: c.x)
        for left, right in zip(row, row[1:]):
            assert left.x + left.width / 2 < right.x - right.width / 2

    def test_grid_starts_at_padding(self):
        result = positioned(CLASS)
        assert min(c.x - c.width / 2 for c in result.classes) >= CLS["padding"]
        assert min(c.y - c.height / 2 for c in result.classes) == pytest.approx(CLS["padding"])

    def test_classes_per_row_option(self):
        result = positioned(CLASS, options=LayoutOptions(classes_per_row=1))
        ys = [c.y for c in result.classes]
        assert ys == sorted(ys)
        assert len(set(ys)) == 4

    def test_canvas_covers_content(self):
        result = positioned(CLASS, Size(10, 10))
        for c in result.classes:
            assert c.x + c.width / 2 <= result.width
            assert c.y + c.height / 2 <= result.height

    def test_canvas_keeps_available_size(self):
        result = positioned("classDiagram\n  class A", Size(2000, 1500))
        assert (result.width, result.height) == (2000, 1500)


# ============================================================================
# Box sizing
# ============================================================================


class TestBoxSize:
    def test_compartment_heights(self):
        animal = box(positioned(CLASS), "Animal")
        row = CLS["member_row_height"]
        pad = CLS["compartment_padding"]
        assert animal.header_height == CLS["header_height"]
        assert animal.attributes_height == 2 * row + pad
        assert animal.methods_height == 2 * row + pad
        assert animal.height == animal.header_height + animal.attributes_height + animal.methods_height

    def test_empty_class_is_header_only(self):
        empty = box(positioned("classDiagram\n  class Empty"), "Empty")
        assert empty.height == CLS["header_height"]
        assert empty.attributes_height == empty.methods_height == 0

    def test_annotation_grows_header(self):
        shape = box(positioned("classDiagram\n  <<interface>> Shape"), "Shape")
        assert shape.header_height == CLS["header_height"] + CLS["annotation_height"]

    def test_custom_measure(self):
        options = LayoutOptions(measure=lambda text, size: (len(text) * 10.0, size))
        a = box(positioned("classDiagram\n  class A", options=options), "A")
        assert a.width == 10 + CLS["box_pad_x"] * 2

    def test_longest_member_sets_width(self):
        options = LayoutOptions(measure=lambda text, size: (len(text) * 10.0, size))
        a = box(positioned("classDiagram\n  A : +String aVeryLongAttributeName", options=options), "A")
        assert a.width == len("+String aVeryLongAttributeName") * 10 + CLS["box_pad_x"] * 2


# ============================================================================
# Relationships
# ============================================================================


class TestRelationships:
    def test_inheritance_marker_at_parent(self):
        result = positioned(CLASS)
        rel = result.relationships[0]
        assert (rel.from_, rel.to) == ("Duck", "Animal")
        assert rel.marker_kind == "hollow_triangle"
        assert rel.marker_at == "to"
        assert rel.marker[0] == rel.end
        assert len(rel.marker) == 3

    def test_endpoints_on_box_outlines(self):
        result = positioned(CLASS)
        rel = result.relationships[0]
        duck, animal = box(result, "Duck"), box(result, "Animal")
        # Side by side in one row: horizontal line between facing edges
        assert rel.start.x == pytest.approx(duck.x - duck.width / 2)
        assert rel.end.x == pytest.approx(animal.x + animal.width / 2)

    def test_composition_diamond_at_whole(self):
        result = positioned("classDiagram\n  Car *-- Engine")
        rel = result.relationships[0]
        assert rel.marker_kind == "filled_diamond"
        assert rel.marker_at == "from"
        assert rel.marker[0] == rel.start
        assert len(rel.marker) == 4

    def test_aggregation_is_hollow(self):
        rel = positioned("classDiagram\n  Car o-- Wheel").relationships[0]
        assert rel.marker_kind == "hollow_diamond"

    @pytest.mark.parametrize(
        "line, line_style, marker_kind",
        [
            ("A --> B", "solid", "open_arrow"),
            ("A ..> B", "dashed", "open_arrow"),
            ("A ..|> B", "dashed", "hollow_triangle"),
        ],
    )
    def test_line_styles(self, line, line_style, marker_kind):
        rel = positioned(f"classDiagram\n  {line}").relationships[0]
        assert (rel.line_style, rel.marker_kind) == (line_style, marker_kind)

    def test_label_at_midpoint(self):
        rel = positioned("classDiagram\n  A --> B : uses").relationships[0]
        assert rel.label == "uses"
        assert approx_point(rel.label_position, (rel.start.x + rel.end.x) / 2, (rel.start.y + rel.end.y) / 2)

    def test_self_relationship_has_no_marker(self):
        rel = positioned("classDiagram\n  A --> A").relationships[0]
        assert rel.marker == []
        assert rel.start == rel.end


class TestMarkerPoints:
    def test_triangle_points_back_from_tip(self):
        points = marker_points("hollow_triangle", Point(0, 0), 0.0)
        assert points[0] == Point(0, 0)
        assert approx_point(points[1], -10 * math.cos(math.pi / 6), 5)
        assert approx_point(points[2], -10 * math.cos(math.pi / 6), -5)

    def test_diamond_extends_two_lengths(self):
        points = marker_points("filled_diamond", Point(0, 0), 0.0)
        assert len(points) == 4
        assert approx_point(points[2], -20, 0)
        assert {round(abs(p.y)) for p in (points[1], points[3])} == {CLS["diamond_half_width"]}


# ============================================================================
# Positions map
# ============================================================================


class TestPositions:
    def test_keyed_by_class_name(self):
        result = layout(parse(CLASS), SIZE)
        assert set(result.positions) == {"Animal", "Duck", "Fish", "Zebra"}
        duck = next(c for c in result.layout.classes if c.name == "Duck")
        assert result.positions["Duck"] == Point(duck.x, duck.y)
