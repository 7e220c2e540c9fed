from __future__ import annotations

import logging
import math

from .types import (
    ClassDiagram,
    ClassEntity,
    MarkerAt,
    MarkerKind,
    PositionedClass,
    PositionedClassDiagram,
    PositionedRelationship,
    RelationshipType,
    attribute_to_string,
    method_to_string,
)
from ..routing import rect_boundary_point
from ..styles import ARROW_HEAD, FONT_SIZES
from ..styles import estimate_text_size
from ..types import LayoutOptions, Point, Size, TextMeasurer

logger = logging.getLogger(__name__)

# ============================================================================
# Class diagram layout engine
#
# Classes are packed into a fixed-column grid in first-seen order. Each row
# is as tall as its tallest box; every cell in a row is as wide as the
# widest box of that row. Relationships are straight lines between box
# outlines, with a UML marker at one end.
# ============================================================================

CLS = {
    # Grid columns
    "classes_per_row": 3,
    # Gap between cells
    "h_spacing": 80,
    "v_spacing": 80,
    # Canvas padding around the grid
    "padding": 100,
    # Header compartment (class name)
    "header_height": 30,
    # Extra header height when an annotation is shown
    "annotation_height": 16,
    # Height of one member row
    "member_row_height": 20,
    # Vertical padding inside a non-empty compartment
    "compartment_padding": 8,
    # Horizontal padding around the widest line
    "box_pad_x": 8,
    # Canvas size for a diagram without classes
    "default_width": 800,
    "default_height": 600,
    # Diamond marker half-width
    "diamond_half_width": 6,
}

# relationship type -> (line style, marker, marker end)
RELATIONSHIP_STYLES: dict[RelationshipType, tuple[str, MarkerKind, MarkerAt]] = {
    "inheritance": ("solid", "hollow_triangle", "to"),
    "realization": ("dashed", "hollow_triangle", "to"),
    "composition": ("solid", "filled_diamond", "from"),
    "aggregation": ("solid", "hollow_diamond", "from"),
    "association": ("solid", "open_arrow", "to"),
    "dependency": ("dashed", "open_arrow", "to"),
}


def layout_class_diagram(
    diagram: ClassDiagram,
    size: Size,
    options: LayoutOptions | None = None,
) -> PositionedClassDiagram:
    """Lay out a parsed class diagram on a grid."""
    opts = _merge_options(options)
    if not diagram.classes:
        return PositionedClassDiagram(width=CLS["default_width"], height=CLS["default_height"])

    per_row = max(1, opts["classes_per_row"])
    padding = opts["padding"]
    boxes = [_class_box(entity, opts["measure"]) for entity in diagram.classes]

    classes: list[PositionedClass] = []
    y = padding
    right = 0.0
    for row_start in range(0, len(boxes), per_row):
        row = boxes[row_start:row_start + per_row]
        cell_w = max(b.width for b in row)
        row_h = max(b.height for b in row)
        for col, box in enumerate(row):
            box.x = padding + col * (cell_w + CLS["h_spacing"]) + cell_w / 2
            box.y = y + row_h / 2
            right = max(right, box.x + box.width / 2)
            classes.append(box)
        y += row_h + CLS["v_spacing"]
    bottom = y - CLS["v_spacing"]

    by_name = {c.name: c for c in classes}
    relationships = []
    for rel in diagram.relationships:
        source = by_name.get(rel.from_)
        target = by_name.get(rel.to)
        if source is None or target is None:
            logger.debug("class: relationship %s -> %s has no box, skipped", rel.from_, rel.to)
            continue
        relationships.append(_route_relationship(rel.from_, rel.to, rel.type, rel.label, source, target))

    return PositionedClassDiagram(
        width=max(size.width, right + padding),
        height=max(size.height, bottom + padding),
        classes=classes,
        relationships=relationships,
    )


def _class_box(entity: ClassEntity, measure: TextMeasurer) -> PositionedClass:
    """Size a class box from its name and longest member line."""
    widths = [measure(entity.name, FONT_SIZES["class_name"])[0]]
    if entity.annotation:
        widths.append(measure(f"<<{entity.annotation}>>", FONT_SIZES["class_member"])[0])
    widths += [measure(attribute_to_string(a), FONT_SIZES["class_member"])[0] for a in entity.attributes]
    widths += [measure(method_to_string(m), FONT_SIZES["class_member"])[0] for m in entity.methods]

    header = CLS["header_height"] + (CLS["annotation_height"] if entity.annotation else 0)
    attrs_h = _compartment_height(len(entity.attributes))
    methods_h = _compartment_height(len(entity.methods))

    return PositionedClass(
        name=entity.name,
        annotation=entity.annotation,
        attributes=list(entity.attributes),
        methods=list(entity.methods),
        x=0.0,
        y=0.0,
        width=max(widths) + CLS["box_pad_x"] * 2,
        height=header + attrs_h + methods_h,
        header_height=header,
        attributes_height=attrs_h,
        methods_height=methods_h,
    )


def _compartment_height(rows: int) -> float:
    if rows == 0:
        return 0
    return rows * CLS["member_row_height"] + CLS["compartment_padding"]


def _route_relationship(
    from_: str,
    to: str,
    rel_type: RelationshipType,
    label: str | None,
    source: PositionedClass,
    target: PositionedClass,
) -> PositionedRelationship:
    line_style, marker_kind, marker_at = RELATIONSHIP_STYLES[rel_type]

    dx = target.x - source.x
    dy = target.y - source.y
    dist = math.hypot(dx, dy)
    if dist == 0:
        # Self relationship: nothing to connect
        start = end = Point(x=source.x, y=source.y)
        return PositionedRelationship(
            from_=from_, to=to, type=rel_type, label=label,
            start=start, end=end, line_style=line_style,  # type: ignore[arg-type]
            marker_kind=marker_kind, marker_at=marker_at,
            label_position=start,
        )

    ux, uy = dx / dist, dy / dist
    start = rect_boundary_point(source.x, source.y, source.width / 2, source.height / 2, ux, uy)
    end = rect_boundary_point(target.x, target.y, target.width / 2, target.height / 2, -ux, -uy)

    if marker_at == "to":
        tip, angle = end, math.atan2(uy, ux)
    else:
        tip, angle = start, math.atan2(-uy, -ux)

    return PositionedRelationship(
        from_=from_,
        to=to,
        type=rel_type,
        label=label,
        start=start,
        end=end,
        line_style=line_style,  # type: ignore[arg-type]
        marker_kind=marker_kind,
        marker_at=marker_at,
        marker=marker_points(marker_kind, tip, angle),
        label_position=Point(x=(start.x + end.x) / 2, y=(start.y + end.y) / 2),
    )


def marker_points(kind: MarkerKind, tip: Point, angle: float) -> list[Point]:
    """Outline of a relationship marker whose tip points along ``angle``.

    Triangles and open arrows are [tip, left, right]; diamonds are
    [tip, side, back, side].
    """
    length = ARROW_HEAD["connector_length"]
    if kind in ("hollow_triangle", "open_arrow"):
        spread = ARROW_HEAD["connector_spread"]
        return [
            tip,
            Point(x=tip.x - length * math.cos(angle - spread), y=tip.y - length * math.sin(angle - spread)),
            Point(x=tip.x - length * math.cos(angle + spread), y=tip.y - length * math.sin(angle + spread)),
        ]

    # Diamonds extend two lengths back from the tip
    bx, by = -math.cos(angle), -math.sin(angle)
    nx, ny = -by, bx
    half = CLS["diamond_half_width"]
    mid = Point(x=tip.x + bx * length, y=tip.y + by * length)
    return [
        tip,
        Point(x=mid.x + nx * half, y=mid.y + ny * half),
        Point(x=tip.x + bx * length * 2, y=tip.y + by * length * 2),
        Point(x=mid.x - nx * half, y=mid.y - ny * half),
    ]


def _merge_options(options: LayoutOptions | None) -> dict:
    opts = {
        "classes_per_row": CLS["classes_per_row"],
        "padding": CLS["padding"],
        "measure": estimate_text_size,
    }
    if options:
        if options.classes_per_row is not None:
            opts["classes_per_row"] = options.classes_per_row
        if options.padding is not None:
            opts["padding"] = options.padding
        if options.measure is not None:
            opts["measure"] = options.measure
    return opts
