from __future__ import annotations

import math

from .styles import ARROW_HEAD
from .types import Edge, Point, PositionedNode, RoutedEdge

# ============================================================================
# Edge/connector router -- boundary points, straight vs. curved routing,
# cubic control points and arrowhead geometry for flowchart edges.
# ============================================================================

# Shapes clipped against their bounding box
RECT_SHAPES = {"rectangle", "rounded", "parallelogram", "trapezoid", "database"}

# Fixed clipping radius for shapes without their own geometry
FALLBACK_RADIUS = 40

# Flow is "mostly vertical" when |dy| > |dx| * ratio (and vice versa)
ALIGNMENT_RATIO = 1.5

# Polygon edges nearly parallel to the ray are skipped
_PARALLEL_EPSILON = 0.001


# ============================================================================
# Boundary geometry
# ============================================================================


def rect_boundary_point(
    cx: float, cy: float, hw: float, hh: float, ux: float, uy: float
) -> Point:
    """Point where the ray from the center along (ux, uy) leaves the box."""
    if ux == 0 and uy == 0:
        return Point(x=cx, y=cy)
    # Left/right side is hit when the ray is flatter than the box diagonal
    if abs(ux) * hh > abs(uy) * hw:
        t = hw / abs(ux)
    else:
        t = hh / abs(uy)
    return Point(x=cx + ux * t, y=cy + uy * t)


def circle_boundary_point(cx: float, cy: float, r: float, ux: float, uy: float) -> Point:
    length = math.hypot(ux, uy)
    if length < 1e-9:
        return Point(x=cx, y=cy)
    return Point(x=cx + ux / length * r, y=cy + uy / length * r)


def diamond_vertices(cx: float, cy: float, hw: float, hh: float) -> list[Point]:
    return [
        Point(x=cx, y=cy - hh),
        Point(x=cx + hw, y=cy),
        Point(x=cx, y=cy + hh),
        Point(x=cx - hw, y=cy),
    ]


def hexagon_vertices(cx: float, cy: float, hw: float, hh: float) -> list[Point]:
    return [
        Point(
            x=cx + hw * math.cos(math.radians(i * 60)),
            y=cy + hh * math.sin(math.radians(i * 60)),
        )
        for i in range(6)
    ]


def polygon_boundary_point(
    cx: float, cy: float, vertices: list[Point], ux: float, uy: float
) -> Point | None:
    """Nearest intersection of the ray from (cx, cy) along (ux, uy) with the
    polygon outline, or None when the ray misses every side."""
    best: float | None = None
    for i, a in enumerate(vertices):
        b = vertices[(i + 1) % len(vertices)]
        sx = b.x - a.x
        sy = b.y - a.y
        denom = ux * sy - uy * sx
        if abs(denom) < _PARALLEL_EPSILON:
            continue
        ax = a.x - cx
        ay = a.y - cy
        s = (ax * sy - ay * sx) / denom
        t = (ax * uy - ay * ux) / denom
        if s >= 0 and 0 <= t <= 1 and (best is None or s < best):
            best = s
    if best is None:
        return None
    return Point(x=cx + ux * best, y=cy + uy * best)


def boundary_point(node: PositionedNode, ux: float, uy: float) -> Point:
    """Where a connector leaving ``node`` along (ux, uy) touches its outline."""
    hw = node.width / 2
    hh = node.height / 2

    if node.shape in RECT_SHAPES:
        return rect_boundary_point(node.x, node.y, hw, hh, ux, uy)

    if node.shape in ("diamond", "hexagon"):
        vertices = (
            diamond_vertices(node.x, node.y, hw, hh)
            if node.shape == "diamond"
            else hexagon_vertices(node.x, node.y, hw, hh)
        )
        hit = polygon_boundary_point(node.x, node.y, vertices, ux, uy)
        if hit is not None:
            return hit
        return circle_boundary_point(node.x, node.y, min(hw, hh), ux, uy)

    if node.shape == "circle":
        return circle_boundary_point(node.x, node.y, min(hw, hh), ux, uy)

    return circle_boundary_point(node.x, node.y, FALLBACK_RADIUS, ux, uy)


# ============================================================================
# Routing decision
# ============================================================================


def has_overlap_risk(edge: Edge, edges: list[Edge]) -> bool:
    """True when another edge shares this edge's source or target.

    Edges with the same (source, target) pair do not count.
    """
    for other in edges:
        if other.source == edge.source and other.target == edge.target:
            continue
        if other.source == edge.source or other.target == edge.target:
            return True
    return False


def _branch_label(edge: Edge) -> str | None:
    label = edge.label.strip().lower()
    return label if label in ("yes", "no") else None


def route_edge(
    edge: Edge,
    source: PositionedNode,
    target: PositionedNode,
    edges: list[Edge],
) -> RoutedEdge:
    """Compute endpoints, optional cubic controls, arrowheads and the label
    anchor for one edge between two positioned nodes."""
    dx = target.x - source.x
    dy = target.y - source.y
    distance = math.hypot(dx, dy)

    if distance == 0:
        center = Point(x=source.x, y=source.y)
        return _routed(edge, center, Point(x=target.x, y=target.y), None, None)

    ux = dx / distance
    uy = dy / distance
    start = boundary_point(source, ux, uy)
    end = boundary_point(target, -ux, -uy)

    edx = end.x - start.x
    edy = end.y - start.y
    edge_distance = math.hypot(edx, edy)

    is_vertical = abs(dy) > abs(dx) * ALIGNMENT_RATIO
    is_horizontal = abs(dx) > abs(dy) * ALIGNMENT_RATIO
    overlap = has_overlap_risk(edge, edges)
    branch = _branch_label(edge)
    from_diamond = source.shape == "diamond"

    straight = (is_vertical or is_horizontal) and not overlap and branch is None and not from_diamond
    if straight or edge_distance == 0:
        return _routed(edge, start, end, None, None)

    if branch is not None:
        offset = min(100, edge_distance * 0.6)
        multiplier = 0.8
        if is_horizontal:
            offset *= 1.2
        if branch == "yes":
            offset = -offset
        ratio = 0.35
    else:
        if from_diamond:
            offset = min(70, edge_distance * 0.45) * 1.1
            multiplier = 0.65
        elif overlap:
            offset = min(60, edge_distance * 0.4)
            multiplier = 0.6
        else:
            offset = min(40, edge_distance * 0.25)
            multiplier = 0.4
        # Bend away from the dominant axis, toward the target side
        if abs(edx) > abs(edy):
            if source.y > target.y:
                offset = -offset
        elif source.x > target.x:
            offset = -offset
        ratio = 0.3

    perp_x = -edy / edge_distance * offset * multiplier
    perp_y = edx / edge_distance * offset * multiplier
    control1 = Point(x=start.x + edx * ratio + perp_x, y=start.y + edy * ratio + perp_y)
    control2 = Point(x=end.x - edx * ratio + perp_x, y=end.y - edy * ratio + perp_y)
    return _routed(edge, start, end, control1, control2)


def _routed(
    edge: Edge,
    start: Point,
    end: Point,
    control1: Point | None,
    control2: Point | None,
) -> RoutedEdge:
    arrow_end = None
    arrow_start = None
    if edge.has_arrow_end:
        before_end = control2 if control2 is not None else start
        arrow_end = arrow_head(end, math.atan2(end.y - before_end.y, end.x - before_end.x))
    if edge.has_arrow_start:
        after_start = control1 if control1 is not None else end
        arrow_start = arrow_head(start, math.atan2(start.y - after_start.y, start.x - after_start.x))

    return RoutedEdge(
        id=edge.id,
        source=edge.source,
        target=edge.target,
        label=edge.label,
        type=edge.type,
        style=edge.style,
        start=start,
        end=end,
        control1=control1,
        control2=control2,
        arrow_end=arrow_end,
        arrow_start=arrow_start,
        label_position=label_anchor(start, end, control1, control2),
    )


# ============================================================================
# Arrowheads and label anchors
# ============================================================================


def arrow_head(
    tip: Point,
    angle: float,
    size: float = ARROW_HEAD["size"],
    spread: float = ARROW_HEAD["spread"],
) -> list[Point]:
    """Triangle [tip, left base, right base] pointing along ``angle``."""
    return [
        tip,
        Point(x=tip.x - size * math.cos(angle - spread), y=tip.y - size * math.sin(angle - spread)),
        Point(x=tip.x - size * math.cos(angle + spread), y=tip.y - size * math.sin(angle + spread)),
    ]


def cubic_point(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    mt = 1 - t
    a = mt ** 3
    b = 3 * mt * mt * t
    c = 3 * mt * t * t
    d = t ** 3
    return Point(
        x=a * p0.x + b * p1.x + c * p2.x + d * p3.x,
        y=a * p0.y + b * p1.y + c * p2.y + d * p3.y,
    )


def label_anchor(
    start: Point, end: Point, control1: Point | None, control2: Point | None
) -> Point:
    if control1 is not None and control2 is not None:
        return cubic_point(start, control1, control2, end, 0.5)
    return Point(x=(start.x + end.x) / 2, y=(start.y + end.y) / 2)
