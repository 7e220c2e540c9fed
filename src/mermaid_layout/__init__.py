"""mermaid-layout -- Parse Mermaid diagram text and compute 2-D layouts for it."""

from __future__ import annotations

import logging
import math

from .types import (
    Diagram,
    DiagramKind,
    Edge,
    EdgeStyle,
    Flowchart,
    LayoutOptions,
    Node,
    NodeStyle,
    Point,
    PositionedDiagram,
    PositionedFlowchart,
    PositionedNode,
    RoutedEdge,
    Size,
)
from .lines import first_significant_line, source_lines
from .parser import parse_flowchart, extract_node, extract_node_with_edge_label
from .layout import layout_flowchart

from .sequence import SequenceDiagram, parse_sequence_diagram, layout_sequence_diagram
from .class_diagram import ClassDiagram, parse_class_diagram, layout_class_diagram
from .state import StateDiagram, parse_state_diagram, layout_state_diagram
from .pie import PieChart, parse_pie_chart, layout_pie_chart
from .timeline import Timeline, parse_timeline, layout_timeline

logger = logging.getLogger(__name__)

__all__ = [
    "parse",
    "layout",
    "detect_diagram_kind",
    "extract_node",
    "extract_node_with_edge_label",
    "Diagram",
    "DiagramKind",
    "Node",
    "Edge",
    "NodeStyle",
    "EdgeStyle",
    "Flowchart",
    "SequenceDiagram",
    "ClassDiagram",
    "StateDiagram",
    "PieChart",
    "Timeline",
    "LayoutOptions",
    "Point",
    "Size",
    "PositionedDiagram",
    "PositionedFlowchart",
    "PositionedNode",
    "RoutedEdge",
]

# Header prefix (lowercased) -> kind, checked in order
_KIND_PREFIXES: list[tuple[str, DiagramKind]] = [
    ("graph", "flowchart"),
    ("flowchart", "flowchart"),
    ("sequencediagram", "sequence"),
    ("classdiagram", "class"),
    ("statediagram", "state"),
    ("gantt", "gantt"),
    ("pie", "pie"),
    ("gitgraph", "gitgraph"),
    ("erdiagram", "er"),
    ("journey", "journey"),
    ("timeline", "timeline"),
]


def detect_diagram_kind(text: str) -> DiagramKind:
    """Classify diagram text by the prefix of its first non-empty line."""
    first_line = first_significant_line(text).lower()
    if not first_line:
        return "unknown"
    for prefix, kind in _KIND_PREFIXES:
        if first_line.startswith(prefix):
            return kind
    return "unknown"


def parse(text: str) -> Diagram:
    """Parse Mermaid text into a Diagram.

    Never raises: unsupported families and unrecognized headers come back
    with only ``raw_text`` filled in.
    """
    kind = detect_diagram_kind(text)
    lines = source_lines(text)

    if kind == "flowchart":
        flowchart = parse_flowchart(lines)
        return Diagram(kind, text, list(flowchart.nodes), list(flowchart.edges), flowchart)
    if kind == "sequence":
        return Diagram(kind, text, payload=parse_sequence_diagram(lines))
    if kind == "class":
        classes = parse_class_diagram(lines)
        nodes, edges = _class_graph(classes)
        return Diagram(kind, text, nodes, edges, classes)
    if kind == "state":
        return Diagram(kind, text, payload=parse_state_diagram(lines))
    if kind == "pie":
        return Diagram(kind, text, payload=parse_pie_chart(lines))
    if kind == "timeline":
        return Diagram(kind, text, payload=parse_timeline(lines))

    logger.debug("no parser for %s diagram, keeping raw text", kind)
    return Diagram(kind, text)


def _class_graph(diagram: ClassDiagram) -> tuple[list[Node], list[Edge]]:
    """Mirror classes and relationships as generic nodes and edges."""
    nodes = [Node(id=c.name, label=c.name) for c in diagram.classes]
    edges = [
        Edge(
            id=f"edge-{i}",
            source=rel.from_,
            target=rel.to,
            label=rel.label or "",
            type="dashed" if rel.type in ("dependency", "realization") else "arrow",
        )
        for i, rel in enumerate(diagram.relationships)
    ]
    return nodes, edges


def layout(
    diagram: Diagram,
    size: Size,
    options: LayoutOptions | None = None,
) -> PositionedDiagram:
    """Compute positions for a parsed diagram inside ``size``.

    The diagram is not modified. Raw kinds produce a result with
    ``layout=None`` sized to the available size.
    """
    size = _clamp_size(size)
    payload = diagram.payload

    if isinstance(payload, Flowchart):
        flow = layout_flowchart(payload, size, options)
        positions = {n.id: Point(n.x, n.y) for n in flow.nodes}
        return PositionedDiagram(diagram.kind, flow.width, flow.height, positions, flow)

    if isinstance(payload, SequenceDiagram):
        seq = layout_sequence_diagram(payload, size, options)
        positions = {p.id: Point(p.x, p.y + p.height / 2) for p in seq.participants}
        return PositionedDiagram(diagram.kind, seq.width, seq.height, positions, seq)

    if isinstance(payload, ClassDiagram):
        cls = layout_class_diagram(payload, size, options)
        positions = {c.name: Point(c.x, c.y) for c in cls.classes}
        return PositionedDiagram(diagram.kind, cls.width, cls.height, positions, cls)

    if isinstance(payload, StateDiagram):
        states = layout_state_diagram(payload, size, options)
        positions = {s.id: Point(s.x, s.y) for s in states.states}
        return PositionedDiagram(diagram.kind, states.width, states.height, positions, states)

    if isinstance(payload, PieChart):
        pie = layout_pie_chart(payload, size, options)
        positions = {s.label: Point(s.label_position.x, s.label_position.y) for s in pie.slices}
        return PositionedDiagram(diagram.kind, pie.width, pie.height, positions, pie)

    if isinstance(payload, Timeline):
        tl = layout_timeline(payload, size, options)
        positions = {p.period: Point(p.x + p.width / 2, p.y + p.header_height / 2) for p in tl.periods}
        return PositionedDiagram(diagram.kind, tl.width, tl.height, positions, tl)

    return PositionedDiagram(diagram.kind, size.width, size.height)


def _clamp_size(size: Size) -> Size:
    """Replace non-positive or non-finite dimensions with 1."""
    def clamp(value: float) -> float:
        if not math.isfinite(value) or value < 1:
            return 1.0
        return float(value)
    return Size(clamp(size.width), clamp(size.height))
