from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Literal, Union

if TYPE_CHECKING:
    from .sequence.types import SequenceDiagram, PositionedSequenceDiagram
    from .class_diagram.types import ClassDiagram, PositionedClassDiagram
    from .state.types import StateDiagram, PositionedStateDiagram
    from .pie.types import PieChart, PositionedPieChart
    from .timeline.types import Timeline, PositionedTimeline

# ============================================================================
# Geometry
# ============================================================================


@dataclass(slots=True)
class Point:
    x: float
    y: float


@dataclass(slots=True)
class Size:
    width: float
    height: float


# (text, font_size) -> (width, height)
TextMeasurer = Callable[[str, float], tuple[float, float]]

# ============================================================================
# Parsed diagram -- logical structure extracted from Mermaid text
# ============================================================================

DiagramKind = Literal[
    "flowchart",
    "sequence",
    "class",
    "state",
    "pie",
    "timeline",
    # Recognized but only echoed back as raw text
    "gantt",
    "gitgraph",
    "er",
    "journey",
    "unknown",
]

Direction = Literal["TD", "TB", "LR", "BT", "RL"]

NodeShape = Literal[
    "rectangle",      # A[text]
    "rounded",        # A(text)
    "circle",         # A((text))
    "diamond",        # A{text}
    "hexagon",        # A{{text}}
    "parallelogram",  # A[/text/]
    "trapezoid",      # A[/text\]
    "database",       # A[(text)]
    "custom",
]

EdgeType = Literal["solid", "dashed", "dotted", "arrow", "double_arrow", "custom"]


@dataclass(slots=True)
class NodeStyle:
    fill: str = "#ffffff"
    stroke: str = "#000000"
    text_color: str = "#000000"
    stroke_width: float = 1
    font_size: float = 14
    font_weight: int = 400


@dataclass(slots=True)
class EdgeStyle:
    stroke: str = "#000000"
    stroke_width: float = 1
    text_color: str = "#000000"
    font_size: float = 12


@dataclass(slots=True)
class Node:
    id: str
    label: str
    shape: NodeShape = "rectangle"
    style: NodeStyle = field(default_factory=NodeStyle)


@dataclass(slots=True)
class Edge:
    # Deterministic id in parse order: "edge-0", "edge-1", ...
    id: str
    source: str
    target: str
    label: str = ""
    type: EdgeType = "arrow"
    style: EdgeStyle = field(default_factory=EdgeStyle)
    has_arrow_start: bool = False
    has_arrow_end: bool = True


@dataclass(slots=True)
class Flowchart:
    """Parsed flowchart -- nodes in first-seen order, edges in parse order."""
    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    direction: Direction = "TD"


# Family-specific model carried by a Diagram. None is the raw variant used
# for stub families and unknown input.
DiagramPayload = Union[
    "Flowchart",
    "SequenceDiagram",
    "ClassDiagram",
    "StateDiagram",
    "PieChart",
    "Timeline",
    None,
]


@dataclass(slots=True)
class Diagram:
    """Root value returned by parse().

    ``nodes``/``edges`` hold the generic graph view (flowcharts, and a
    mirror of classes/relationships for class diagrams). ``payload`` holds
    the family-specific model.
    """
    kind: DiagramKind
    raw_text: str
    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    payload: DiagramPayload = None


# ============================================================================
# Layout options -- user-facing configuration
# ============================================================================

FlowchartEngine = Literal["layered", "sugiyama"]


@dataclass(slots=True)
class LayoutOptions:
    padding: float | None = None
    node_spacing: float | None = None
    level_spacing: float | None = None
    participant_spacing: float | None = None
    message_spacing: float | None = None
    classes_per_row: int | None = None
    states_per_row: int | None = None
    flowchart_engine: FlowchartEngine | None = None
    measure: TextMeasurer | None = None


# ============================================================================
# Positioned flowchart -- after layout, ready for rendering
# ============================================================================


@dataclass(slots=True)
class PositionedNode:
    id: str
    label: str
    shape: NodeShape
    # Center of the node
    x: float
    y: float
    width: float
    height: float
    level: int = 0
    style: NodeStyle = field(default_factory=NodeStyle)


@dataclass(slots=True)
class RoutedEdge:
    id: str
    source: str
    target: str
    label: str
    type: EdgeType
    style: EdgeStyle
    # Points on the source/target outlines
    start: Point
    end: Point
    # Cubic control points; both None for a straight line
    control1: Point | None = None
    control2: Point | None = None
    # Filled triangles (tip first) at the target / source end
    arrow_end: list[Point] | None = None
    arrow_start: list[Point] | None = None
    label_position: Point | None = None

    @property
    def is_curved(self) -> bool:
        return self.control1 is not None


@dataclass(slots=True)
class PositionedFlowchart:
    width: float
    height: float
    nodes: list[PositionedNode] = field(default_factory=list)
    edges: list[RoutedEdge] = field(default_factory=list)


PositionedPayload = Union[
    "PositionedFlowchart",
    "PositionedSequenceDiagram",
    "PositionedClassDiagram",
    "PositionedStateDiagram",
    "PositionedPieChart",
    "PositionedTimeline",
    None,
]


@dataclass(slots=True)
class PositionedDiagram:
    """Result of layout(): canvas size, entity centers, and the positioned
    per-family structure (None for raw kinds)."""
    kind: DiagramKind
    width: float
    height: float
    positions: dict[str, Point] = field(default_factory=dict)
    layout: PositionedPayload = None
