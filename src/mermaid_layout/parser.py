from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from .lines import SourceLine, strip_quotes
from .types import Direction, Edge, EdgeStyle, EdgeType, Flowchart, Node, NodeShape

logger = logging.getLogger(__name__)

# ============================================================================
# Flowchart parser
#
# Supported syntax:
#   graph TD / flowchart LR          (declaration, direction recorded)
#   A[Start] --> B{Decision}         (edge with node shapes)
#   B -->|Yes| C                     (piped edge label)
#   A -- label --> B                 (inline edge label)
#   A --> B --> C                    (chained edges)
#   A -.-> B, A ==> B, A <--> B, A --- B
#
# Accepted but ignored: classDef, class, subgraph/end, linkStyle, style,
# click, direction. Lines without an edge operator contribute nothing.
# ============================================================================

_DECLARATION_RE = re.compile(r"^(?:graph|flowchart)\b\s*(\w+)?", re.IGNORECASE)
_IGNORED_RE = re.compile(
    r"^(?:classDef|class|subgraph|linkStyle|style|click|direction)\s+\S|^(?:subgraph|end)$"
)

# "A -- label --> B" is rewritten to the piped form before operator splitting
_INLINE_LABEL_RE = re.compile(r"\s--\s([^-|]+?)\s*-->")

# Longest operators first so "--->" is not read as "-->" plus a stray dash
_EDGE_OP_RE = re.compile(r"\s*(<-->|--->|-->|-\.->|==>|---)\s*")

_EDGE_LABEL_RE = re.compile(r"\|([^|]+)\|")
# Piped labels are swapped out while splitting so operators inside them survive
_PIPED_LABEL_RE = re.compile(r"\|[^|]*\|")
_LABEL_SLOT_RE = re.compile(r"\x00(\d+)\x00")
_CLASS_SHORTHAND_RE = re.compile(r":::[\w-]+$")

# Double delimiters are tried before the single-delimiter forms
NODE_PATTERNS: list[tuple[re.Pattern[str], NodeShape]] = [
    (re.compile(r"([\w-]+)\(\((.+?)\)\)"), "circle"),
    (re.compile(r"([\w-]+)\{\{(.+?)\}\}"), "hexagon"),
    (re.compile(r"([\w-]+)\[\((.+?)\)\]"), "database"),
    (re.compile(r"([\w-]+)\[/(.+?)/\]"), "parallelogram"),
    (re.compile(r"([\w-]+)\[/(.+?)\\\]"), "trapezoid"),
    (re.compile(r"([\w-]+)\[([^\]]+)\]"), "rectangle"),
    (re.compile(r"([\w-]+)\(([^)]+)\)"), "rounded"),
    (re.compile(r"([\w-]+)\{([^}]+)\}"), "diamond"),
]

# operator -> (edge type, arrow at start, arrow at end, stroke width)
_EDGE_OPERATORS: dict[str, tuple[EdgeType, bool, bool, float]] = {
    "-->": ("arrow", False, True, 1),
    "--->": ("arrow", False, True, 1),
    "-.->": ("dotted", False, True, 1),
    "==>": ("arrow", False, True, 2),
    "<-->": ("double_arrow", True, True, 1),
    "---": ("solid", False, False, 1),
}

_DIRECTIONS = {"TD", "TB", "LR", "BT", "RL"}


@dataclass(slots=True)
class _FlowchartState:
    """Accumulator threaded through the line scan."""
    nodes: dict[str, Node] = field(default_factory=dict)
    edges: list[Edge] = field(default_factory=list)
    direction: Direction = "TD"


def parse_flowchart(lines: list[SourceLine]) -> Flowchart:
    """Parse flowchart lines into nodes (first occurrence wins) and edges
    (append-only, duplicates kept)."""
    state = _FlowchartState()

    for line in lines:
        text = line.text.rstrip(";").strip()
        if not text:
            continue

        # --- declaration ---
        m = _DECLARATION_RE.match(text)
        if m:
            direction = (m.group(1) or "").upper()
            if direction in _DIRECTIONS:
                state.direction = direction  # type: ignore[assignment]
            continue

        # --- accepted-but-ignored constructs ---
        # "click --> B" is an edge from a node named click
        if _IGNORED_RE.match(text) and not _EDGE_OP_RE.search(text):
            continue

        if not _parse_edge_line(text, state):
            logger.debug("flowchart: ignoring line %d: %r", line.index, text)

    return Flowchart(
        nodes=list(state.nodes.values()),
        edges=state.edges,
        direction=state.direction,
    )


def _parse_edge_line(text: str, state: _FlowchartState) -> bool:
    text = _INLINE_LABEL_RE.sub(lambda m: f" -->|{m.group(1).strip()}|", text)

    labels: list[str] = []

    def stash(m: re.Match[str]) -> str:
        labels.append(m.group(0))
        return f"\x00{len(labels) - 1}\x00"

    def restore(part: str) -> str:
        return _LABEL_SLOT_RE.sub(lambda m: labels[int(m.group(1))], part)

    # [segment, op, segment, op, segment, ...]
    parts = _EDGE_OP_RE.split(_PIPED_LABEL_RE.sub(stash, text))
    if len(parts) < 3:
        return False

    segments = [extract_node_with_edge_label(restore(p)) for p in parts[0::2]]
    operators = parts[1::2]

    added = False
    for i, op in enumerate(operators):
        _, source = segments[i]
        label, target = segments[i + 1]
        if not source[0] or not target[0]:
            continue

        _register_node(state, *source)
        _register_node(state, *target)

        edge_type, arrow_start, arrow_end, stroke_width = _EDGE_OPERATORS[op]
        state.edges.append(
            Edge(
                id=f"edge-{len(state.edges)}",
                source=source[0],
                target=target[0],
                label=label,
                type=edge_type,
                style=EdgeStyle(stroke_width=stroke_width),
                has_arrow_start=arrow_start,
                has_arrow_end=arrow_end,
            )
        )
        added = True
    return added


def _register_node(state: _FlowchartState, node_id: str, label: str, shape: NodeShape) -> None:
    if node_id not in state.nodes:
        state.nodes[node_id] = Node(id=node_id, label=label, shape=shape)


# ============================================================================
# Shape / label extractor
# ============================================================================


def extract_node(token: str) -> tuple[str, str, NodeShape]:
    """Parse a node token into (id, label, shape).

    The first matching delimiter pattern wins; anything else falls back to
    the whole token as both id and label with a rectangle shape.
    """
    token = token.strip()
    for pattern, shape in NODE_PATTERNS:
        m = pattern.search(token)
        if m:
            return m.group(1), strip_quotes(m.group(2)), shape

    token = _CLASS_SHORTHAND_RE.sub("", token).strip()
    return token, token, "rectangle"


def extract_node_with_edge_label(token: str) -> tuple[str, tuple[str, str, NodeShape]]:
    """Strip a piped ``|label|`` from the token, then extract the node.

    Returns (edge_label, (id, label, shape)); edge_label is "" when absent.
    """
    edge_label = ""
    m = _EDGE_LABEL_RE.search(token)
    if m:
        edge_label = strip_quotes(m.group(1))
        token = token[: m.start()] + token[m.end() :]
    return edge_label, extract_node(token)
