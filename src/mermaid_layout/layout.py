from __future__ import annotations

import logging
import math
from collections import deque

from grandalf.graphs import Vertex, Edge as GraphEdge, Graph
from grandalf.layouts import SugiyamaLayout

from .types import (
    Edge,
    Flowchart,
    LayoutOptions,
    Node,
    PositionedFlowchart,
    PositionedNode,
    Size,
)
from .styles import LINE_HEIGHT_RATIO, estimate_mono_text_width
from .routing import route_edge

logger = logging.getLogger(__name__)

# Layout defaults
FLOW = {
    # Left/top margin and right/bottom canvas padding
    "padding": 30,
    # Minimum horizontal gutter between nodes in a level
    "node_spacing": 20,
    # Vertical gutter between levels
    "level_spacing": 50,
    "engine": "layered",
    # Labels wrap beyond this width
    "max_label_width": 200,
    "text_padding": 16,
}

# shape -> (min width, min height)
MIN_NODE_SIZE = {
    "diamond": (100, 70),
    "circle": (80, 80),
    "default": (70, 45),
}


# ============================================================================
# Vertex view for grandalf -- provides width/height for layout
# ============================================================================


class _VertexView:
    """Minimal view object required by grandalf's SugiyamaLayout."""

    def __init__(self, w: float, h: float) -> None:
        self.w = w
        self.h = h
        # xy is set by the layout engine (center coordinates)
        self.xy = (0.0, 0.0)


# ============================================================================
# Main layout function
# ============================================================================


def layout_flowchart(
    flowchart: Flowchart,
    size: Size,
    options: LayoutOptions | None = None,
) -> PositionedFlowchart:
    """Place flowchart nodes in levels and route every edge.

    The default engine assigns each node the longest-path depth from a root
    and spreads each level across the available width. The "sugiyama"
    engine delegates placement to grandalf instead.
    """
    opts = _merge_options(options)
    padding = opts["padding"]

    if not flowchart.nodes:
        return PositionedFlowchart(width=size.width, height=size.height)

    levels = compute_levels(flowchart.nodes, flowchart.edges)
    if opts["engine"] == "sugiyama":
        nodes = _place_sugiyama(flowchart, levels, opts)
    else:
        nodes = _place_layered(flowchart, levels, size, opts)

    by_id = {n.id: n for n in nodes}
    edges = [
        route_edge(e, by_id[e.source], by_id[e.target], flowchart.edges)
        for e in flowchart.edges
        if e.source in by_id and e.target in by_id
    ]

    width = max([size.width] + [n.x + n.width / 2 + padding for n in nodes])
    height = max([size.height] + [n.y + n.height / 2 + padding for n in nodes])
    logger.debug(
        "flowchart layout: %d nodes, %d edges, %d levels, %.0fx%.0f",
        len(nodes), len(edges), max(levels.values()) + 1, width, height,
    )
    return PositionedFlowchart(width=width, height=height, nodes=nodes, edges=edges)


# ============================================================================
# Levels
# ============================================================================


def compute_levels(nodes: list[Node], edges: list[Edge]) -> dict[str, int]:
    """Longest-path depth of every node from any root.

    Roots are nodes no edge points at. A depth-first walk from the roots
    drops back edges, so cycles are cut where the walk closes them and the
    remaining graph is ranked by longest path. Nodes unreachable from every
    root (including every node of a rootless cycle) get level 0.
    """
    node_ids = [n.id for n in nodes]
    children: dict[str, list[str]] = {nid: [] for nid in node_ids}
    targets: set[str] = set()
    for e in edges:
        children.setdefault(e.source, [])
        children.setdefault(e.target, [])
        if e.target not in children[e.source]:
            children[e.source].append(e.target)
        targets.add(e.target)

    levels = {nid: 0 for nid in children}
    roots = [nid for nid in node_ids if nid not in targets]
    if not roots:
        return levels

    dag = _drop_back_edges(children, roots)
    depth: dict[str, int] = {root: 0 for root in roots}
    for nid in _topological_order(dag):
        for child in dag[nid]:
            depth[child] = max(depth.get(child, 0), depth[nid] + 1)
    levels.update(depth)
    return levels


def _drop_back_edges(children: dict[str, list[str]], roots: list[str]) -> dict[str, list[str]]:
    """Subgraph reachable from the roots, minus edges into a node still on the walk."""
    on_stack: set[str] = set()
    done: set[str] = set()
    dag: dict[str, list[str]] = {}
    for root in roots:
        if root in done:
            continue
        on_stack.add(root)
        dag[root] = []
        stack = [(root, iter(sorted(children[root])))]
        while stack:
            nid, pending = stack[-1]
            child = next(pending, None)
            if child is None:
                stack.pop()
                on_stack.discard(nid)
                done.add(nid)
                continue
            if child in on_stack:
                logger.debug("dropping back edge %s -> %s", nid, child)
                continue
            dag[nid].append(child)
            if child not in done:
                on_stack.add(child)
                dag[child] = []
                stack.append((child, iter(sorted(children[child]))))
    return dag


def _topological_order(children: dict[str, list[str]]) -> list[str]:
    """Kahn's algorithm over an acyclic adjacency map."""
    in_degree = {nid: 0 for nid in children}
    for targets in children.values():
        for t in targets:
            in_degree[t] += 1
    queue = deque(nid for nid, deg in in_degree.items() if deg == 0)
    order: list[str] = []
    while queue:
        nid = queue.popleft()
        order.append(nid)
        for t in children[nid]:
            in_degree[t] -= 1
            if in_degree[t] == 0:
                queue.append(t)
    return order


# ============================================================================
# Layered placement
# ============================================================================


def estimate_node_size(node: Node) -> tuple[float, float]:
    """Character-width heuristic with shape-dependent minimums."""
    font_size = node.style.font_size
    char_width = font_size * 0.6
    line_height = font_size * LINE_HEIGHT_RATIO
    max_chars_per_line = max(1, int(FLOW["max_label_width"] / char_width))
    line_count = max(1, math.ceil(len(node.label) / max_chars_per_line))

    text_width = min(FLOW["max_label_width"], estimate_mono_text_width(node.label, font_size))
    text_height = line_count * line_height

    min_width, min_height = MIN_NODE_SIZE.get(node.shape, MIN_NODE_SIZE["default"])
    width = max(min_width, text_width + FLOW["text_padding"])
    height = max(min_height, text_height + FLOW["text_padding"])
    if node.shape == "circle":
        width = height = max(width, height)
    return width, height


def _level_weight(node: Node, level_index: int, levels: dict[str, int], edges: list[Edge]) -> float:
    weight = 0.0
    for e in edges:
        if e.target == node.id:
            source_level = levels.get(e.source, 0)
            if source_level < level_index:
                weight += 1 / (level_index - source_level + 1)
        if e.source == node.id:
            weight += 0.5
    return weight


def _place_layered(
    flowchart: Flowchart,
    levels: dict[str, int],
    size: Size,
    opts: dict,
) -> list[PositionedNode]:
    by_level: dict[int, list[Node]] = {}
    for node in flowchart.nodes:
        by_level.setdefault(levels.get(node.id, 0), []).append(node)

    padding = opts["padding"]
    available_width = size.width - 2 * padding
    placed: dict[str, PositionedNode] = {}
    y_offset = padding

    for level_index in sorted(by_level):
        ordered = sorted(
            by_level[level_index],
            key=lambda n: (-_level_weight(n, level_index, levels, flowchart.edges), n.id),
        )
        sizes = [estimate_node_size(n) for n in ordered]
        total_width = sum(w for w, _ in sizes)
        max_height = max(h for _, h in sizes)
        spacing = max(
            opts["node_spacing"],
            (available_width - total_width) / max(1, len(ordered) - 1),
        )

        x_offset = padding
        for node, (w, h) in zip(ordered, sizes):
            placed[node.id] = _positioned(node, x_offset + w / 2, y_offset + max_height / 2, w, h, level_index)
            x_offset += w + spacing
        y_offset += max_height + opts["level_spacing"]

    return [placed[n.id] for n in flowchart.nodes]


# ============================================================================
# Sugiyama placement (grandalf)
# ============================================================================


def _place_sugiyama(
    flowchart: Flowchart,
    levels: dict[str, int],
    opts: dict,
) -> list[PositionedNode]:
    vertices: dict[str, Vertex] = {}
    for node in flowchart.nodes:
        v = Vertex(node.id)
        v.view = _VertexView(*estimate_node_size(node))
        vertices[node.id] = v

    edges_list = [
        GraphEdge(vertices[e.source], vertices[e.target])
        for e in flowchart.edges
        if e.source != e.target and e.source in vertices and e.target in vertices
    ]
    g = Graph(list(vertices.values()), edges_list)

    # Lay out each connected component and place them side by side
    x_cursor = 0.0
    for component in g.C:
        members = list(component.sV)
        if len(members) == 1:
            # Isolated node: nothing for Sugiyama to rank
            members[0].view.xy = (0.0, 0.0)
        else:
            sug = SugiyamaLayout(component)
            sug.xspace = opts["node_spacing"]
            sug.yspace = opts["level_spacing"]
            sug.init_all()
            sug.draw()

        left = min(v.view.xy[0] - v.view.w / 2 for v in members)
        right = max(v.view.xy[0] + v.view.w / 2 for v in members)
        shift = x_cursor - left
        for v in members:
            v.view.xy = (v.view.xy[0] + shift, v.view.xy[1])
        x_cursor += right - left + opts["node_spacing"]

    # Normalize coordinates: shift everything so minimum is at padding
    padding = opts["padding"]
    min_x = min(v.view.xy[0] - v.view.w / 2 for v in vertices.values())
    min_y = min(v.view.xy[1] - v.view.h / 2 for v in vertices.values())

    result: list[PositionedNode] = []
    for node in flowchart.nodes:
        vw = vertices[node.id].view
        result.append(_positioned(
            node,
            vw.xy[0] - min_x + padding,
            vw.xy[1] - min_y + padding,
            vw.w,
            vw.h,
            levels.get(node.id, 0),
        ))
    return result


# ============================================================================
# Helpers
# ============================================================================


def _positioned(node: Node, x: float, y: float, w: float, h: float, level: int) -> PositionedNode:
    return PositionedNode(
        id=node.id,
        label=node.label,
        shape=node.shape,
        x=x,
        y=y,
        width=w,
        height=h,
        level=level,
        style=node.style,
    )


def _merge_options(options: LayoutOptions | None) -> dict:
    opts = dict(FLOW)
    if options:
        if options.padding is not None:
            opts["padding"] = options.padding
        if options.node_spacing is not None:
            opts["node_spacing"] = options.node_spacing
        if options.level_spacing is not None:
            opts["level_spacing"] = options.level_spacing
        if options.flowchart_engine is not None:
            opts["engine"] = options.flowchart_engine
    return opts
