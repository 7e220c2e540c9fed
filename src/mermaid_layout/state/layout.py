from __future__ import annotations

import logging
import math

from .types import (
    PSEUDOSTATE,
    PositionedPseudoState,
    PositionedState,
    PositionedStateDiagram,
    PositionedTransition,
    StateDiagram,
    StateEntity,
)
from ..routing import arrow_head, circle_boundary_point, rect_boundary_point
from ..styles import ARROW_HEAD, FONT_SIZES, estimate_text_size
from ..types import LayoutOptions, Point, Size

logger = logging.getLogger(__name__)

# ============================================================================
# State diagram layout engine
#
# States are bucketed (start states, regular states, end states), then
# packed row-major into a fixed-column grid of uniform cells. Each [*]
# transition gets its own filled dot beside the state it touches: start
# dots on the left, end dots on the right.
# ============================================================================

STATE = {
    "states_per_row": 4,
    "padding": 60,
    "min_width": 120,
    "min_height": 60,
    "text_pad_x": 16,
    "text_pad_y": 12,
    # Gap between cells
    "h_gap": 80,
    "v_gap": 40,
    # Pseudostate dot radius and distance from the box edge to its center
    "pseudo_radius": 10,
    "pseudo_offset": 30,
}


def layout_state_diagram(
    diagram: StateDiagram,
    size: Size,
    options: LayoutOptions | None = None,
) -> PositionedStateDiagram:
    opts = _merge_options(options)
    if not diagram.states:
        return PositionedStateDiagram(width=size.width, height=size.height)

    per_row = max(1, opts["states_per_row"])
    padding = opts["padding"]
    ordered = bucket_states(diagram.states)
    sizes = [_state_size(s, opts["measure"]) for s in ordered]
    cell_w = max(w for w, _ in sizes)
    cell_h = max(h for _, h in sizes)
    # Start dots hang off the left edge of the first column
    left = padding
    if any(s.is_start for s in ordered):
        left = max(padding, STATE["pseudo_offset"] + STATE["pseudo_radius"])

    states: list[PositionedState] = []
    for index, (entity, (w, h)) in enumerate(zip(ordered, sizes)):
        row, col = divmod(index, per_row)
        states.append(PositionedState(
            id=entity.id,
            description=entity.description,
            is_start=entity.is_start,
            is_end=entity.is_end,
            x=left + col * (cell_w + STATE["h_gap"]) + cell_w / 2,
            y=padding + row * (cell_h + STATE["v_gap"]) + cell_h / 2,
            width=w,
            height=h,
        ))

    by_id = {s.id: s for s in states}
    pseudostates = []
    start_dot: dict[str, PositionedPseudoState] = {}
    end_dot: dict[str, PositionedPseudoState] = {}
    for s in states:
        reach = s.width / 2 + STATE["pseudo_offset"]
        if s.is_start:
            dot = PositionedPseudoState("start", s.id, s.x - reach, s.y, STATE["pseudo_radius"])
            start_dot[s.id] = dot
            pseudostates.append(dot)
        if s.is_end:
            dot = PositionedPseudoState("end", s.id, s.x + reach, s.y, STATE["pseudo_radius"])
            end_dot[s.id] = dot
            pseudostates.append(dot)

    transitions = []
    for t in diagram.transitions:
        if t.from_ == PSEUDOSTATE and t.to in start_dot:
            transitions.append(_connect_dot_to_state(t.from_, t.to, t.label, start_dot[t.to], by_id[t.to]))
        elif t.to == PSEUDOSTATE and t.from_ in end_dot:
            transitions.append(_connect_state_to_dot(t.from_, t.to, t.label, by_id[t.from_], end_dot[t.from_]))
        elif t.from_ in by_id and t.to in by_id:
            transitions.append(_connect_states(t.from_, t.to, t.label, by_id[t.from_], by_id[t.to]))
        else:
            logger.debug("state: transition %s -> %s has no endpoints, skipped", t.from_, t.to)

    right = max([s.x + s.width / 2 for s in states] + [d.x + d.radius for d in pseudostates])
    bottom = max(s.y + s.height / 2 for s in states)
    result = PositionedStateDiagram(
        width=max(size.width, right + padding),
        height=max(size.height, bottom + padding),
        states=states,
        pseudostates=pseudostates,
        transitions=transitions,
    )
    logger.debug("state layout: %d states, %.0fx%.0f", len(states), result.width, result.height)
    return result


def bucket_states(states: list[StateEntity]) -> list[StateEntity]:
    """Order states as start states, then regular, then end states.

    A state that is both start and end goes with the start states.
    """
    start = [s for s in states if s.is_start]
    end = [s for s in states if s.is_end and not s.is_start]
    regular = [s for s in states if not s.is_start and not s.is_end]
    return start + regular + end


def _state_size(entity: StateEntity, measure) -> tuple[float, float]:
    name_w, name_h = measure(entity.id, FONT_SIZES["state_label"])
    text_w, text_h = name_w, name_h
    if entity.description:
        desc_w, desc_h = measure(entity.description, FONT_SIZES["note"])
        text_w = max(text_w, desc_w)
        text_h += desc_h
    return (
        max(STATE["min_width"], text_w + STATE["text_pad_x"] * 2),
        max(STATE["min_height"], text_h + STATE["text_pad_y"] * 2),
    )


def _state_boundary(state: PositionedState, ux: float, uy: float) -> Point:
    return rect_boundary_point(state.x, state.y, state.width / 2, state.height / 2, ux, uy)


def _connect_states(
    from_: str, to: str, label: str | None, source: PositionedState, target: PositionedState
) -> PositionedTransition:
    dx, dy = target.x - source.x, target.y - source.y
    dist = math.hypot(dx, dy)
    if dist == 0:
        # Self transition: anchor at the top edge, no arrowhead
        top = Point(x=source.x, y=source.y - source.height / 2)
        return PositionedTransition(from_, to, label, top, top, [], top)
    ux, uy = dx / dist, dy / dist
    return _transition(from_, to, label, _state_boundary(source, ux, uy), _state_boundary(target, -ux, -uy))


def _connect_dot_to_state(
    from_: str, to: str, label: str | None, dot: PositionedPseudoState, target: PositionedState
) -> PositionedTransition:
    start = circle_boundary_point(dot.x, dot.y, dot.radius, 1, 0)
    end = _state_boundary(target, -1, 0)
    return _transition(from_, to, label, start, end)


def _connect_state_to_dot(
    from_: str, to: str, label: str | None, source: PositionedState, dot: PositionedPseudoState
) -> PositionedTransition:
    start = _state_boundary(source, 1, 0)
    end = circle_boundary_point(dot.x, dot.y, dot.radius, -1, 0)
    return _transition(from_, to, label, start, end)


def _transition(from_: str, to: str, label: str | None, start: Point, end: Point) -> PositionedTransition:
    angle = math.atan2(end.y - start.y, end.x - start.x)
    return PositionedTransition(
        from_=from_,
        to=to,
        label=label,
        start=start,
        end=end,
        arrow=arrow_head(end, angle, ARROW_HEAD["connector_length"], ARROW_HEAD["connector_spread"]),
        label_position=Point(x=(start.x + end.x) / 2, y=(start.y + end.y) / 2),
    )


def _merge_options(options: LayoutOptions | None) -> dict:
    opts = {
        "states_per_row": STATE["states_per_row"],
        "padding": STATE["padding"],
        "measure": estimate_text_size,
    }
    if options:
        if options.states_per_row is not None:
            opts["states_per_row"] = options.states_per_row
        if options.padding is not None:
            opts["padding"] = options.padding
        if options.measure is not None:
            opts["measure"] = options.measure
    return opts
