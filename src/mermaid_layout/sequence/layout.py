from __future__ import annotations

import logging

from .types import (
    Activation,
    ArrowHead,
    Lifeline,
    LineStyle,
    PositionedLoop,
    PositionedMessage,
    PositionedNote,
    PositionedParticipant,
    PositionedSequenceDiagram,
    SequenceDiagram,
    SequenceMessageType,
)
from ..types import LayoutOptions, Size
from ..styles import FONT_SIZES, estimate_text_size

logger = logging.getLogger(__name__)

# ============================================================================
# Sequence diagram layout engine
#
# Order-based timeline layout (sequence diagrams aren't graphs).
#
# Layout strategy:
#   1. Spread participants evenly along one axis, centered in the canvas
#   2. Give each message a fixed vertical slot by parse order
#   3. Activation bars span a fixed number of slots from their index
#   4. Notes sit beside (or over) their participants, between slots
#   5. Loops box the slots of their captured messages
# ============================================================================

# Layout constants specific to sequence diagrams
SEQ = {
    # Upper bound on the distance between participant centers
    "participant_spacing": 150,
    # Vertical distance between message slots
    "message_spacing": 60,
    # Space above the participant boxes
    "top_margin": 40,
    "participant_height": 40,
    "participant_pad_x": 16,
    "min_participant_width": 80,
    # Horizontal margin kept free on each side when spreading participants
    "side_margin": 40,
    # Space between participant boxes and the first message
    "header_gap": 40,
    # Lifelines stop this far above the canvas bottom
    "bottom_margin": 20,
    # Activation bar width and length in slots
    "activation_width": 10,
    "activation_slots": 2,
    # Note dimensions
    "note_width": 100,
    "note_height": 30,
    "note_padding": 8,
    "note_gap": 10,
    # Loop box padding
    "loop_pad_x": 20,
    "loop_header": 30,
    "loop_pad_bottom": 15,
    # Horizontal reach of a self-message loop-back
    "self_message_width": 30,
}

# message type -> (line style, arrow head)
MESSAGE_STYLES: dict[SequenceMessageType, tuple[LineStyle, ArrowHead]] = {
    "sync_request": ("solid", "none"),
    "async_request": ("solid", "filled"),
    "sync_response": ("dashed", "none"),
    "async_response": ("dashed", "filled"),
    "lost": ("solid", "cross"),
    "found": ("solid", "filled"),
}


def layout_sequence_diagram(
    diagram: SequenceDiagram,
    size: Size,
    options: LayoutOptions | None = None,
) -> PositionedSequenceDiagram:
    """Lay out a parsed sequence diagram inside the available size.

    Returns a fully positioned diagram ready for rendering.
    """
    opts = _merge_options(options)
    measure = opts["measure"]
    spacing = opts["message_spacing"]

    if not diagram.participants:
        return PositionedSequenceDiagram(width=size.width, height=size.height)

    # 1. Participant centers
    centers = participant_centers(len(diagram.participants), size.width, opts["participant_spacing"])
    center_of = dict(zip(diagram.participants, centers))

    participant_y = SEQ["top_margin"]
    participants = []
    for pid, x in zip(diagram.participants, centers):
        text_w, _ = measure(pid, FONT_SIZES["node_label"])
        participants.append(PositionedParticipant(
            id=pid,
            x=x,
            y=participant_y,
            width=max(SEQ["min_participant_width"], text_w + SEQ["participant_pad_x"] * 2),
            height=SEQ["participant_height"],
        ))

    first_slot = participant_y + SEQ["participant_height"] + SEQ["header_gap"]

    def slot_y(index: int) -> float:
        return first_slot + index * spacing

    # 2. Messages
    messages = []
    for i, msg in enumerate(diagram.messages):
        line_style, arrow_head = MESSAGE_STYLES[msg.type]
        messages.append(PositionedMessage(
            from_=msg.from_,
            to=msg.to,
            text=msg.text,
            type=msg.type,
            line_style=line_style,
            arrow_head=arrow_head,
            x1=center_of[msg.from_],
            x2=center_of[msg.to],
            y=slot_y(i),
            is_self=msg.from_ == msg.to,
        ))

    # 3. Activation bars
    activations = []
    for act in diagram.activations:
        if not act.is_activate:
            continue
        top = slot_y(act.message_index) - SEQ["activation_width"]
        activations.append(Activation(
            participant=act.participant,
            x=center_of[act.participant] - SEQ["activation_width"] / 2,
            top_y=top,
            bottom_y=top + SEQ["activation_slots"] * spacing,
            width=SEQ["activation_width"],
        ))

    # 4. Notes, centered in the gap before their message slot
    notes = []
    for note in diagram.notes:
        text_w, _ = measure(note.text, FONT_SIZES["note"])
        width = max(SEQ["note_width"], text_w + SEQ["note_padding"] * 2)
        xs = [center_of[p] for p in note.participants]
        if note.position == "left_of":
            x = xs[0] - SEQ["note_gap"] - width
        elif note.position == "right_of":
            x = xs[0] + SEQ["note_gap"]
        else:
            span = max(xs) - min(xs)
            width = max(width, span + SEQ["loop_pad_x"] * 2)
            x = (min(xs) + max(xs)) / 2 - width / 2
        y = slot_y(note.message_index) - spacing / 2 - SEQ["note_height"] / 2
        notes.append(PositionedNote(
            text=note.text,
            position=note.position,
            x=x,
            y=y,
            width=width,
            height=SEQ["note_height"],
        ))

    # 5. Loop boxes
    loops = []
    for loop in diagram.loops:
        involved = [center_of[m.from_] for m in loop.messages] + [center_of[m.to] for m in loop.messages]
        if not involved:
            involved = centers
        last = loop.first_message + max(len(loop.messages), 1) - 1
        left = min(involved) - SEQ["loop_pad_x"]
        right = max(involved) + SEQ["loop_pad_x"]
        if any(m.from_ == m.to for m in loop.messages):
            right += SEQ["self_message_width"]
        top = slot_y(loop.first_message) - SEQ["loop_header"]
        loops.append(PositionedLoop(
            text=loop.text,
            x=left,
            y=top,
            width=right - left,
            height=slot_y(last) + SEQ["loop_pad_bottom"] - top,
        ))

    # Lifelines run from the participant boxes to the bottom of the content
    content_bottom = max(
        [slot_y(len(diagram.messages))]
        + [a.bottom_y for a in activations]
        + [n.y + n.height for n in notes]
        + [box.y + box.height for box in loops]
    )
    bottom_y = max(size.height - SEQ["bottom_margin"], content_bottom)
    lifelines = [
        Lifeline(participant=p.id, x=p.x, top_y=p.y + p.height, bottom_y=bottom_y)
        for p in participants
    ]

    result = PositionedSequenceDiagram(
        width=size.width,
        height=bottom_y + SEQ["bottom_margin"],
        participants=participants,
        lifelines=lifelines,
        messages=messages,
        activations=activations,
        notes=notes,
        loops=loops,
    )
    _fit_horizontally(result)
    logger.debug(
        "sequence layout: %d participants, %d messages, %.0fx%.0f",
        len(participants), len(messages), result.width, result.height,
    )
    return result


def participant_centers(count: int, width: float, max_spacing: float) -> list[float]:
    """Evenly spaced centers, at most ``max_spacing`` apart, centered as a group."""
    if count <= 1:
        return [width / 2] * count
    available = max(width - SEQ["side_margin"] * 2, 0)
    step = min(available / (count - 1), max_spacing)
    left = (width - step * (count - 1)) / 2
    return [left + i * step for i in range(count)]


def _fit_horizontally(result: PositionedSequenceDiagram) -> None:
    """Shift everything right when notes or boxes overhang the left edge,
    and widen the canvas to the rightmost element."""
    lefts = (
        [p.x - p.width / 2 for p in result.participants]
        + [n.x for n in result.notes]
        + [box.x for box in result.loops]
    )
    rights = (
        [p.x + p.width / 2 for p in result.participants]
        + [n.x + n.width for n in result.notes]
        + [box.x + box.width for box in result.loops]
        + [m.x1 + SEQ["self_message_width"] for m in result.messages if m.is_self]
    )

    margin = SEQ["note_gap"]
    dx = max(0.0, margin - min(lefts))
    if dx:
        for p in result.participants:
            p.x += dx
        for line in result.lifelines:
            line.x += dx
        for m in result.messages:
            m.x1 += dx
            m.x2 += dx
        for a in result.activations:
            a.x += dx
        for n in result.notes:
            n.x += dx
        for box in result.loops:
            box.x += dx
    result.width = max(result.width, max(rights) + dx + margin)


def _merge_options(options: LayoutOptions | None) -> dict:
    opts = {
        "participant_spacing": SEQ["participant_spacing"],
        "message_spacing": SEQ["message_spacing"],
        "measure": estimate_text_size,
    }
    if options:
        if options.participant_spacing is not None:
            opts["participant_spacing"] = options.participant_spacing
        if options.message_spacing is not None:
            opts["message_spacing"] = options.message_spacing
        if options.measure is not None:
            opts["measure"] = options.measure
    return opts
