from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from ..lines import SourceLine, strip_quotes
from .types import (
    SequenceActivation,
    SequenceDiagram,
    SequenceLoop,
    SequenceMessage,
    SequenceMessageType,
    SequenceNote,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Sequence diagram parser
#
# Parses Mermaid sequenceDiagram syntax into a SequenceDiagram structure.
#
# Supported syntax:
#   participant Alice / participant A as Alice / actor Bob
#   Alice->>Bob: Hello           (A->B, A->>B, A-->B, A-->>B, A-xB, A--xB, A-)B, A--)B)
#   Alice->>+Bob: Hi             (activate target)
#   Bob-->>-Alice: Bye           (deactivate source)
#   activate Alice / deactivate Alice
#   Note left of A: text / Note right of A: text / Note over A,B: text
#   loop Every minute ... end
#   box / alt / opt / par / critical / break / rect ... end   (nesting only)
#   else / and                   (dividers, ignored)
# ============================================================================

_DECLARATION_RE = re.compile(r"^sequencediagram\b", re.IGNORECASE)
_SKIPPED_RE = re.compile(r"^(?:autonumber|title)\b", re.IGNORECASE)
_PARTICIPANT_RE = re.compile(r'^(?:participant|actor)\s+("[^"]+"|\S+)')
_NOTE_RE = re.compile(
    r"^note\s+(left\s+of|right\s+of|over)\s+([^:]+?)\s*:\s*(.*)$", re.IGNORECASE
)
_ACTIVATION_RE = re.compile(r"^(activate|deactivate)\s+(\S+)\s*$")
_LOOP_RE = re.compile(r"^loop\b\s*(.*)$")
_OPENER_RE = re.compile(r"^(?:box|alt|opt|par|critical|break|rect)\b")
_DIVIDER_RE = re.compile(r"^(?:else|and)\b")

# Most specific operators first
ARROWS: list[tuple[str, SequenceMessageType]] = [
    ("-->>", "async_response"),
    ("-->", "sync_response"),
    ("--x", "lost"),
    ("--)", "async_response"),
    ("->>", "async_request"),
    ("->", "sync_request"),
    ("-x", "lost"),
    ("-)", "async_request"),
]


@dataclass(slots=True)
class _OpenLoop:
    text: str
    start_index: int
    # Nesting depth at which the loop was opened
    depth: int
    first_message: int
    messages: list[SequenceMessage] = field(default_factory=list)


@dataclass(slots=True)
class _SequenceState:
    """Accumulator threaded through the line scan."""
    diagram: SequenceDiagram = field(default_factory=SequenceDiagram)
    known: set[str] = field(default_factory=set)
    depth: int = 0
    open_loops: list[_OpenLoop] = field(default_factory=list)


def parse_sequence_diagram(lines: list[SourceLine]) -> SequenceDiagram:
    """Parse a Mermaid sequence diagram. Unrecognized lines are skipped."""
    state = _SequenceState()
    for line in lines:
        _parse_line(state, line)

    for loop in state.open_loops:
        logger.debug("sequence: dropping unterminated loop %r from line %d", loop.text, loop.start_index)
    return state.diagram


def _parse_line(state: _SequenceState, line: SourceLine) -> None:
    text = line.text
    diagram = state.diagram

    if _DECLARATION_RE.match(text) or _SKIPPED_RE.match(text):
        return

    # --- block end ---
    if text == "end":
        if state.open_loops and state.open_loops[-1].depth == state.depth:
            opened = state.open_loops.pop()
            diagram.loops.append(
                SequenceLoop(
                    text=opened.text,
                    start_index=opened.start_index,
                    end_index=line.index,
                    messages=opened.messages,
                    first_message=opened.first_message,
                )
            )
        if state.depth > 0:
            state.depth -= 1
        return

    # --- loop start ---
    m = _LOOP_RE.match(text)
    if m:
        state.depth += 1
        state.open_loops.append(
            _OpenLoop(
                text=m.group(1).strip(),
                start_index=line.index,
                depth=state.depth,
                first_message=len(diagram.messages),
            )
        )
        return

    # --- other blocks: only nesting is tracked ---
    if _OPENER_RE.match(text):
        state.depth += 1
        return
    if _DIVIDER_RE.match(text):
        return

    # --- participant / actor declaration ---
    m = _PARTICIPANT_RE.match(text)
    if m:
        _ensure_participant(state, strip_quotes(m.group(1)))
        return

    # --- note ---
    if text.lower().startswith("note "):
        _parse_note(state, line)
        return

    # --- activate / deactivate ---
    m = _ACTIVATION_RE.match(text)
    if m:
        participant = m.group(2)
        _ensure_participant(state, participant)
        diagram.activations.append(
            SequenceActivation(
                participant=participant,
                is_activate=m.group(1) == "activate",
                message_index=len(diagram.messages),
            )
        )
        return

    # --- message ---
    if not _parse_message(state, text):
        logger.debug("sequence: ignoring line %d: %r", line.index, text)


def _parse_note(state: _SequenceState, line: SourceLine) -> None:
    m = _NOTE_RE.match(line.text)
    if not m:
        logger.debug("sequence: ignoring malformed note on line %d", line.index)
        return

    placement = " ".join(m.group(1).lower().split())
    participants = [p.strip() for p in m.group(2).split(",") if p.strip()]
    if not participants:
        return
    if placement != "over":
        participants = participants[:1]
    for p in participants:
        _ensure_participant(state, p)

    state.diagram.notes.append(
        SequenceNote(
            text=m.group(3).strip(),
            position=placement.replace(" ", "_"),  # type: ignore[arg-type]
            participants=participants,
            message_index=len(state.diagram.messages),
        )
    )


def _parse_message(state: _SequenceState, text: str) -> bool:
    head, colon, body = text.partition(":")
    for arrow, message_type in ARROWS:
        pos = head.find(arrow)
        if pos < 0:
            continue

        from_ = head[:pos].strip()
        to = head[pos + len(arrow):].strip()
        activation_mark = ""
        if to[:1] in ("+", "-"):
            activation_mark, to = to[0], to[1:].strip()
        if not from_ or not to:
            return False

        _ensure_participant(state, from_)
        _ensure_participant(state, to)

        diagram = state.diagram
        index = len(diagram.messages)
        msg = SequenceMessage(from_=from_, to=to, text=body.strip() if colon else "", type=message_type)
        diagram.messages.append(msg)
        for loop in state.open_loops:
            loop.messages.append(msg)

        # Activation/deactivation via +/- prefix on target
        if activation_mark == "+":
            diagram.activations.append(SequenceActivation(participant=to, is_activate=True, message_index=index))
        elif activation_mark == "-":
            diagram.activations.append(SequenceActivation(participant=from_, is_activate=False, message_index=index))
        return True
    return False


def _ensure_participant(state: _SequenceState, participant: str) -> None:
    """Register a participant on first use."""
    if participant not in state.known:
        state.known.add(participant)
        state.diagram.participants.append(participant)
