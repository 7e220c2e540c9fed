from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from ..lines import SourceLine, strip_quotes
from .types import PSEUDOSTATE, StateDiagram, StateEntity, StateTransition

logger = logging.getLogger(__name__)

# ============================================================================
# State diagram parser
#
# Supported syntax:
#   [*] --> Idle                 (start transition)
#   Idle --> Running : start     (transition with label)
#   Running --> [*]              (end transition)
#   Idle : Waiting for input     (description)
#   state "Long name" as Long    (named declaration)
#   state Composite { ... }      (children are flattened into the diagram)
#   Idle                         (bare declaration)
# ============================================================================

_SKIPPED_RE = re.compile(r"^(?:statediagram(?:-v2)?\b|---|title:|direction\b|\}$)", re.IGNORECASE)
_NOTE_START_RE = re.compile(r"^note\b", re.IGNORECASE)
_NOTE_END_RE = re.compile(r"^end\s+note$", re.IGNORECASE)
_STATE_AS_RE = re.compile(r'^state\s+("[^"]*"|\'[^\']*\'|\S+)\s+as\s+(\S+)')
_STATE_RE = re.compile(r"^state\s+([^\s{]+)")
_BARE_ID_RE = re.compile(r"^[\w.-]+$")


@dataclass(slots=True)
class _StateParseState:
    """Accumulator threaded through the line scan."""
    states: dict[str, StateEntity] = field(default_factory=dict)
    transitions: list[StateTransition] = field(default_factory=list)
    # Inside a multi-line note block
    in_note: bool = False


def parse_state_diagram(lines: list[SourceLine]) -> StateDiagram:
    """Parse a Mermaid state diagram.

    States are listed in first-seen order. The [*] pseudostate never becomes
    a state; it flags its neighbour as start or end instead.
    """
    acc = _StateParseState()
    for line in lines:
        _parse_line(acc, line)
    return StateDiagram(states=list(acc.states.values()), transitions=acc.transitions)


def _parse_line(acc: _StateParseState, line: SourceLine) -> None:
    text = line.text

    if acc.in_note:
        if _NOTE_END_RE.match(text):
            acc.in_note = False
        return
    if _NOTE_START_RE.match(text):
        # Single-line notes carry their text after a colon
        acc.in_note = ":" not in text
        return
    if _SKIPPED_RE.match(text):
        return

    if "-->" in text:
        _parse_transition(acc, text)
        return

    m = _STATE_AS_RE.match(text)
    if m:
        _ensure_state(acc, m.group(2)).description = strip_quotes(m.group(1))
        return

    m = _STATE_RE.match(text)
    if m:
        _ensure_state(acc, m.group(1))
        return

    if ":" in text:
        state_id, _, description = text.partition(":")
        state_id = state_id.strip()
        if state_id and state_id != PSEUDOSTATE:
            _ensure_state(acc, state_id).description = description.strip()
        return

    if _BARE_ID_RE.match(text):
        _ensure_state(acc, text)
        return

    logger.debug("state: ignoring line %d: %r", line.index, text)


def _parse_transition(acc: _StateParseState, text: str) -> None:
    left, _, right = text.partition("-->")
    from_ = left.strip()
    to, colon, label = right.partition(":")
    to = to.strip()
    if not from_ or not to:
        return

    if from_ != PSEUDOSTATE:
        _ensure_state(acc, from_)
    if to != PSEUDOSTATE:
        _ensure_state(acc, to)

    if from_ == PSEUDOSTATE and to != PSEUDOSTATE:
        acc.states[to].is_start = True
    if to == PSEUDOSTATE and from_ != PSEUDOSTATE:
        acc.states[from_].is_end = True

    label = label.strip() if colon else ""
    acc.transitions.append(StateTransition(from_=from_, to=to, label=label or None))


def _ensure_state(acc: _StateParseState, state_id: str) -> StateEntity:
    entity = acc.states.get(state_id)
    if entity is None:
        entity = StateEntity(id=state_id)
        acc.states[state_id] = entity
    return entity
