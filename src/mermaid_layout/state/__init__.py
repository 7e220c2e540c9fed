from __future__ import annotations

from .types import (
    PSEUDOSTATE,
    StateDiagram,
    StateEntity,
    StateTransition,
    PositionedStateDiagram,
    PositionedState,
    PositionedPseudoState,
    PositionedTransition,
)
from .parser import parse_state_diagram
from .layout import layout_state_diagram

__all__ = [
    "PSEUDOSTATE",
    "StateDiagram",
    "StateEntity",
    "StateTransition",
    "PositionedStateDiagram",
    "PositionedState",
    "PositionedPseudoState",
    "PositionedTransition",
    "parse_state_diagram",
    "layout_state_diagram",
]
