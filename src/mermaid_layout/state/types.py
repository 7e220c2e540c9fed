from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from ..types import Point

# ============================================================================
# State diagram types
# ============================================================================

# Sentinel id of the start/end pseudostate
PSEUDOSTATE = "[*]"


@dataclass(slots=True)
class StateEntity:
    id: str
    description: str | None = None
    # Reached by a transition from [*]
    is_start: bool = False
    # Has a transition to [*]
    is_end: bool = False


@dataclass(slots=True)
class StateTransition:
    """A transition; either end may be the [*] pseudostate."""

    from_: str
    to: str
    label: str | None = None


@dataclass(slots=True)
class StateDiagram:
    states: list[StateEntity] = field(default_factory=list)
    transitions: list[StateTransition] = field(default_factory=list)


# ============================================================================
# Positioned state diagram
# ============================================================================


@dataclass(slots=True)
class PositionedState:
    id: str
    description: str | None
    is_start: bool
    is_end: bool
    # Center of the state box
    x: float
    y: float
    width: float
    height: float


@dataclass(slots=True)
class PositionedPseudoState:
    """A filled dot drawn beside the state it starts or ends."""

    kind: Literal["start", "end"]
    # Id of the state the dot is attached to
    state: str
    x: float
    y: float
    radius: float


@dataclass(slots=True)
class PositionedTransition:
    from_: str
    to: str
    label: str | None
    start: Point
    end: Point
    # Open arrowhead at the end, tip first
    arrow: list[Point] = field(default_factory=list)
    label_position: Point | None = None


@dataclass(slots=True)
class PositionedStateDiagram:
    width: float
    height: float
    states: list[PositionedState] = field(default_factory=list)
    pseudostates: list[PositionedPseudoState] = field(default_factory=list)
    transitions: list[PositionedTransition] = field(default_factory=list)
