from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

# ============================================================================
# Sequence diagram types
#
# Models the parsed and positioned representations of a Mermaid sequence diagram.
# Sequence diagrams show participant interactions over time (vertical timeline).
# ============================================================================

# ============================================================================
# Parsed sequence diagram -- logical structure from mermaid text
# ============================================================================

SequenceMessageType = Literal[
    "sync_request",    # A->B
    "async_request",   # A->>B, A-)B
    "sync_response",   # A-->B
    "async_response",  # A-->>B, A--)B
    "lost",            # A-xB, A--xB
    "found",
]
NotePosition = Literal["left_of", "right_of", "over"]
LineStyle = Literal["solid", "dashed"]
ArrowHead = Literal["none", "filled", "cross"]


@dataclass(slots=True)
class SequenceMessage:
    from_: str
    to: str
    text: str
    type: SequenceMessageType


@dataclass(slots=True)
class SequenceNote:
    text: str
    position: NotePosition
    # One participant for left_of/right_of, one or more for over
    participants: list[str]
    # Index of the message that follows the note
    message_index: int = 0


@dataclass(slots=True)
class SequenceActivation:
    participant: str
    is_activate: bool
    # Index of the message slot where the (de)activation takes effect
    message_index: int = 0


@dataclass(slots=True)
class SequenceLoop:
    text: str
    # Line numbers of the "loop" and matching "end" lines
    start_index: int
    end_index: int
    # Messages captured between the two lines
    messages: list[SequenceMessage] = field(default_factory=list)
    # Index of the first captured message in SequenceDiagram.messages
    first_message: int = 0


@dataclass(slots=True)
class SequenceDiagram:
    """Parsed sequence diagram -- logical structure from mermaid text."""
    # Declaration or first-use order, deduplicated
    participants: list[str] = field(default_factory=list)
    messages: list[SequenceMessage] = field(default_factory=list)
    notes: list[SequenceNote] = field(default_factory=list)
    activations: list[SequenceActivation] = field(default_factory=list)
    # Closed loops only, in the order their "end" lines appear
    loops: list[SequenceLoop] = field(default_factory=list)


# ============================================================================
# Positioned sequence diagram -- ready for rendering
# ============================================================================


@dataclass(slots=True)
class PositionedParticipant:
    id: str
    # Center x of the participant box
    x: float
    # Top y of the participant box
    y: float
    width: float
    height: float


@dataclass(slots=True)
class Lifeline:
    """Vertical dashed line from participant to bottom of diagram."""
    participant: str
    x: float
    top_y: float
    bottom_y: float


@dataclass(slots=True)
class PositionedMessage:
    from_: str
    to: str
    text: str
    type: SequenceMessageType
    line_style: LineStyle
    arrow_head: ArrowHead
    # Start point (from participant's lifeline)
    x1: float
    # End point (to participant's lifeline)
    x2: float
    # Vertical slot
    y: float
    # Whether this is a self-message (same participant)
    is_self: bool


@dataclass(slots=True)
class Activation:
    """Narrow rectangle on a lifeline showing active processing."""
    participant: str
    # Left x of the bar
    x: float
    top_y: float
    bottom_y: float
    width: float


@dataclass(slots=True)
class PositionedNote:
    text: str
    position: NotePosition
    # Top-left corner
    x: float
    y: float
    width: float
    height: float


@dataclass(slots=True)
class PositionedLoop:
    """Dashed bounding box around the messages of a loop."""
    text: str
    # Top-left corner
    x: float
    y: float
    width: float
    height: float


@dataclass(slots=True)
class PositionedSequenceDiagram:
    width: float
    height: float
    participants: list[PositionedParticipant] = field(default_factory=list)
    lifelines: list[Lifeline] = field(default_factory=list)
    messages: list[PositionedMessage] = field(default_factory=list)
    activations: list[Activation] = field(default_factory=list)
    notes: list[PositionedNote] = field(default_factory=list)
    loops: list[PositionedLoop] = field(default_factory=list)
