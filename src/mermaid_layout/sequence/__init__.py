from __future__ import annotations

from .types import (
    SequenceDiagram,
    SequenceMessage,
    SequenceNote,
    SequenceActivation,
    SequenceLoop,
    PositionedSequenceDiagram,
    PositionedParticipant,
    Lifeline,
    PositionedMessage,
    Activation,
    PositionedNote,
    PositionedLoop,
)
from .parser import parse_sequence_diagram
from .layout import layout_sequence_diagram

__all__ = [
    "SequenceDiagram",
    "SequenceMessage",
    "SequenceNote",
    "SequenceActivation",
    "SequenceLoop",
    "PositionedSequenceDiagram",
    "PositionedParticipant",
    "Lifeline",
    "PositionedMessage",
    "Activation",
    "PositionedNote",
    "PositionedLoop",
    "parse_sequence_diagram",
    "layout_sequence_diagram",
]
