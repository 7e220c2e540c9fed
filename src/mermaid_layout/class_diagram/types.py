from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from ..types import Point

# ============================================================================
# Class diagram types
#
# Models the parsed and positioned representations of a Mermaid class diagram.
# Class diagrams show UML class relationships, inheritance, composition, etc.
# ============================================================================

# Parsed class diagram -- logical structure from mermaid text

Visibility = Literal["public", "private", "protected", "package"]

VISIBILITY_PREFIXES: dict[str, Visibility] = {
    "+": "public",
    "-": "private",
    "#": "protected",
    "~": "package",
}

VISIBILITY_SYMBOLS: dict[Visibility, str] = {v: k for k, v in VISIBILITY_PREFIXES.items()}

RelationshipType = Literal[
    "inheritance",   # A <|-- B   (solid line, hollow triangle at A; A is "to")
    "composition",   # A *-- B    (solid line, filled diamond at A)
    "aggregation",   # A o-- B    (solid line, hollow diamond at A)
    "association",   # A --> B    (solid line, open arrow at B)
    "dependency",    # A ..> B    (dashed line, open arrow at B)
    "realization",   # A ..|> B   (dashed line, hollow triangle at B)
]

MarkerKind = Literal["hollow_triangle", "filled_diamond", "hollow_diamond", "open_arrow"]
MarkerAt = Literal["from", "to"]


@dataclass(slots=True)
class ClassAttribute:
    name: str
    type: str
    visibility: Visibility = "public"


@dataclass(slots=True)
class ClassMethod:
    name: str
    return_type: str | None = None
    parameters: list[str] = field(default_factory=list)
    visibility: Visibility = "public"


@dataclass(slots=True)
class ClassEntity:
    """A class definition in the diagram."""

    name: str
    attributes: list[ClassAttribute] = field(default_factory=list)
    methods: list[ClassMethod] = field(default_factory=list)
    # Annotation like <<interface>>, <<abstract>>
    annotation: str | None = None


@dataclass(slots=True)
class ClassRelationship:
    """A relationship between two classes."""

    from_: str
    to: str
    type: RelationshipType
    label: str | None = None


@dataclass(slots=True)
class ClassDiagram:
    """Parsed class diagram -- classes in first-seen order."""
    classes: list[ClassEntity] = field(default_factory=list)
    relationships: list[ClassRelationship] = field(default_factory=list)


def attribute_to_string(attr: ClassAttribute) -> str:
    """Display text for an attribute row, e.g. ``+int age``."""
    return f"{VISIBILITY_SYMBOLS[attr.visibility]}{attr.type} {attr.name}"


def method_to_string(method: ClassMethod) -> str:
    """Display text for a method row, e.g. ``+isMammal()``."""
    text = f"{VISIBILITY_SYMBOLS[method.visibility]}{method.name}({', '.join(method.parameters)})"
    if method.return_type:
        text += f" {method.return_type}"
    return text


# ============================================================================
# Positioned class diagram -- ready for rendering
# ============================================================================


@dataclass(slots=True)
class PositionedClass:
    name: str
    annotation: str | None
    attributes: list[ClassAttribute]
    methods: list[ClassMethod]
    # Center of the class box
    x: float
    y: float
    width: float
    height: float
    # Compartment heights (header, attributes, methods)
    header_height: float
    attributes_height: float
    methods_height: float


@dataclass(slots=True)
class PositionedRelationship:
    from_: str
    to: str
    type: RelationshipType
    label: str | None
    # Straight line between the two box outlines
    start: Point
    end: Point
    line_style: Literal["solid", "dashed"]
    marker_kind: MarkerKind
    # Which end carries the marker
    marker_at: MarkerAt
    # Marker outline, tip first
    marker: list[Point] = field(default_factory=list)
    label_position: Point | None = None


@dataclass(slots=True)
class PositionedClassDiagram:
    width: float
    height: float
    classes: list[PositionedClass] = field(default_factory=list)
    relationships: list[PositionedRelationship] = field(default_factory=list)
