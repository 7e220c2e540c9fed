from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from ..lines import SourceLine, strip_quotes
from .types import (
    VISIBILITY_PREFIXES,
    ClassAttribute,
    ClassDiagram,
    ClassEntity,
    ClassMethod,
    ClassRelationship,
    RelationshipType,
    Visibility,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Class diagram parser
#
# Parses Mermaid classDiagram syntax into a ClassDiagram structure.
#
# Supported syntax:
#   class Animal { +int age; +isMammal() }   (one member per line)
#   class Animal                              (declaration without body)
#   Animal <|-- Duck                          (inheritance, Animal is "to")
#   Car *-- Engine                            (composition)
#   Car o-- Wheel                             (aggregation)
#   A --> B                                   (association)
#   A ..> B                                   (dependency)
#   A ..|> B                                  (realization)
#   A "1" --> "*" B : label                   (cardinality ignored, label kept)
#   Animal : +int age                         (inline member)
#   <<interface>> Shape                       (annotation)
# ============================================================================

_SKIPPED_RE = re.compile(r"^(?:classdiagram|direction|note\s+for|note)\b", re.IGNORECASE)

_NAME = r"[\w.~<>-]+?"
_CARDINALITY = r'(?:"[^"]*"\s*)?'
_RELATIONSHIP_RE = re.compile(
    rf"^({_NAME})\s*{_CARDINALITY}(<\|--|\*--|(?<!\w)o--|-->|\.\.\|>|\.\.>)\s*{_CARDINALITY}([\w.~-]+)\s*(?::\s*(.*))?$"
)

_CLASS_RE = re.compile(r"^class\s+([^\s{]+)\s*(\{)?\s*(\})?")
_ANNOTATION_RE = re.compile(r"^<<(.+?)>>\s*(\S+)?$")
_INLINE_MEMBER_RE = re.compile(r"^([\w.~-]+)\s*:\s*(.+)$")

_RELATIONSHIP_TYPES: dict[str, RelationshipType] = {
    "<|--": "inheritance",
    "*--": "composition",
    "o--": "aggregation",
    "-->": "association",
    "..|>": "realization",
    "..>": "dependency",
}


@dataclass(slots=True)
class _ClassState:
    """Accumulator threaded through the line scan."""
    diagram: ClassDiagram = field(default_factory=ClassDiagram)
    classes: dict[str, ClassEntity] = field(default_factory=dict)
    # Class whose { ... } body is open
    current: ClassEntity | None = None


def parse_class_diagram(lines: list[SourceLine]) -> ClassDiagram:
    """Parse a Mermaid class diagram.

    Classes referenced only by a relationship are created empty.
    """
    state = _ClassState()
    for line in lines:
        _parse_line(state, line)
    return state.diagram


def _parse_line(state: _ClassState, line: SourceLine) -> None:
    text = line.text

    # --- inside a class body ---
    if state.current is not None:
        if text.startswith("}"):
            state.current = None
            return
        m = _ANNOTATION_RE.match(text)
        if m:
            state.current.annotation = m.group(1).strip()
            return
        _add_member(state.current, text)
        return

    if _SKIPPED_RE.match(text):
        return

    # --- relationship ---
    m = _RELATIONSHIP_RE.match(text)
    if m:
        left, operator, right = m.group(1), m.group(2), m.group(3)
        rel_type = _RELATIONSHIP_TYPES[operator]
        if rel_type == "inheritance":
            # Parent on the left is the "to" end
            from_, to = right, left
        else:
            from_, to = left, right
        _ensure_class(state, left)
        _ensure_class(state, right)
        label = strip_quotes(m.group(4)) if m.group(4) else None
        state.diagram.relationships.append(
            ClassRelationship(from_=from_, to=to, type=rel_type, label=label or None)
        )
        return

    # --- class declaration ---
    m = _CLASS_RE.match(text)
    if m:
        entity = _ensure_class(state, m.group(1))
        if m.group(2) and not m.group(3):
            state.current = entity
        return

    # --- annotation outside a body ---
    m = _ANNOTATION_RE.match(text)
    if m and m.group(2):
        _ensure_class(state, m.group(2)).annotation = m.group(1).strip()
        return

    # --- inline member: ClassName : member ---
    m = _INLINE_MEMBER_RE.match(text)
    if m:
        _add_member(_ensure_class(state, m.group(1)), m.group(2))
        return

    logger.debug("class: ignoring line %d: %r", line.index, text)


def _ensure_class(state: _ClassState, name: str) -> ClassEntity:
    entity = state.classes.get(name)
    if entity is None:
        entity = ClassEntity(name=name)
        state.classes[name] = entity
        state.diagram.classes.append(entity)
    return entity


def _add_member(entity: ClassEntity, text: str) -> None:
    member = parse_member(text)
    if isinstance(member, ClassMethod):
        entity.methods.append(member)
    elif isinstance(member, ClassAttribute):
        entity.attributes.append(member)


def parse_member(text: str) -> ClassAttribute | ClassMethod | None:
    """Parse one member line.

    ``+name(a, b) ReturnType`` is a method, ``+Type name`` an attribute, and
    a single bare token an attribute of type String.
    """
    text = text.strip().rstrip(";").strip()
    if not text or text in ("{", "}"):
        return None

    visibility: Visibility = "public"
    if text[0] in VISIBILITY_PREFIXES:
        visibility = VISIBILITY_PREFIXES[text[0]]
        text = text[1:].strip()
    if not text:
        return None

    open_paren = text.find("(")
    close_paren = text.rfind(")")
    if 0 <= open_paren < close_paren:
        params = text[open_paren + 1:close_paren]
        return_type = text[close_paren + 1:].strip().lstrip(":").strip()
        return ClassMethod(
            name=text[:open_paren].strip(),
            return_type=return_type or None,
            parameters=[p.strip() for p in params.split(",") if p.strip()],
            visibility=visibility,
        )

    parts = text.split()
    if len(parts) >= 2:
        return ClassAttribute(name=parts[1], type=parts[0], visibility=visibility)
    return ClassAttribute(name=parts[0], type="String", visibility=visibility)
