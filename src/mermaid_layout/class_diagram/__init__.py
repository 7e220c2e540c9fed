from __future__ import annotations

from .types import (
    ClassDiagram,
    ClassEntity,
    ClassAttribute,
    ClassMethod,
    ClassRelationship,
    PositionedClassDiagram,
    PositionedClass,
    PositionedRelationship,
)
from .parser import parse_class_diagram
from .layout import layout_class_diagram

__all__ = [
    "ClassDiagram",
    "ClassEntity",
    "ClassAttribute",
    "ClassMethod",
    "ClassRelationship",
    "PositionedClassDiagram",
    "PositionedClass",
    "PositionedRelationship",
    "parse_class_diagram",
    "layout_class_diagram",
]
