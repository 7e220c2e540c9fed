"""Tests for the class diagram parser.

Covers: class declarations with bodies, members (attributes and methods with
visibility), relationship operators, labels, annotations and inline members.
"""
from __future__ import annotations

import pytest

from mermaid_layout import parse
from mermaid_layout.class_diagram.parser import parse_class_diagram, parse_member
from mermaid_layout.class_diagram.types import ClassAttribute, ClassMethod, attribute_to_string, method_to_string
from mermaid_layout.examples import CLASS
from mermaid_layout.lines import source_lines


def parse_classes(text: str):
    return parse_class_diagram(source_lines(text))


def find(diagram, name: str):
    return next(c for c in diagram.classes if c.name == name)


# ============================================================================
# Example diagram
# ============================================================================


class TestAnimalExample:
    def test_classes_in_first_seen_order(self):
        d = parse_classes(CLASS)
        assert [c.name for c in d.classes] == ["Animal", "Duck", "Fish", "Zebra"]

    def test_inheritance_points_at_parent(self):
        d = parse_classes(CLASS)
        assert len(d.relationships) == 3
        for rel in d.relationships:
            assert rel.type == "inheritance"
            assert rel.to == "Animal"
        assert [rel.from_ for rel in d.relationships] == ["Duck", "Fish", "Zebra"]

    def test_inline_members(self):
        animal = find(parse_classes(CLASS), "Animal")
        assert [(a.type, a.name) for a in animal.attributes] == [("int", "age"), ("String", "gender")]
        assert [m.name for m in animal.methods] == ["isMammal", "mate"]

    def test_body_members(self):
        duck = find(parse_classes(CLASS), "Duck")
        assert [a.name for a in duck.attributes] == ["beakColor"]
        assert [m.name for m in duck.methods] == ["swim", "quack"]

    def test_private_members(self):
        fish = find(parse_classes(CLASS), "Fish")
        assert fish.attributes[0].visibility == "private"
        assert fish.methods[0].visibility == "private"

    def test_generic_graph_mirror(self):
        d = parse(CLASS)
        assert d.kind == "class"
        assert [n.id for n in d.nodes] == ["Animal", "Duck", "Fish", "Zebra"]
        assert [(e.source, e.target) for e in d.edges] == [
            ("Duck", "Animal"),
            ("Fish", "Animal"),
            ("Zebra", "Animal"),
        ]


# ============================================================================
# Declarations
# ============================================================================


class TestDeclarations:
    def test_class_without_body(self):
        d = parse_classes("classDiagram\n  class Empty")
        assert [c.name for c in d.classes] == ["Empty"]
        assert d.classes[0].attributes == []

    def test_one_line_empty_body(self):
        d = parse_classes("classDiagram\n  class Empty {}\n  class Next")
        assert [c.name for c in d.classes] == ["Empty", "Next"]

    def test_body_closes_on_brace(self):
        d = parse_classes(
            "classDiagram\n"
            "  class A {\n"
            "    +String name\n"
            "  }\n"
            "  B : +int count"
        )
        assert [a.name for a in find(d, "A").attributes] == ["name"]
        assert [a.name for a in find(d, "B").attributes] == ["count"]

    def test_redeclaration_reuses_class(self):
        d = parse_classes("classDiagram\n  A --> B\n  class A {\n    +run()\n  }")
        assert [c.name for c in d.classes] == ["A", "B"]
        assert [m.name for m in find(d, "A").methods] == ["run"]

    def test_annotation_inside_body(self):
        d = parse_classes("classDiagram\n  class Shape {\n    <<interface>>\n    +area() double\n  }")
        shape = find(d, "Shape")
        assert shape.annotation == "interface"
        assert len(shape.methods) == 1

    def test_annotation_outside_body(self):
        d = parse_classes("classDiagram\n  <<enumeration>> Color")
        assert find(d, "Color").annotation == "enumeration"

    @pytest.mark.parametrize("line", ["direction LR", "note for A \"text\"", "note \"floating\""])
    def test_skipped_lines(self, line):
        d = parse_classes(f"classDiagram\n  {line}\n  class A")
        assert [c.name for c in d.classes] == ["A"]


# ============================================================================
# Relationships
# ============================================================================


class TestRelationships:
    @pytest.mark.parametrize(
        "line, rel_type, from_, to",
        [
            ("Animal <|-- Duck", "inheritance", "Duck", "Animal"),
            ("Car *-- Engine", "composition", "Car", "Engine"),
            ("Car o-- Wheel", "aggregation", "Car", "Wheel"),
            ("Driver --> Car", "association", "Driver", "Car"),
            ("Car ..> Fuel", "dependency", "Car", "Fuel"),
            ("Circle ..|> Shape", "realization", "Circle", "Shape"),
        ],
    )
    def test_operators(self, line, rel_type, from_, to):
        d = parse_classes(f"classDiagram\n  {line}")
        rel = d.relationships[0]
        assert (rel.type, rel.from_, rel.to) == (rel_type, from_, to)

    def test_both_ends_are_created_left_first(self):
        d = parse_classes("classDiagram\n  Animal <|-- Duck")
        assert [c.name for c in d.classes] == ["Animal", "Duck"]

    def test_label(self):
        d = parse_classes("classDiagram\n  Driver --> Car : drives")
        assert d.relationships[0].label == "drives"

    def test_no_label(self):
        d = parse_classes("classDiagram\n  Driver --> Car")
        assert d.relationships[0].label is None

    def test_cardinality_is_ignored(self):
        d = parse_classes('classDiagram\n  Customer "1" --> "*" Ticket : buys')
        rel = d.relationships[0]
        assert (rel.from_, rel.to, rel.label) == ("Customer", "Ticket", "buys")

    def test_name_ending_in_o_is_not_aggregation(self):
        d = parse_classes("classDiagram\n  Zoo --> Animal")
        rel = d.relationships[0]
        assert (rel.type, rel.from_) == ("association", "Zoo")

    def test_operator_without_spaces(self):
        d = parse_classes("classDiagram\n  A*--B")
        assert (d.relationships[0].from_, d.relationships[0].to) == ("A", "B")

    def test_relationship_to_self(self):
        d = parse_classes("classDiagram\n  Node --> Node : next")
        assert [c.name for c in d.classes] == ["Node"]
        assert d.relationships[0].from_ == d.relationships[0].to == "Node"


# ============================================================================
# Member parsing
# ============================================================================


class TestParseMember:
    @pytest.mark.parametrize(
        "text, visibility",
        [("+x", "public"), ("-x", "private"), ("#x", "protected"), ("~x", "package"), ("x", "public")],
    )
    def test_visibility(self, text, visibility):
        assert parse_member(text).visibility == visibility

    def test_typed_attribute(self):
        assert parse_member("+int age") == ClassAttribute(name="age", type="int", visibility="public")

    def test_single_token_is_string_attribute(self):
        assert parse_member("-name") == ClassAttribute(name="name", type="String", visibility="private")

    def test_method_with_parameters_and_return_type(self):
        member = parse_member("+calc(int a, int b) int")
        assert member == ClassMethod(name="calc", return_type="int", parameters=["int a", "int b"], visibility="public")

    def test_colon_return_type(self):
        member = parse_member("+getName(): String")
        assert isinstance(member, ClassMethod)
        assert member.return_type == "String"

    def test_method_without_return_type(self):
        member = parse_member("+swim()")
        assert member.return_type is None
        assert member.parameters == []

    @pytest.mark.parametrize("text", ["", "   ", "+", "{", "}"])
    def test_empty_members(self, text):
        assert parse_member(text) is None


class TestMemberStrings:
    def test_attribute(self):
        assert attribute_to_string(ClassAttribute(name="age", type="int", visibility="public")) == "+int age"

    def test_method(self):
        method = ClassMethod(name="calc", return_type="int", parameters=["a", "b"], visibility="private")
        assert method_to_string(method) == "-calc(a, b) int"

    def test_method_without_return(self):
        method = ClassMethod(name="run", visibility="protected")
        assert method_to_string(method) == "#run()"
