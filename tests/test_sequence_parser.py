"""Tests for the sequence diagram parser.

Covers: participants, actors, message arrow types, inline and explicit
activations, notes, loops and nested blocks.
"""
from __future__ import annotations

import pytest

from mermaid_layout.lines import source_lines
from mermaid_layout.sequence.parser import parse_sequence_diagram


def parse(text: str):
    return parse_sequence_diagram(source_lines(text))


# ============================================================================
# Participants
# ============================================================================


class TestParticipants:
    def test_declaration_order(self):
        d = parse(
            "sequenceDiagram\n"
            "  participant Bob\n"
            "  participant Alice\n"
            "  Alice->>Bob: Hi"
        )
        assert d.participants == ["Bob", "Alice"]

    def test_actor_keyword(self):
        d = parse("sequenceDiagram\n  actor User\n  User->>System: Click")
        assert d.participants == ["User", "System"]

    def test_auto_created_from_messages(self):
        d = parse("sequenceDiagram\n  Alice->>Bob: Hello")
        assert d.participants == ["Alice", "Bob"]

    def test_declared_once_even_when_reused(self):
        d = parse(
            "sequenceDiagram\n"
            "  participant A\n"
            "  A->>B: one\n"
            "  B->>A: two"
        )
        assert d.participants == ["A", "B"]

    def test_alias_keeps_the_id(self):
        d = parse("sequenceDiagram\n  participant A as Alice\n  A->>B: Hi")
        assert d.participants[0] == "A"

    def test_quoted_name(self):
        d = parse('sequenceDiagram\n  participant "Web Server"')
        assert d.participants == ["Web Server"]


# ============================================================================
# Messages
# ============================================================================


class TestMessages:
    @pytest.mark.parametrize(
        "arrow, message_type",
        [
            ("->", "sync_request"),
            ("->>", "async_request"),
            ("-->", "sync_response"),
            ("-->>", "async_response"),
            ("-x", "lost"),
            ("--x", "lost"),
            ("-)", "async_request"),
            ("--)", "async_response"),
        ],
    )
    def test_arrow_types(self, arrow, message_type):
        d = parse(f"sequenceDiagram\n  A{arrow}B: text")
        assert len(d.messages) == 1
        msg = d.messages[0]
        assert (msg.from_, msg.to, msg.text) == ("A", "B", "text")
        assert msg.type == message_type

    def test_longer_arrow_is_preferred(self):
        d = parse("sequenceDiagram\n  A-->>B: reply")
        assert d.messages[0].type == "async_response"
        assert d.messages[0].to == "B"

    def test_text_may_contain_colons_and_arrows(self):
        d = parse("sequenceDiagram\n  A->>B: at 10:30 -> retry")
        assert d.messages[0].text == "at 10:30 -> retry"
        assert d.messages[0].type == "async_request"

    def test_message_without_text(self):
        d = parse("sequenceDiagram\n  A->>B")
        assert d.messages[0].text == ""

    def test_self_message(self):
        d = parse("sequenceDiagram\n  A->>A: think")
        assert d.participants == ["A"]
        assert d.messages[0].from_ == d.messages[0].to == "A"

    def test_order_is_preserved(self):
        d = parse(
            "sequenceDiagram\n"
            "  A->>B: one\n"
            "  B-->>A: two\n"
            "  A->>C: three"
        )
        assert [m.text for m in d.messages] == ["one", "two", "three"]

    @pytest.mark.parametrize("line", ["autonumber", "title Checkout flow", "something odd"])
    def test_skipped_lines(self, line):
        d = parse(f"sequenceDiagram\n  {line}\n  A->>B: hi")
        assert len(d.messages) == 1
        assert d.participants == ["A", "B"]


# ============================================================================
# Activations
# ============================================================================


class TestActivations:
    def test_explicit_activate_and_deactivate(self):
        d = parse(
            "sequenceDiagram\n"
            "  A->>B: call\n"
            "  activate B\n"
            "  B-->>A: done\n"
            "  deactivate B"
        )
        assert [(a.participant, a.is_activate, a.message_index) for a in d.activations] == [
            ("B", True, 1),
            ("B", False, 2),
        ]

    def test_inline_plus_activates_target(self):
        d = parse("sequenceDiagram\n  A->>+B: call")
        assert d.messages[0].to == "B"
        assert [(a.participant, a.is_activate, a.message_index) for a in d.activations] == [("B", True, 0)]

    def test_inline_minus_deactivates_source(self):
        d = parse("sequenceDiagram\n  A->>+B: call\n  B-->>-A: done")
        assert d.messages[1].to == "A"
        assert d.activations[1].participant == "B"
        assert d.activations[1].is_activate is False
        assert d.activations[1].message_index == 1


# ============================================================================
# Notes
# ============================================================================


class TestNotes:
    @pytest.mark.parametrize(
        "placement, position",
        [("left of", "left_of"), ("right of", "right_of"), ("over", "over")],
    )
    def test_positions(self, placement, position):
        d = parse(f"sequenceDiagram\n  A->>B: hi\n  Note {placement} A: remember")
        assert len(d.notes) == 1
        note = d.notes[0]
        assert note.position == position
        assert note.participants == ["A"]
        assert note.text == "remember"
        assert note.message_index == 1

    def test_over_two_participants(self):
        d = parse("sequenceDiagram\n  note over A,B: shared")
        assert d.notes[0].participants == ["A", "B"]
        assert d.participants == ["A", "B"]

    def test_malformed_note_is_skipped(self):
        d = parse("sequenceDiagram\n  Note somewhere: text\n  A->>B: hi")
        assert d.notes == []
        assert len(d.messages) == 1


# ============================================================================
# Loops and blocks
# ============================================================================


class TestLoops:
    def test_loop_captures_messages(self):
        d = parse(
            "sequenceDiagram\n"
            "  A->>B: before\n"
            "  loop Every minute\n"
            "    A->>B: ping\n"
            "    B-->>A: pong\n"
            "  end\n"
            "  A->>B: after"
        )
        assert len(d.loops) == 1
        loop = d.loops[0]
        assert loop.text == "Every minute"
        assert [m.text for m in loop.messages] == ["ping", "pong"]
        assert loop.first_message == 1
        assert loop.start_index == 2
        assert loop.end_index == 5

    def test_nested_loops(self):
        d = parse(
            "sequenceDiagram\n"
            "  loop outer\n"
            "    A->>B: one\n"
            "    loop inner\n"
            "      A->>B: two\n"
            "    end\n"
            "  end"
        )
        assert [loop.text for loop in d.loops] == ["inner", "outer"]
        assert [m.text for m in d.loops[0].messages] == ["two"]
        assert [m.text for m in d.loops[1].messages] == ["one", "two"]

    def test_alt_inside_loop_closes_correctly(self):
        d = parse(
            "sequenceDiagram\n"
            "  loop retry\n"
            "    alt ok\n"
            "      A->>B: x\n"
            "    else failed\n"
            "      A->>B: y\n"
            "    end\n"
            "  end"
        )
        assert len(d.loops) == 1
        assert [m.text for m in d.loops[0].messages] == ["x", "y"]

    @pytest.mark.parametrize("opener", ["opt maybe", "par both", "critical", "break stop", "rect rgb(0,0,0)"])
    def test_block_openers_are_not_loops(self, opener):
        d = parse(f"sequenceDiagram\n  {opener}\n    A->>B: x\n  end")
        assert d.loops == []
        assert len(d.messages) == 1

    def test_unterminated_loop_is_dropped(self):
        d = parse("sequenceDiagram\n  loop forever\n    A->>B: x")
        assert d.loops == []
        assert len(d.messages) == 1

    def test_stray_end_is_ignored(self):
        d = parse("sequenceDiagram\n  end\n  A->>B: x")
        assert d.loops == []
        assert len(d.messages) == 1
