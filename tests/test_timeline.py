"""Tests for timeline parsing and layout."""
from __future__ import annotations

import pytest

from mermaid_layout import LayoutOptions, Size, layout, parse
from mermaid_layout.examples import TIMELINE as TIMELINE_EXAMPLE
from mermaid_layout.lines import source_lines
from mermaid_layout.timeline.layout import TIMELINE, layout_timeline
from mermaid_layout.timeline.parser import parse_timeline
from mermaid_layout.timeline.types import Timeline, TimelineEvent

SIZE = Size(800, 600)


def parse_events(text: str) -> Timeline:
    return parse_timeline(source_lines(text))


def positioned(text: str, size: Size = SIZE, options: LayoutOptions | None = None):
    return layout_timeline(parse_events(text), size, options)


# ============================================================================
# Parser
# ============================================================================


class TestParseTimeline:
    def test_example(self):
        timeline = parse_events(TIMELINE_EXAMPLE)
        assert timeline.title == "History of Social Media Platform"
        assert len(timeline.events) == 10
        assert len(timeline.grouped()) == 9

    def test_continuation_line_joins_previous_period(self):
        timeline = parse_events(TIMELINE_EXAMPLE)
        assert ("2004", ["Facebook", "Google"]) in timeline.grouped()

    def test_several_events_on_one_line(self):
        timeline = parse_events("timeline\n  2004 : Facebook : Google")
        assert timeline.events == [
            TimelineEvent(period="2004", event="Facebook"),
            TimelineEvent(period="2004", event="Google"),
        ]

    def test_orphaned_event_is_dropped(self):
        timeline = parse_events("timeline\n  : floating\n  2001 : Wikipedia")
        assert [e.event for e in timeline.events] == ["Wikipedia"]

    def test_empty_segments_are_skipped(self):
        timeline = parse_events("timeline\n  2001 : : Wikipedia :")
        assert [e.event for e in timeline.events] == ["Wikipedia"]

    def test_period_without_events(self):
        timeline = parse_events("timeline\n  2001 :\n  : Wikipedia")
        assert timeline.events == [TimelineEvent(period="2001", event="Wikipedia")]

    def test_sections_are_ignored(self):
        timeline = parse_events(
            "timeline\n"
            "  section Early days\n"
            "  2001 : Wikipedia\n"
            "  section Later\n"
            "  2010 : Instagram"
        )
        assert [e.period for e in timeline.events] == ["2001", "2010"]

    def test_lines_without_colon_are_ignored(self):
        timeline = parse_events("timeline\n  just words\n  2001 : Wikipedia")
        assert len(timeline.events) == 1

    def test_grouped_keeps_first_seen_order(self):
        timeline = Timeline(events=[
            TimelineEvent("b", "1"),
            TimelineEvent("a", "2"),
            TimelineEvent("b", "3"),
        ])
        assert timeline.grouped() == [("b", ["1", "3"]), ("a", ["2"])]

    def test_diagram_payload(self):
        d = parse(TIMELINE_EXAMPLE)
        assert d.kind == "timeline"
        assert isinstance(d.payload, Timeline)


# ============================================================================
# Layout
# ============================================================================


class TestTimelineLayout:
    def test_columns_left_to_right(self):
        result = positioned(TIMELINE_EXAMPLE)
        assert [p.period for p in result.periods][:3] == ["2002", "2004", "2005"]
        xs = [p.x for p in result.periods]
        assert xs == sorted(xs)
        assert xs[0] == TIMELINE["padding_x"]

    def test_columns_do_not_overlap(self):
        result = positioned(TIMELINE_EXAMPLE)
        for left, right in zip(result.periods, result.periods[1:]):
            assert right.x == pytest.approx(left.x + left.column_width + TIMELINE["column_gap"])

    def test_title_above_rule(self):
        result = positioned(TIMELINE_EXAMPLE)
        assert result.title_position is not None
        assert result.title_position.y < result.rule_y
        assert all(p.y == result.rule_y for p in result.periods)

    def test_no_title(self):
        result = positioned("timeline\n  2001 : Wikipedia")
        assert result.title_position is None
        assert result.rule_y == TIMELINE["padding_y"] + TIMELINE["top_inset"]

    def test_events_stack_under_header(self):
        result = positioned(TIMELINE_EXAMPLE)
        column = next(p for p in result.periods if p.period == "2004")
        first, second = column.events
        assert first.y == pytest.approx(column.y + column.header_height + TIMELINE["event_spacing"])
        assert second.y == pytest.approx(first.y + first.height + TIMELINE["event_spacing"])

    def test_bullet_precedes_event(self):
        result = positioned("timeline\n  2001 : Wikipedia")
        event = result.periods[0].events[0]
        assert event.bullet.x < event.x
        assert event.bullet.y == pytest.approx(event.y + event.height / 2)

    def test_column_fits_widest_event(self):
        result = positioned("timeline\n  1 : a very long event description indeed")
        column = result.periods[0]
        event = column.events[0]
        assert event.x + event.width == pytest.approx(column.x + column.column_width)

    def test_column_height_covers_events(self):
        result = positioned(TIMELINE_EXAMPLE)
        for column in result.periods:
            last = column.events[-1]
            assert column.y + column.column_height == pytest.approx(last.y + last.height)

    def test_canvas_grows_to_content(self):
        result = positioned(TIMELINE_EXAMPLE, Size(100, 50))
        last = result.periods[-1]
        assert result.width >= last.x + last.column_width
        assert result.height >= max(p.y + p.column_height for p in result.periods)

    def test_empty_timeline(self):
        result = positioned("timeline")
        assert result.periods == []
        assert (result.width, result.height) == (800, 600)

    def test_custom_measure(self):
        options = LayoutOptions(measure=lambda text, size: (len(text) * 10.0, 20.0))
        result = positioned("timeline\n  2001 : Wiki", options=options)
        column = result.periods[0]
        assert column.width == 40 + TIMELINE["header_pad_x"] * 2
        assert column.header_height == 20 + TIMELINE["header_pad_y"] * 2


class TestPositions:
    def test_keyed_by_period_header_center(self):
        result = layout(parse(TIMELINE_EXAMPLE), SIZE)
        assert len(result.positions) == 9
        column = result.layout.periods[0]
        center = result.positions[column.period]
        assert center.x == pytest.approx(column.x + column.width / 2)
        assert center.y == pytest.approx(column.y + column.header_height / 2)
