from __future__ import annotations

import logging

from .types import PositionedEvent, PositionedPeriod, PositionedTimeline, Timeline
from ..styles import FONT_SIZES, estimate_text_size
from ..types import LayoutOptions, Point, Size

logger = logging.getLogger(__name__)

# ============================================================================
# Timeline layout
#
# Periods become columns laid out left to right in first-seen order. Each
# column is a header box with its events stacked underneath, every event
# preceded by a bullet dot. A horizontal rule separates title and columns.
# ============================================================================

TIMELINE = {
    "padding_x": 24,
    "padding_y": 16,
    # Extra space above the title
    "top_inset": 4,
    "title_gap": 12,
    "column_gap": 42,
    # Header box padding around the period text
    "header_pad_x": 12,
    "header_pad_y": 10,
    "event_spacing": 8,
    "bullet_size": 8,
    "bullet_gap": 8,
    # Event block inset from the column's left edge
    "event_inset": 10,
    "min_event_width": 100,
}


def layout_timeline(
    timeline: Timeline,
    size: Size,
    options: LayoutOptions | None = None,
) -> PositionedTimeline:
    measure = options.measure if options and options.measure is not None else estimate_text_size

    y = TIMELINE["padding_y"] + TIMELINE["top_inset"]
    title_position = None
    if timeline.title:
        title_position = Point(x=TIMELINE["padding_x"], y=y)
        _, title_h = measure(timeline.title, FONT_SIZES["title"])
        y += title_h + TIMELINE["title_gap"]
    rule_y = y

    indent = TIMELINE["event_inset"] + TIMELINE["bullet_size"] + TIMELINE["bullet_gap"]
    periods = []
    x = TIMELINE["padding_x"]
    for period, events in timeline.grouped():
        text_w, text_h = measure(period, FONT_SIZES["headline"])
        header_w = text_w + TIMELINE["header_pad_x"] * 2
        header_h = text_h + TIMELINE["header_pad_y"] * 2

        positioned = []
        event_y = y + header_h + TIMELINE["event_spacing"]
        widest = 0.0
        for text in events:
            w, h = measure(text, FONT_SIZES["body"])
            widest = max(widest, w)
            positioned.append(PositionedEvent(
                text=text,
                x=x + indent,
                y=event_y,
                width=w,
                height=h,
                bullet=Point(
                    x=x + TIMELINE["event_inset"] + TIMELINE["bullet_size"] / 2,
                    y=event_y + h / 2,
                ),
            ))
            event_y += h + TIMELINE["event_spacing"]

        column_w = max(header_w, (widest if events else TIMELINE["min_event_width"]) + indent)
        periods.append(PositionedPeriod(
            period=period,
            x=x,
            y=y,
            width=header_w,
            header_height=header_h,
            column_width=column_w,
            column_height=event_y - TIMELINE["event_spacing"] - y,
            events=positioned,
        ))
        x += column_w + TIMELINE["column_gap"]

    tallest = max((p.column_height for p in periods), default=0)
    content_w = x if periods else TIMELINE["padding_x"] * 2
    content_h = y + tallest + TIMELINE["padding_y"]
    if timeline.title:
        title_w, _ = measure(timeline.title, FONT_SIZES["title"])
        content_w = max(content_w, title_w + TIMELINE["padding_x"] * 2)

    result = PositionedTimeline(
        width=max(size.width, content_w),
        height=max(size.height, content_h),
        title=timeline.title,
        title_position=title_position,
        rule_y=rule_y,
        periods=periods,
    )
    logger.debug("timeline layout: %d periods, %.0fx%.0f", len(periods), result.width, result.height)
    return result
