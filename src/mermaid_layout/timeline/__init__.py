from __future__ import annotations

from .types import Timeline, TimelineEvent, PositionedTimeline, PositionedPeriod, PositionedEvent
from .parser import parse_timeline
from .layout import layout_timeline

__all__ = [
    "Timeline",
    "TimelineEvent",
    "PositionedTimeline",
    "PositionedPeriod",
    "PositionedEvent",
    "parse_timeline",
    "layout_timeline",
]
