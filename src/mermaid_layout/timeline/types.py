from __future__ import annotations

from dataclasses import dataclass, field

from ..types import Point

# ============================================================================
# Timeline types
# ============================================================================


@dataclass(slots=True)
class TimelineEvent:
    period: str
    event: str


@dataclass(slots=True)
class Timeline:
    title: str = ""
    events: list[TimelineEvent] = field(default_factory=list)

    def grouped(self) -> list[tuple[str, list[str]]]:
        """Events grouped by period, periods in first-seen order."""
        groups: dict[str, list[str]] = {}
        for e in self.events:
            groups.setdefault(e.period, []).append(e.event)
        return list(groups.items())


# ============================================================================
# Positioned timeline
# ============================================================================


@dataclass(slots=True)
class PositionedEvent:
    text: str
    # Top-left of the event text
    x: float
    y: float
    width: float
    height: float
    # Center of the bullet dot
    bullet: Point


@dataclass(slots=True)
class PositionedPeriod:
    period: str
    # Top-left of the period header
    x: float
    y: float
    width: float
    header_height: float
    # Full column extent, header included
    column_width: float
    column_height: float
    events: list[PositionedEvent] = field(default_factory=list)


@dataclass(slots=True)
class PositionedTimeline:
    width: float
    height: float
    title: str
    # Top-left of the title text, None without a title
    title_position: Point | None
    # Vertical position of the horizontal rule above the columns
    rule_y: float
    periods: list[PositionedPeriod] = field(default_factory=list)
