from __future__ import annotations

from dataclasses import dataclass, field

from ..types import Point

# ============================================================================
# Pie chart types
# ============================================================================


@dataclass(slots=True)
class PieChart:
    title: str = ""
    # label -> value, in first-seen order; a repeated label keeps the last value
    data: dict[str, float] = field(default_factory=dict)
    # `pie showData` was declared
    show_data: bool = False


@dataclass(slots=True)
class PieSlice:
    label: str
    value: float
    percentage: float
    # Degrees, clockwise from the positive x axis; the first slice starts at -90
    start_angle: float
    end_angle: float
    fill: str
    text_color: str
    # Where the percentage label goes
    label_position: Point


@dataclass(slots=True)
class LegendEntry:
    label: str
    value: float
    percentage: float
    color: str
    # Top-left of the legend row
    x: float
    y: float


@dataclass(slots=True)
class LegendMetrics:
    spacing: float
    icon_size: float
    font_size: float
    max_width: float


@dataclass(slots=True)
class PositionedPieChart:
    width: float
    height: float
    title: str
    show_data: bool
    center: Point
    radius: float
    label_font_size: float
    slices: list[PieSlice] = field(default_factory=list)
    legend: list[LegendEntry] = field(default_factory=list)
    legend_metrics: LegendMetrics | None = None
