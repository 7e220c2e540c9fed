from __future__ import annotations

from .types import PieChart, PieSlice, LegendEntry, LegendMetrics, PositionedPieChart
from .parser import parse_pie_chart
from .layout import layout_pie_chart, percentage

__all__ = [
    "PieChart",
    "PieSlice",
    "LegendEntry",
    "LegendMetrics",
    "PositionedPieChart",
    "parse_pie_chart",
    "layout_pie_chart",
    "percentage",
]
