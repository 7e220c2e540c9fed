from __future__ import annotations

import logging
import math

from .types import LegendEntry, LegendMetrics, PieChart, PieSlice, PositionedPieChart
from ..styles import FONT_SIZES, estimate_text_size
from ..types import LayoutOptions, Point, Size

logger = logging.getLogger(__name__)

# ============================================================================
# Pie chart layout
#
# Slices are sorted by value (largest first) and partition the circle
# clockwise from 12 o'clock. The pie sits on the left, the legend to its
# right, the title above both.
# ============================================================================

PIE = {
    "padding": 20,
    # Space reserved above the pie for the title
    "title_height": 40,
    # Horizontal and vertical space taken out of the canvas before sizing
    "reserved_width": 40,
    "reserved_height": 80,
    "max_size": 200,
    "width_share": 0.45,
    "height_share": 0.85,
    # Gap between pie and legend
    "spacing": 20,
    "legend_min_width": 200,
    "legend_gap": 30,
    "legend_icon_gap": 10,
    # Slices above this percentage keep their label closer to the center
    "inner_label_threshold": 10,
    "inner_label_ratio": 0.7,
    "outer_label_ratio": 0.8,
}

# Light categorical fills with a darker text colour for each
FILL_PALETTE = [
    "#f2d9d4",
    "#d4e0f2",
    "#d9edd9",
    "#faedd4",
    "#ede0f2",
    "#f5e0e8",
    "#e0f2ed",
    "#f5f2d4",
    "#ede0d4",
    "#d9e0ed",
    "#f2e0e0",
    "#e6edf2",
]

TEXT_PALETTE = [
    "#73332e",
    "#264073",
    "#2e592e",
    "#8c6640",
    "#594073",
    "#804059",
    "#407366",
    "#807333",
    "#664026",
    "#334059",
    "#734040",
    "#4d5966",
]


def layout_pie_chart(
    chart: PieChart,
    size: Size,
    options: LayoutOptions | None = None,
) -> PositionedPieChart:
    measure = options.measure if options and options.measure is not None else estimate_text_size
    padding = PIE["padding"]

    entries = sorted_entries(chart.data)
    total = sum(v for _, v in entries)
    pie_size = pie_diameter(size)
    radius = pie_size / 2
    metrics = legend_metrics(len(entries), size, pie_size)

    top = padding + (PIE["title_height"] if chart.title else 0)
    row_h = metrics.icon_size + metrics.spacing
    legend_h = max(0, len(entries) * row_h - metrics.spacing)
    content_h = max(pie_size, legend_h)
    center = Point(x=padding + radius, y=top + content_h / 2)

    slices = []
    legend = []
    legend_x = center.x + radius + PIE["spacing"]
    legend_y = top + (content_h - legend_h) / 2
    legend_right = legend_x
    cumulative = 0.0
    for index, (label, value) in enumerate(entries):
        start = _angle(cumulative, total)
        cumulative += value
        end = _angle(cumulative, total)
        pct = percentage(value, total)
        ratio = PIE["inner_label_ratio"] if pct > PIE["inner_label_threshold"] else PIE["outer_label_ratio"]
        mid = math.radians((start + end) / 2)
        fill = FILL_PALETTE[index % len(FILL_PALETTE)]

        slices.append(PieSlice(
            label=label,
            value=value,
            percentage=pct,
            start_angle=start,
            end_angle=end,
            fill=fill,
            text_color=TEXT_PALETTE[index % len(TEXT_PALETTE)],
            label_position=Point(
                x=center.x + radius * ratio * math.cos(mid),
                y=center.y + radius * ratio * math.sin(mid),
            ),
        ))

        entry_y = legend_y + index * row_h
        legend.append(LegendEntry(label=label, value=value, percentage=pct, color=fill, x=legend_x, y=entry_y))
        text_w, _ = measure(label, metrics.font_size)
        detail_w, _ = measure(f"{value:.0f} ({pct:.1f}%)", metrics.font_size - 2)
        row_w = metrics.icon_size + PIE["legend_icon_gap"] + min(max(text_w, detail_w), metrics.max_width)
        legend_right = max(legend_right, legend_x + row_w)

    result = PositionedPieChart(
        width=max(size.width, legend_right + padding),
        height=max(size.height, top + content_h + padding),
        title=chart.title,
        show_data=chart.show_data,
        center=center,
        radius=radius,
        label_font_size=label_font_size(pie_size),
        slices=slices,
        legend=legend,
        legend_metrics=metrics,
    )
    logger.debug("pie layout: %d slices, total %.2f", len(slices), total)
    return result


def sorted_entries(data: dict[str, float]) -> list[tuple[str, float]]:
    """Largest value first; ties broken by label."""
    return sorted(data.items(), key=lambda item: (-item[1], item[0]))


def percentage(value: float, total: float) -> float:
    return value / total * 100 if total > 0 else 0.0


def _angle(cumulative: float, total: float) -> float:
    if total <= 0:
        return -90.0
    return cumulative / total * 360 - 90


def pie_diameter(size: Size) -> float:
    available_w = size.width - PIE["reserved_width"]
    available_h = size.height - PIE["reserved_height"]
    fit = min(available_h * PIE["height_share"], available_w * PIE["width_share"])
    return max(0.0, min(PIE["max_size"], fit))


def legend_metrics(count: int, size: Size, pie_size: float) -> LegendMetrics:
    """Legend rows get tighter as the number of entries grows."""
    if count <= 4:
        spacing, icon, font = 12, 18, 14
    elif count <= 8:
        spacing, icon, font = 10, 16, 13
    else:
        spacing, icon, font = 8, 14, 12
    max_width = max(size.width - PIE["reserved_width"] - pie_size - PIE["legend_gap"], PIE["legend_min_width"])
    return LegendMetrics(spacing=spacing, icon_size=icon, font_size=font, max_width=max_width)


def label_font_size(pie_size: float) -> float:
    if pie_size > 300:
        return 14
    if pie_size > 250:
        return 12
    return FONT_SIZES["pie_label"]
