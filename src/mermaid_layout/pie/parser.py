from __future__ import annotations

import logging
import math
import re

from ..lines import SourceLine, strip_quotes
from .types import PieChart

logger = logging.getLogger(__name__)

# ============================================================================
# Pie chart parser
#
#   pie showData title Pets adopted
#   title Pets adopted            (standalone form)
#   "Dogs" : 386
#   Cats : 85.5
# ============================================================================

_DECLARATION_RE = re.compile(r"^pie\b(\s+showdata\b)?(?:\s+title\s+(.*))?$", re.IGNORECASE)
_TITLE_RE = re.compile(r"^title\s+(?![\s:])(.*)$", re.IGNORECASE)
_DATA_RE = re.compile(r"""^("[^"]*"|'[^']*'|[^:]+?)\s*:\s*(.+)$""")


def parse_pie_chart(lines: list[SourceLine]) -> PieChart:
    chart = PieChart()
    for line in lines:
        text = line.text

        m = _DECLARATION_RE.match(text)
        if m:
            chart.show_data = chart.show_data or bool(m.group(1))
            if m.group(2):
                chart.title = strip_quotes(m.group(2))
            continue

        m = _TITLE_RE.match(text)
        if m:
            chart.title = strip_quotes(m.group(1))
            continue

        m = _DATA_RE.match(text)
        if m:
            label = strip_quotes(m.group(1))
            value = parse_value(m.group(2))
            if value is None:
                logger.debug("pie: dropping %r on line %d, bad value %r", label, line.index, m.group(2))
                continue
            chart.data[label] = value
            continue

        logger.debug("pie: ignoring line %d: %r", line.index, text)
    return chart


def parse_value(text: str) -> float | None:
    """Finite, non-negative float or None."""
    try:
        value = float(text.strip())
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value
