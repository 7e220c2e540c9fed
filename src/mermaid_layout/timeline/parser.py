from __future__ import annotations

import logging
import re

from ..lines import SourceLine, strip_quotes
from .types import Timeline, TimelineEvent

logger = logging.getLogger(__name__)

# ============================================================================
# Timeline parser
#
#   timeline
#       title History of Social Media Platform
#       section 2000s                (grouping ignored)
#       2002 : LinkedIn
#       2004 : Facebook : Google     (several events, one period)
#            : Youtube               (continues the previous period)
# ============================================================================

_DECLARATION_RE = re.compile(r"^timeline\b", re.IGNORECASE)
_TITLE_RE = re.compile(r"^title\s+(.*)$", re.IGNORECASE)
_SECTION_RE = re.compile(r"^section\b", re.IGNORECASE)


def parse_timeline(lines: list[SourceLine]) -> Timeline:
    timeline = Timeline()
    period: str | None = None

    for line in lines:
        text = line.text
        if _DECLARATION_RE.match(text):
            continue

        m = _TITLE_RE.match(text)
        if m:
            timeline.title = strip_quotes(m.group(1))
            continue

        if _SECTION_RE.match(text):
            logger.debug("timeline: ignoring section on line %d", line.index)
            continue

        if ":" not in text:
            logger.debug("timeline: ignoring line %d: %r", line.index, text)
            continue

        head, *events = text.split(":")
        head = head.strip()
        if head:
            period = head
        if period is None:
            logger.debug("timeline: dropping orphaned event on line %d", line.index)
            continue

        for event in events:
            event = event.strip()
            if event:
                timeline.events.append(TimelineEvent(period=period, event=event))

    return timeline
