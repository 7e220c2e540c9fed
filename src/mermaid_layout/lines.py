from __future__ import annotations

from dataclasses import dataclass

# ============================================================================
# Line classifier helpers shared by every diagram parser
# ============================================================================


@dataclass(slots=True, frozen=True)
class SourceLine:
    # Zero-based line number in the raw text
    index: int
    # Line content with surrounding whitespace removed
    text: str


def is_comment(line: str) -> bool:
    return line.startswith("%%")


def source_lines(text: str) -> list[SourceLine]:
    """Split raw text into trimmed, non-blank, non-comment lines.

    Line numbers are kept so parsers can report positions (loop bounds).
    """
    result: list[SourceLine] = []
    for index, raw in enumerate(text.splitlines()):
        line = raw.strip()
        if not line or is_comment(line):
            continue
        result.append(SourceLine(index=index, text=line))
    return result


def first_significant_line(text: str) -> str:
    for raw in text.strip().splitlines():
        line = raw.strip()
        if line:
            return line
    return ""


def strip_quotes(text: str) -> str:
    """Remove one pair of matching surrounding quotes."""
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return text
