from __future__ import annotations

# ============================================================================
# Font metrics -- character width estimates used when no measurer is given.
# ============================================================================

LINE_HEIGHT_RATIO = 1.2


def estimate_text_width(text: str, font_size: float, font_weight: int) -> float:
    """Average character width in px at the given font size and weight (proportional font)."""
    if font_weight >= 600:
        width_ratio = 0.58
    elif font_weight >= 500:
        width_ratio = 0.55
    else:
        width_ratio = 0.52
    return len(text) * font_size * width_ratio


def estimate_mono_text_width(text: str, font_size: float) -> float:
    """Average character width in px for monospace fonts (uniform glyph width)."""
    return len(text) * font_size * 0.6


def estimate_text_size(text: str, font_size: float) -> tuple[float, float]:
    """Default text measurer: (width, height) of a single line of regular-weight text."""
    return (
        estimate_text_width(text, font_size, FONT_WEIGHTS["body"]),
        font_size * LINE_HEIGHT_RATIO,
    )


# Fixed font sizes (pt)
FONT_SIZES = {
    "title": 22,
    "headline": 17,
    "body": 17,
    "caption": 12,
    "node_label": 14,
    "edge_label": 12,
    "class_name": 14,
    "class_member": 12,
    "state_label": 14,
    "note": 12,
    "pie_label": 11,
}

# Font weights per element type
FONT_WEIGHTS = {
    "title": 600,
    "body": 400,
    "node_label": 400,
    "class_name": 600,
}

# ============================================================================
# Arrowheads
# ============================================================================

ARROW_HEAD = {
    # Filled triangle on flowchart edges
    "size": 15,
    # Half-angle of the flowchart triangle (radians)
    "spread": 1.0471975511965976,  # pi / 3
    # Open/closed heads on class and state connectors
    "connector_length": 10,
    "connector_spread": 0.5235987755982988,  # pi / 6
}
