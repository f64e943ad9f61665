"""
Label Layout Engine
===================

Computes every element position of a dual-serial label, for both the CPCL
job and the preview image. Anything that draws a label must take its
coordinates from ``compute_layout``; reimplementing the geometry elsewhere
lets the preview drift from the printed label.

Label layout (48 x 30 mm at 203 dpi = 384 x 240 dots):

    +--------------------------------+
    |            TITLE               |   title_y = 5
    |   ||| |||| || ||| | ||||       |   barcode1_y = 25
    |          55V0001               |   text1_y = barcode1_y + height + gap
    |   ||| | ||| || |||| | ||       |   barcode2_y = barcode1_y + spacing
    |          55V0002               |   text2_y = barcode2_y + height + gap
    +--------------------------------+

The gap between a barcode and its text, and the spacing between the two
barcodes, are clamped to MIN_SAFE_TEXT_GAP / MIN_SAFE_BLOCK_SPACING
whatever the configuration asks for.
"""

from typing import Any, Optional

from ..models import LabelConfiguration, Layout
from .code128 import estimate_width

# Printer resolution
CPCL_DPI = 203
DOTS_PER_MM = CPCL_DPI / 25.4

# Physical label: 48 x 30 mm
LABEL_WIDTH = 384
LABEL_HEIGHT = 240

# Title
TITLE_Y = 5
TITLE_UNIT_WIDTH = 16  # dots per character
TITLE_MARGIN = 10

# Margins
LEFT_MARGIN = 30
TOP_MARGIN = 25

# Barcode
BARCODE_HEIGHT = 60
MODULE_WIDTH = 1

# Spacing
TEXT_GAP = 8
BLOCK_SPACING = 95

# Serial text
TEXT_UNIT_WIDTH = 8  # dots per character

# Guardrails
MIN_SAFE_TEXT_GAP = 6
MIN_SAFE_BLOCK_SPACING = 70


def _number(value: Any) -> int:
    """Integer value of a config field; unusable values count as 0."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _positive(value: Any, default: int) -> int:
    number = _number(value)
    return number if number > 0 else default


def _anchor(value: Any) -> int:
    number = _number(value)
    return number if number >= 0 else LEFT_MARGIN


def center_barcode_x(serial: str, module_width: int, label_width: int = LABEL_WIDTH) -> int:
    """X of a barcode centered on the label, never left of the margin."""
    barcode_width = estimate_width(serial, module_width)
    return max(LEFT_MARGIN, (label_width - barcode_width) // 2)


def center_text_x(text: str, text_size: int = TEXT_UNIT_WIDTH, label_width: int = LABEL_WIDTH) -> int:
    """X of serial text centered on the label, never left of the margin."""
    text_width = len(text) * text_size
    return max(LEFT_MARGIN, (label_width - text_width) // 2)


def center_title_x(title: str, label_width: int = LABEL_WIDTH) -> int:
    """X of the centered title; the title may come closer to the edge."""
    title_width = len(title) * TITLE_UNIT_WIDTH
    return max(TITLE_MARGIN, (label_width - title_width) // 2)


def compute_layout(serial1: str, serial2: str, title: str,
                   config: Optional[LabelConfiguration] = None) -> Layout:
    """
    Compute the dual-serial label layout.

    Args:
        serial1: First serial (upper block)
        serial2: Second serial (lower block)
        title: Title printed above the first barcode
        config: Saved label configuration, or None for built-in defaults

    Returns:
        Layout with every coordinate in dots

    Missing, zero or negative config values fall back to the defaults;
    this function never raises for a bad configuration.
    """
    if config is not None:
        label_width = _positive(config.width, LABEL_WIDTH)
        label_height = _positive(config.height, LABEL_HEIGHT)
        barcode_height = _positive(config.barcode_height, BARCODE_HEIGHT)
        module_width = _positive(config.barcode_width_scale, MODULE_WIDTH)
        text_size = _positive(config.text_size, TEXT_UNIT_WIDTH)
        center_contents = bool(config.center_contents)

        # Text gap is stored implicitly as text Y relative to the barcode bottom
        requested_text_gap = (
            _number(config.text_position_y) - _number(config.barcode_position_y) - barcode_height
        )
        if requested_text_gap <= 0:
            requested_text_gap = TEXT_GAP

        requested_block_spacing = _number(config.block_spacing)
    else:
        label_width = LABEL_WIDTH
        label_height = LABEL_HEIGHT
        barcode_height = BARCODE_HEIGHT
        module_width = MODULE_WIDTH
        text_size = TEXT_UNIT_WIDTH
        center_contents = True
        requested_text_gap = TEXT_GAP
        requested_block_spacing = BLOCK_SPACING

    effective_text_gap = max(MIN_SAFE_TEXT_GAP, requested_text_gap)
    effective_block_spacing = max(MIN_SAFE_BLOCK_SPACING, requested_block_spacing)

    if center_contents:
        barcode1_x = center_barcode_x(serial1, module_width, label_width)
        barcode2_x = center_barcode_x(serial2, module_width, label_width)
        text1_x = center_text_x(serial1, text_size, label_width)
        text2_x = center_text_x(serial2, text_size, label_width)
    else:
        # Both blocks share the configured anchors, whatever the serial lengths
        barcode1_x = barcode2_x = _anchor(config.barcode_position_x)
        text1_x = text2_x = _anchor(config.text_position_x)

    barcode1_y = TOP_MARGIN
    text1_y = barcode1_y + barcode_height + effective_text_gap
    barcode2_y = barcode1_y + effective_block_spacing
    text2_y = barcode2_y + barcode_height + effective_text_gap

    return Layout(
        label_width=label_width,
        label_height=label_height,
        title_x=center_title_x(title, label_width),
        title_y=TITLE_Y,
        barcode1_x=barcode1_x,
        barcode1_y=barcode1_y,
        text1_x=text1_x,
        text1_y=text1_y,
        barcode2_x=barcode2_x,
        barcode2_y=barcode2_y,
        text2_x=text2_x,
        text2_y=text2_y,
        barcode_height=barcode_height,
        module_width=module_width,
        text_size=text_size,
        effective_text_gap=effective_text_gap,
        effective_block_spacing=effective_block_spacing,
    )


def dots_to_mm(dots: int) -> float:
    """Convert dots to mm, rounded to 0.1 mm for display."""
    return round(dots / DOTS_PER_MM * 10) / 10


def mm_to_dots(mm: float) -> int:
    """Convert mm to whole dots."""
    return round(mm * DOTS_PER_MM)
