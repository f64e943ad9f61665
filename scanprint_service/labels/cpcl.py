"""
CPCL Serializer
===============

Builds CPCL (Comtec Printer Control Language) jobs for the dual-serial
label.

Job format:
    ! 0 200 200 <height> <qty>   - job header: offset, h/v resolution, label height, quantity
    PAGE-WIDTH <width>           - label width in dots
    TEXT f s x y data            - text in font f, size multiplier s
    BARCODE 128 n w h x y data   - Code 128, narrow/wide bar n/w, height h
    PRINT                        - print and end the job

Lines are CR+LF terminated. All coordinates are copied from the Layout;
nothing here computes geometry.
"""

from typing import List

from ..models import Layout

LINE_TERMINATOR = '\r\n'

RESOLUTION = 200

TITLE_FONT = 4
TITLE_SIZE = 1
TEXT_FONT = 4
TEXT_SIZE = 0


def render(layout: Layout, serial1: str, serial2: str, title: str,
           label_width: int, label_height: int, quantity: int = 1) -> List[str]:
    """
    Render the dual-serial label as CPCL command lines.

    Args:
        layout: Output of ``compute_layout`` for the same serials and title
        serial1: First serial (upper barcode and text)
        serial2: Second serial (lower barcode and text)
        title: Title text
        label_width: PAGE-WIDTH in dots
        label_height: Label height in dots
        quantity: Number of labels

    Returns:
        Command lines, without terminators
    """
    module = layout.module_width
    return [
        f'! 0 {RESOLUTION} {RESOLUTION} {label_height} {quantity}',
        f'PAGE-WIDTH {label_width}',
        f'TEXT {TITLE_FONT} {TITLE_SIZE} {layout.title_x} {layout.title_y} {title}',
        f'BARCODE 128 {module} {module} {layout.barcode_height} {layout.barcode1_x} {layout.barcode1_y} {serial1}',
        f'TEXT {TEXT_FONT} {TEXT_SIZE} {layout.text1_x} {layout.text1_y} {serial1}',
        f'BARCODE 128 {module} {module} {layout.barcode_height} {layout.barcode2_x} {layout.barcode2_y} {serial2}',
        f'TEXT {TEXT_FONT} {TEXT_SIZE} {layout.text2_x} {layout.text2_y} {serial2}',
        'PRINT',
    ]


def render_test_label(label_height: int, quantity: int = 1) -> List[str]:
    """Fixed diagnostic label used to check a printer connection."""
    return [
        f'! 0 {RESOLUTION} {RESOLUTION} {label_height} {quantity}',
        f'TEXT {TEXT_FONT} {TEXT_SIZE} 50 50 Test Print',
        f'TEXT {TEXT_FONT} {TEXT_SIZE} 50 100 CPCL Protocol',
        f'TEXT {TEXT_FONT} {TEXT_SIZE} 50 150 Connection OK',
        'BARCODE 128 1 1 50 50 180 TEST123',
        'PRINT',
    ]


def serialize(lines: List[str]) -> str:
    """Join command lines into the job text sent to the printer."""
    return LINE_TERMINATOR.join(lines) + LINE_TERMINATOR
