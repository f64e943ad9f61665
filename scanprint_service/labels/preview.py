"""
Label Preview
=============

Renders a monochrome PNG of the dual-serial label for the settings page.
Positions come from the Layout and bar widths from the Code 128 encoder,
so the preview matches the CPCL job. Printer fonts are approximated with
Pillow's default bitmap font.
"""

from io import BytesIO

from PIL import Image, ImageDraw, ImageFont

from ..models import Layout
from .code128 import encode

WHITE = 1
BLACK = 0
MAX_SCALE = 8


def _draw_barcode(draw: ImageDraw.ImageDraw, text: str, x: int, y: int,
                  module_width: int, height: int, scale: int) -> int:
    """Draw a Code 128 barcode; returns its width in dots."""
    current_x = x
    for index, modules in enumerate(encode(text)):
        bar_width = modules * module_width
        if index % 2 == 0:  # bars at even positions, spaces between
            draw.rectangle(
                [current_x * scale, y * scale,
                 (current_x + bar_width) * scale - 1, (y + height) * scale - 1],
                fill=BLACK,
            )
        current_x += bar_width
    return current_x - x


def render_preview(layout: Layout, serial1: str, serial2: str, title: str,
                   scale: int = 2) -> Image.Image:
    """
    Draw the label.

    Args:
        layout: Output of ``compute_layout`` for the same serials and title
        serial1: First serial
        serial2: Second serial
        title: Title text
        scale: Output pixels per printer dot, clamped to 1..MAX_SCALE

    Returns:
        1-bit PIL image of ``label_width x label_height`` dots times ``scale``
    """
    scale = min(max(1, int(scale)), MAX_SCALE)
    img = Image.new('1', (layout.label_width * scale, layout.label_height * scale), WHITE)
    draw = ImageDraw.Draw(img)
    font = ImageFont.load_default()

    draw.text((layout.title_x * scale, layout.title_y * scale), title, font=font, fill=BLACK)

    _draw_barcode(draw, serial1, layout.barcode1_x, layout.barcode1_y,
                  layout.module_width, layout.barcode_height, scale)
    draw.text((layout.text1_x * scale, layout.text1_y * scale), serial1, font=font, fill=BLACK)

    _draw_barcode(draw, serial2, layout.barcode2_x, layout.barcode2_y,
                  layout.module_width, layout.barcode_height, scale)
    draw.text((layout.text2_x * scale, layout.text2_y * scale), serial2, font=font, fill=BLACK)

    return img


def render_preview_png(layout: Layout, serial1: str, serial2: str, title: str,
                       scale: int = 2) -> bytes:
    """PNG bytes of ``render_preview``."""
    buffer = BytesIO()
    render_preview(layout, serial1, serial2, title, scale).save(buffer, format='PNG')
    return buffer.getvalue()
