"""
Label Engine
============

Code 128 encoding, dual-serial layout, CPCL serialization and preview.
"""

from .code128 import encode, encode_symbols, estimate_width
from .layout import compute_layout, MIN_SAFE_TEXT_GAP, MIN_SAFE_BLOCK_SPACING
from .cpcl import render, render_test_label, serialize

__all__ = [
    'encode', 'encode_symbols', 'estimate_width',
    'compute_layout', 'MIN_SAFE_TEXT_GAP', 'MIN_SAFE_BLOCK_SPACING',
    'render', 'render_test_label', 'serialize',
]
