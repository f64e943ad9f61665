"""
Label Layout Model
==================

Computed coordinates for a dual-serial label. Produced only by
``labels.layout.compute_layout``; consumed by the CPCL serializer and the
preview renderer.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any


@dataclass(frozen=True)
class Layout:
    """Element coordinates in printer dots."""

    label_width: int
    label_height: int

    title_x: int
    title_y: int

    barcode1_x: int
    barcode1_y: int
    text1_x: int
    text1_y: int

    barcode2_x: int
    barcode2_y: int
    text2_x: int
    text2_y: int

    barcode_height: int
    module_width: int
    text_size: int

    # Clamped values actually used
    effective_text_gap: int
    effective_block_spacing: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)
