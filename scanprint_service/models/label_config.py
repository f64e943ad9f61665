"""
Label Configuration Model
=========================

Named label geometry record. All positions and sizes are in printer dots.
"""

from dataclasses import dataclass, asdict, fields
from typing import Dict, Any


@dataclass(frozen=True)
class LabelConfiguration:
    """Label geometry as saved on the settings page."""

    # Label size
    width: int = 384
    height: int = 240

    # Barcode block
    barcode_height: int = 60
    barcode_width_scale: int = 1  # module width in dots
    barcode_position_x: int = 30
    barcode_position_y: int = 25

    # Serial text under each barcode
    text_position_x: int = 30
    text_position_y: int = 93
    text_size: int = 8  # dots per character

    # Distance between the two barcodes' top edges
    block_spacing: int = 95

    center_contents: bool = True

    # Descriptive fields (not used for geometry)
    font: str = '4'
    margin: int = 0
    barcode_type: str = '128'
    custom_text: str = ''

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LabelConfiguration':
        """Create from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
