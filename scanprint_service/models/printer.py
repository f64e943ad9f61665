"""
Printer Model
=============

A label printer the scan station can connect to. At most one printer is
connected at a time; its ``status`` is then ``connected``.
"""

import uuid
from datetime import datetime
from dataclasses import dataclass, field, asdict, fields
from typing import Optional, Dict, Any

from ..config import PRINTER_TYPES

_DATETIME_FIELDS = ('created_at', 'updated_at', 'last_status_check', 'last_connected_at')


@dataclass
class Printer:
    """Registered printer and its connection state."""

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8].upper())
    name: str = ""
    printer_type: str = ""  # key of PRINTER_TYPES
    model: str = ""  # e.g., "ZQ320"

    connection_mode: str = "network"  # network, usb, bluetooth
    host: Optional[str] = None
    port: int = 9100

    status: str = "unknown"  # connected, online, offline, unknown
    last_status_check: Optional[datetime] = None
    last_connected_at: Optional[datetime] = None
    last_error: Optional[str] = None

    is_active: bool = True

    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def protocol(self) -> Optional[str]:
        """Printer language of this printer type (CPCL, ZPL, ESC/POS)."""
        return PRINTER_TYPES.get(self.printer_type, {}).get('protocol')

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}" if self.host else self.connection_mode

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        for key in _DATETIME_FIELDS:
            if data.get(key):
                data[key] = data[key].isoformat()
        data['protocol'] = self.protocol
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Printer':
        """Create from dictionary; derived and unknown keys are dropped."""
        known = {f.name for f in fields(cls)}
        data = {k: v for k, v in data.items() if k in known}
        for key in _DATETIME_FIELDS:
            if data.get(key) and isinstance(data[key], str):
                data[key] = datetime.fromisoformat(data[key])
        return cls(**data)

    def update_status(self, status: str, error: Optional[str] = None):
        """Record the result of a connection check."""
        now = datetime.now()
        self.status = status
        self.last_status_check = now
        self.last_error = error
        self.updated_at = now
        if status == 'connected':
            self.last_connected_at = now
