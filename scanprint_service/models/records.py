"""
Registry and History Records
============================

Prefix/title mappings, print history and audit entries.
"""

from datetime import datetime
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class PrefixTitleEntry:
    """Maps a serial prefix to the title printed on the label."""

    prefix: str
    title: str

    def matches(self, value: str) -> bool:
        prefix = self.prefix.strip()
        return bool(prefix) and value.startswith(prefix)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PrefixTitleEntry':
        return cls(prefix=data['prefix'], title=data['title'])


@dataclass
class PrintRecord:
    """One successfully printed label."""

    serial_number: str  # "<serial1>, <serial2>"
    label_type: str     # resolved title
    printer: str        # transport identifier
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data['timestamp'] = self.timestamp.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PrintRecord':
        """Create from dictionary."""
        data = dict(data)
        if isinstance(data.get('timestamp'), str):
            data['timestamp'] = datetime.fromisoformat(data['timestamp'])
        return cls(**data)

    @classmethod
    def for_pair(cls, serial1: str, serial2: str, title: str, printer: str) -> 'PrintRecord':
        return cls(serial_number=f'{serial1}, {serial2}', label_type=title, printer=printer)


@dataclass
class AuditEntry:
    """Operator-visible error log entry."""

    message: str
    tag: Optional[str] = None  # printer name, when the error concerns one
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['timestamp'] = self.timestamp.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AuditEntry':
        data = dict(data)
        if isinstance(data.get('timestamp'), str):
            data['timestamp'] = datetime.fromisoformat(data['timestamp'])
        return cls(**data)
