"""
Print Job Model
===============

Tracks one dual-serial label transmission. The CPCL text itself is not
kept; only its size is recorded.
"""

import uuid
from datetime import datetime
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any


@dataclass
class PrintJob:
    """Print job state."""

    # Identification
    id: str = field(default_factory=lambda: f"JOB-{str(uuid.uuid4())[:8].upper()}")
    printer: str = ""

    # Label content
    serial1: str = ""
    serial2: str = ""
    title: str = ""
    quantity: int = 1
    bytes_sent: int = 0

    # Status
    status: str = "pending"  # pending, printing, completed, failed
    error_message: Optional[str] = None

    # Timestamps
    created_at: datetime = field(default_factory=datetime.now)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        # Convert datetime to ISO format
        for key in ['created_at', 'started_at', 'completed_at']:
            if data.get(key):
                data[key] = data[key].isoformat()
        return data

    def start(self, payload_size: int):
        """Mark job as handed to the transport."""
        self.status = "printing"
        self.started_at = datetime.now()
        self.bytes_sent = payload_size

    def complete(self):
        """Mark job as completed."""
        self.status = "completed"
        self.completed_at = datetime.now()

    def fail(self, error: str):
        """Mark job as failed."""
        self.status = "failed"
        self.completed_at = datetime.now()
        self.error_message = error
