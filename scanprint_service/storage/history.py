"""
Counters, Print History and Audit Log
=====================================
"""

import csv
from io import StringIO
from typing import Dict, List, Optional

from .base import JsonFileStore
from ..config import HISTORY_LIMIT
from ..models import PrintRecord, AuditEntry


CSV_HEADERS = ['Date', 'Time', 'Serial Number', 'Label Type', 'Printer']


class CounterStore(JsonFileStore):
    """Printed-label counters, one per serial prefix."""

    def __init__(self, data_dir=None):
        super().__init__('counters', data_dir)
        self._counts: Dict[str, int] = {k: int(v) for k, v in self._read({}).items()}

    def get(self, prefix: str) -> int:
        with self._lock:
            return self._counts.get(prefix, 0)

    def all(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def increment(self, prefix: str) -> int:
        with self._lock:
            count = self._counts.get(prefix, 0) + 1
            self._write({**self._counts, prefix: count})
            self._counts[prefix] = count
            return count

    def reset_all(self):
        with self._lock:
            self._write({})
            self._counts = {}


class PrintHistory(JsonFileStore):
    """Printed labels, oldest first."""

    def __init__(self, data_dir=None, limit: int = HISTORY_LIMIT):
        super().__init__('print_history', data_dir)
        self.limit = limit
        self._records: List[PrintRecord] = [PrintRecord.from_dict(d) for d in self._read([])]

    def append(self, record: PrintRecord):
        with self._lock:
            records = (self._records + [record])[-self.limit:]
            self._write([r.to_dict() for r in records])
            self._records = records

    def records(self, limit: Optional[int] = None) -> List[PrintRecord]:
        """Most recent first."""
        with self._lock:
            records = list(reversed(self._records))
        return records[:limit] if limit is not None else records

    def export_csv(self) -> str:
        """Print history as CSV, most recent first."""
        buffer = StringIO()
        writer = csv.writer(buffer, lineterminator='\n')
        writer.writerow(CSV_HEADERS)
        for record in self.records():
            writer.writerow([
                record.timestamp.strftime('%Y-%m-%d'),
                record.timestamp.strftime('%H:%M:%S'),
                record.serial_number,
                record.label_type,
                record.printer,
            ])
        return buffer.getvalue()

    def clear(self):
        with self._lock:
            self._write([])
            self._records = []


class AuditLog(JsonFileStore):
    """Operator error log."""

    def __init__(self, data_dir=None, limit: int = HISTORY_LIMIT):
        super().__init__('error_log', data_dir)
        self.limit = limit
        self._entries: List[AuditEntry] = [AuditEntry.from_dict(d) for d in self._read([])]

    def append(self, message: str, tag: Optional[str] = None) -> AuditEntry:
        entry = AuditEntry(message=message, tag=tag)
        with self._lock:
            entries = (self._entries + [entry])[-self.limit:]
            self._write([e.to_dict() for e in entries])
            self._entries = entries
        return entry

    def entries(self) -> List[AuditEntry]:
        """Most recent first."""
        with self._lock:
            return list(reversed(self._entries))

    def clear(self):
        with self._lock:
            self._write([])
            self._entries = []
