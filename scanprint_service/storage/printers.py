"""
Printer Registry
================
"""

from typing import Dict, List, Optional

from .base import JsonFileStore
from ..logging_config import get_logger
from ..models import Printer

logger = get_logger(__name__)


class PrinterStore(JsonFileStore):
    """Registered printers by id."""

    def __init__(self, data_dir=None):
        super().__init__('printers', data_dir)
        self._printers: Dict[str, Printer] = {
            k: Printer.from_dict(v) for k, v in self._read({}).items()
        }
        # A connection does not survive a restart
        for printer in self._printers.values():
            if printer.status == 'connected':
                printer.status = 'unknown'

    def get(self, printer_id: str) -> Optional[Printer]:
        with self._lock:
            return self._printers.get(printer_id)

    def all(self) -> List[Printer]:
        with self._lock:
            return list(self._printers.values())

    def add(self, printer: Printer) -> Printer:
        with self._lock:
            self._printers[printer.id] = printer
            self.save()
        return printer

    def remove(self, printer_id: str) -> bool:
        with self._lock:
            if printer_id not in self._printers:
                return False
            del self._printers[printer_id]
            self.save()
            return True

    def save(self):
        """Persist the registry; status updates are not worth failing a request for."""
        with self._lock:
            try:
                self._write({k: v.to_dict() for k, v in self._printers.items()})
            except OSError as e:
                logger.warning(f"Failed to save printers: {e}")
