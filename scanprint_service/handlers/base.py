"""
Base Handler
============

Abstract base class for printer transports.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any
from ..models import Printer
from ..labels.cpcl import render_test_label, serialize
from ..labels.layout import LABEL_HEIGHT


class BaseHandler(ABC):
    """Abstract base class for printer handlers."""

    def __init__(self, printer: Printer):
        """Initialize handler with printer configuration."""
        self.printer = printer

    @property
    def identifier(self) -> str:
        """Name recorded in print history for jobs sent through this handler."""
        return self.printer.name or self.printer.id

    def is_connected(self) -> bool:
        """True once ``connect`` succeeded and the printer is still active."""
        return self.printer.is_active and self.printer.status == 'connected'

    @abstractmethod
    def send(self, payload: bytes) -> Dict[str, Any]:
        """
        Send a complete job to the printer.

        Args:
            payload: Encoded job bytes

        Returns:
            Dict with success status and details. Anything but
            ``success: True`` means nothing was printed.
        """
        pass

    def print_test_label(self, quantity: int = 1) -> Dict[str, Any]:
        """Print the fixed diagnostic label."""
        job = serialize(render_test_label(LABEL_HEIGHT, quantity))
        return self.send(job.encode('utf-8'))

    @abstractmethod
    def get_status(self) -> Dict[str, Any]:
        """
        Get printer status.

        Returns:
            Dict with status information
        """
        pass

    @abstractmethod
    def test_connection(self) -> Dict[str, Any]:
        """
        Test connection to printer.

        Returns:
            Dict with connection test results
        """
        pass

    def connect(self) -> Dict[str, Any]:
        """Test the connection and mark the printer connected on success."""
        result = self.test_connection()
        if result['success']:
            self.printer.update_status('connected')
        else:
            self.printer.update_status('offline', result.get('error'))
        return result

    def disconnect(self):
        """Mark the printer as no longer available for printing."""
        self.printer.update_status('offline')
