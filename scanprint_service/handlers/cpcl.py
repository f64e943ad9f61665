"""
CPCL Handler
============

Handler for CPCL printers (Zebra mobile printers and compatibles).

CPCL (Comtec Printer Control Language) is a line-oriented text protocol:
each job starts with a "!" header line and ends with PRINT. Jobs are sent
as raw bytes over TCP, port 9100 by default.

Key Commands:
- ! 0 200 200 h q   - Job header (label height, quantity)
- PAGE-WIDTH w      - Label width in dots
- TEXT f s x y d    - Print text
- BARCODE 128 ...   - Print Code 128 barcode
- PRINT             - Print and end job
"""

import socket
from typing import Dict, Any

from .base import BaseHandler
from ..models import Printer
from ..config import CPCL_PORT, DEFAULT_TIMEOUT
from ..logging_config import get_logger

logger = get_logger(__name__)


class CPCLHandler(BaseHandler):
    """Handler for CPCL label printers."""

    def __init__(self, printer: Printer):
        super().__init__(printer)

    def _get_connection(self) -> tuple:
        """Get host and port for connection."""
        host = self.printer.host
        port = self.printer.port or CPCL_PORT
        return host, port

    def send(self, payload: bytes, timeout: int = DEFAULT_TIMEOUT) -> Dict[str, Any]:
        """
        Send a CPCL job to the printer.

        Args:
            payload: Encoded CPCL job
            timeout: Connection timeout

        Returns:
            Dict with success status
        """
        host, port = self._get_connection()

        if not host:
            return {'success': False, 'error': 'Printer host not configured'}

        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            sock.settimeout(timeout)
            try:
                sock.connect((host, port))
                sock.sendall(payload)
            finally:
                sock.close()

            logger.debug(f"Sent {len(payload)} bytes to {host}:{port}")
            return {
                'success': True,
                'host': host,
                'port': port,
                'bytes_sent': len(payload),
            }

        except socket.timeout:
            return {'success': False, 'error': f'Connection timeout to {host}:{port}'}
        except ConnectionRefusedError:
            return {'success': False, 'error': f'Connection refused by {host}:{port}'}
        except OSError as e:
            return {'success': False, 'error': str(e)}

    def get_status(self) -> Dict[str, Any]:
        """Get printer status (reachability; CPCL has no portable status query)."""
        result = self.test_connection()
        if not result['success']:
            result['status'] = 'offline'
            return result

        result['status'] = 'connected' if self.is_connected() else 'online'
        return result

    def test_connection(self) -> Dict[str, Any]:
        """Test connection to printer."""
        host, port = self._get_connection()

        if not host:
            return {'success': False, 'error': 'Printer host not configured'}

        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            sock.settimeout(5)
            try:
                sock.connect((host, port))
            finally:
                sock.close()

            return {
                'success': True,
                'host': host,
                'port': port,
                'message': 'TCP connection successful'
            }

        except socket.timeout:
            return {'success': False, 'error': f'Connection timeout to {host}:{port}'}
        except ConnectionRefusedError:
            return {'success': False, 'error': f'Connection refused by {host}:{port}'}
        except OSError as e:
            return {'success': False, 'error': str(e)}
