"""
ScanPrint Service Client
========================

Python SDK for interacting with ScanPrint Service.

Usage:
    from scanprint_service.client import ScanPrintClient

    client = ScanPrintClient('http://localhost:5100')

    # Configure the station
    client.set_prefixes(['55V', '72V'])
    client.connect_printer('PRINTER-ID')

    # Scan a pair (prints automatically)
    client.scan('55V10M29F04381')
    result = client.scan('55V10M29F04362')

    # Label preview
    with open('label.png', 'wb') as f:
        f.write(client.preview('55V10M29F04381', '55V10M29F04362'))
"""

import requests
from typing import Dict, Any, Optional, List


class ScanPrintClient:
    """Client for ScanPrint Service."""

    def __init__(self, base_url: str = 'http://localhost:5100'):
        """
        Initialize client.

        Args:
            base_url: Base URL of the scan print service
        """
        self.base_url = base_url.rstrip('/')

    def _headers(self) -> Dict[str, str]:
        """Get request headers."""
        return {'Content-Type': 'application/json'}

    def _request(self, method: str, endpoint: str, data: Dict = None) -> Dict[str, Any]:
        """Make API request."""
        url = f'{self.base_url}{endpoint}'

        try:
            if method == 'GET':
                response = requests.get(url, headers=self._headers(), timeout=30)
            elif method == 'POST':
                response = requests.post(url, json=data, headers=self._headers(), timeout=60)
            elif method == 'PUT':
                response = requests.put(url, json=data, headers=self._headers(), timeout=30)
            elif method == 'DELETE':
                response = requests.delete(url, headers=self._headers(), timeout=30)
            else:
                raise ValueError(f'Unknown method: {method}')

            return response.json()

        except requests.exceptions.Timeout:
            return {'success': False, 'error': 'Request timeout'}
        except requests.exceptions.ConnectionError:
            return {'success': False, 'error': f'Cannot connect to {self.base_url}'}
        except (requests.exceptions.RequestException, ValueError) as e:
            return {'success': False, 'error': str(e)}

    # =========================================================================
    # Health
    # =========================================================================

    def health(self) -> Dict[str, Any]:
        """Check service health."""
        return self._request('GET', '/health')

    def is_online(self) -> bool:
        """Check if service is online."""
        result = self.health()
        return result.get('status') == 'online'

    # =========================================================================
    # Printers
    # =========================================================================

    def list_printers(self) -> List[Dict[str, Any]]:
        """List all printers."""
        result = self._request('GET', '/api/printers')
        return result.get('printers', [])

    def get_printer(self, printer_id: str) -> Optional[Dict[str, Any]]:
        """Get printer by ID."""
        result = self._request('GET', f'/api/printers/{printer_id}')
        return result.get('printer') if result.get('success') else None

    def add_printer(self, name: str, printer_type: str = 'zebra_mobile', **kwargs) -> Dict[str, Any]:
        """
        Add a new printer.

        Args:
            name: Printer display name
            printer_type: Type (zebra_mobile, cpcl, zebra, epson)
            **kwargs: Additional options (model, host, port, etc.)
        """
        data = {
            'name': name,
            'printer_type': printer_type,
            **kwargs
        }
        return self._request('POST', '/api/printers', data)

    def delete_printer(self, printer_id: str) -> Dict[str, Any]:
        """Delete a printer."""
        return self._request('DELETE', f'/api/printers/{printer_id}')

    def test_connection(self, printer_id: str) -> Dict[str, Any]:
        """Test printer connection (quick TCP check)."""
        return self._request('POST', f'/api/printers/{printer_id}/test')

    def get_status(self, printer_id: str) -> Dict[str, Any]:
        """Get printer status."""
        return self._request('GET', f'/api/printers/{printer_id}/status')

    def connect_printer(self, printer_id: str) -> Dict[str, Any]:
        """Select the printer used for auto-print."""
        return self._request('POST', f'/api/printers/{printer_id}/connect')

    def disconnect_printer(self) -> Dict[str, Any]:
        """Release the connected printer."""
        return self._request('POST', '/api/printers/disconnect')

    def test_print(self, printer_id: str) -> Dict[str, Any]:
        """Print the diagnostic label."""
        return self._request('POST', f'/api/printers/{printer_id}/test-print')

    # =========================================================================
    # Scan Session
    # =========================================================================

    def session(self) -> Dict[str, Any]:
        """Current scan state."""
        return self._request('GET', '/api/session')

    def scan(self, serial: str) -> Dict[str, Any]:
        """Submit one scanned serial."""
        return self._request('POST', '/api/session/scan', {'serial': serial})

    def print_label(self) -> Dict[str, Any]:
        """Print (or retry) the validated pair."""
        return self._request('POST', '/api/session/print')

    def clear(self) -> Dict[str, Any]:
        """Clear both serial fields."""
        return self._request('POST', '/api/session/clear')

    def refresh(self) -> Dict[str, Any]:
        """Re-read the label configuration."""
        return self._request('POST', '/api/session/refresh')

    def new_session(self) -> Dict[str, Any]:
        """Start a new session."""
        return self._request('POST', '/api/session/new')

    def set_protocol(self, protocol: str) -> Dict[str, Any]:
        """Select the printer protocol (CPCL, ZPL, ESC/POS)."""
        return self._request('PUT', '/api/session/protocol', {'protocol': protocol})

    # =========================================================================
    # Configuration
    # =========================================================================

    def get_label_config(self, name: str = 'default') -> Optional[Dict[str, Any]]:
        """Get a label configuration."""
        result = self._request('GET', f'/api/label-configs/{name}')
        return result.get('config') if result.get('success') else None

    def save_label_config(self, name: str = 'default', **settings) -> Dict[str, Any]:
        """Create or update a label configuration."""
        return self._request('PUT', f'/api/label-configs/{name}', settings)

    def get_prefixes(self) -> List[str]:
        """List valid serial prefixes."""
        result = self._request('GET', '/api/prefixes')
        return result.get('prefixes', [])

    def set_prefixes(self, prefixes: List[str]) -> Dict[str, Any]:
        """Replace the valid serial prefixes."""
        return self._request('PUT', '/api/prefixes', {'prefixes': prefixes})

    def list_titles(self) -> List[Dict[str, Any]]:
        """List prefix -> title mappings."""
        result = self._request('GET', '/api/titles')
        return result.get('titles', [])

    def add_title(self, prefix: str, title: str) -> Dict[str, Any]:
        """Add or replace a prefix -> title mapping."""
        return self._request('POST', '/api/titles', {'prefix': prefix, 'title': title})

    def delete_title(self, prefix: str) -> Dict[str, Any]:
        """Remove a prefix -> title mapping."""
        return self._request('DELETE', f'/api/titles/{prefix}')

    # =========================================================================
    # Counters, History & Errors
    # =========================================================================

    def counters(self) -> Dict[str, Any]:
        """Printed-label counters per prefix."""
        result = self._request('GET', '/api/counters')
        return result.get('counters', {})

    def reset_counters(self) -> Dict[str, Any]:
        """Reset all counters."""
        return self._request('POST', '/api/counters/reset')

    def history(self, limit: int = 50) -> List[Dict[str, Any]]:
        """List recent printed labels."""
        result = self._request('GET', f'/api/history?limit={limit}')
        return result.get('records', [])

    def errors(self) -> List[Dict[str, Any]]:
        """List error log entries."""
        result = self._request('GET', '/api/errors')
        return result.get('errors', [])

    def diagnostics(self) -> Dict[str, Any]:
        """Total scans, labels printed and error count."""
        return self._request('GET', '/api/diagnostics')

    def export_history(self) -> Optional[str]:
        """Print history as CSV text, or None when the service is unreachable."""
        try:
            response = requests.get(f'{self.base_url}/api/history/export', timeout=30)
        except requests.exceptions.RequestException:
            return None
        return response.text if response.ok else None

    # =========================================================================
    # Preview
    # =========================================================================

    def preview(self, serial1: str, serial2: str, title: str = None,
                config: str = 'default', scale: int = 2) -> Optional[bytes]:
        """PNG preview of a label, or None when the service is unreachable."""
        params = {'serial1': serial1, 'serial2': serial2, 'config': config, 'scale': scale}
        if title:
            params['title'] = title
        try:
            response = requests.get(f'{self.base_url}/api/preview', params=params, timeout=30)
        except requests.exceptions.RequestException:
            return None
        return response.content if response.ok else None
