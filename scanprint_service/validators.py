"""
Remote Prefix Validator
=======================

Optional second opinion on a scanned serial from a central service.

The service is expected to answer ``POST <base_url>/validate`` with
``{"serial": "..."}`` by returning ``{"valid": true|false}``. Any failure
to get that answer raises ``ValidationError`` with reason
REMOTE_CHECK_FAILED; the scan workflow treats it as a rejection.
"""

import requests

from .exceptions import ValidationError


class RemotePrefixValidator:
    """Validate serials against a remote prefix service."""

    def __init__(self, base_url: str, timeout: int = 10, api_key: str = None):
        """
        Args:
            base_url: Base URL of the validation service
            timeout: Request timeout in seconds
            api_key: Optional bearer token
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.api_key = api_key

    def _headers(self):
        headers = {'Content-Type': 'application/json'}
        if self.api_key:
            headers['Authorization'] = f'Bearer {self.api_key}'
        return headers

    def is_valid(self, serial: str) -> bool:
        """Ask the service whether ``serial`` carries a valid prefix."""
        try:
            response = requests.post(
                f'{self.base_url}/validate',
                json={'serial': serial},
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout:
            raise ValidationError.remote_check_failed(serial, 'Request timeout')
        except requests.exceptions.ConnectionError:
            raise ValidationError.remote_check_failed(serial, f'Cannot connect to {self.base_url}')
        except requests.exceptions.RequestException as e:
            raise ValidationError.remote_check_failed(serial, str(e))
        except ValueError:
            raise ValidationError.remote_check_failed(serial, 'Invalid response from validation service')

        if not isinstance(data, dict) or 'valid' not in data:
            raise ValidationError.remote_check_failed(serial, 'Invalid response from validation service')
        return bool(data['valid'])
