"""
Custom exceptions for ScanPrint Service.

Exception Hierarchy:
    ScanPrintError (base)
    ├── ValidationError     - scanned serial rejected (blocking)
    ├── PrintTransportError - label could not be transmitted (blocking)
    ├── RecordingError      - printed, but counter/history write failed (non-blocking)
    └── ConfigurationError  - no prefixes configured, scanning disabled (fail-closed)

Each error carries a ``reason`` code naming the specific failure, so callers
can branch on it without parsing messages.
"""

from typing import Optional, Dict, Any


class ScanPrintError(Exception):
    """Base exception for all ScanPrint Service errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# BLOCKING ERRORS - abort the transition in progress
# =============================================================================

class ValidationError(ScanPrintError):
    """A scanned serial number was rejected."""

    EMPTY = 'empty'
    DUPLICATE = 'duplicate'
    PREFIX_MISMATCH = 'prefix_mismatch'
    REMOTE_CHECK_FAILED = 'remote_check_failed'

    def __init__(self, reason: str, message: str, serial: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        error_details = dict(details or {})
        error_details['reason'] = reason
        if serial is not None:
            error_details['serial'] = serial
        super().__init__(message, error_details)
        self.reason = reason
        self.serial = serial

    @classmethod
    def empty(cls) -> 'ValidationError':
        return cls(cls.EMPTY, 'Serial number cannot be empty', serial='')

    @classmethod
    def duplicate(cls, serial: str) -> 'ValidationError':
        return cls(cls.DUPLICATE, 'Duplicate serial number detected', serial=serial)

    @classmethod
    def prefix_mismatch(cls, serial: str, remote: bool = False) -> 'ValidationError':
        if remote:
            message = 'Invalid barcode prefix - validation failed'
        else:
            message = 'Invalid barcode prefix - serial does not match configured prefixes'
        return cls(cls.PREFIX_MISMATCH, message, serial=serial, details={'remote': remote})

    @classmethod
    def remote_check_failed(cls, serial: str, error: str) -> 'ValidationError':
        return cls(
            cls.REMOTE_CHECK_FAILED,
            'Validation could not be performed - please check prefix configuration',
            serial=serial,
            details={'error': error},
        )


class PrintTransportError(ScanPrintError):
    """The label job could not be handed to the printer."""

    NOT_CONNECTED = 'not_connected'
    PROTOCOL_MISMATCH = 'protocol_mismatch'
    TRANSFER_FAILED = 'transfer_failed'

    def __init__(self, reason: str, message: str, printer: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        error_details = dict(details or {})
        error_details['reason'] = reason
        if printer:
            error_details['printer'] = printer
        super().__init__(message, error_details)
        self.reason = reason
        self.printer = printer

    @classmethod
    def not_connected(cls) -> 'PrintTransportError':
        return cls(
            cls.NOT_CONNECTED,
            'Printer not connected. Please connect a printer on the Devices page.',
        )

    @classmethod
    def protocol_mismatch(cls, protocol_name: str) -> 'PrintTransportError':
        return cls(
            cls.PROTOCOL_MISMATCH,
            f'Auto-print only works with CPCL protocol (selected: {protocol_name})',
            details={'protocol': protocol_name},
        )

    @classmethod
    def transfer_failed(cls, error: str, printer: Optional[str] = None) -> 'PrintTransportError':
        return cls(cls.TRANSFER_FAILED, f'Print failed: {error}', printer=printer)


# =============================================================================
# NON-BLOCKING ERRORS - the label is already printed
# =============================================================================

class RecordingError(ScanPrintError):
    """Bookkeeping after a successful print failed."""

    COUNTER_INCREMENT_FAILED = 'counter_increment_failed'
    LOG_APPEND_FAILED = 'log_append_failed'

    def __init__(self, reason: str, error: str):
        if reason == self.COUNTER_INCREMENT_FAILED:
            message = f'Label printed, but the counter was not updated: {error}'
        else:
            message = f'Label printed, but the print record was not saved: {error}'
        super().__init__(message, {'reason': reason, 'error': error})
        self.reason = reason


# =============================================================================
# FAIL-CLOSED ERRORS
# =============================================================================

class ConfigurationError(ScanPrintError):
    """Scanning is disabled until the station is configured."""

    NO_PREFIXES_CONFIGURED = 'no_prefixes_configured'

    def __init__(self, reason: str = NO_PREFIXES_CONFIGURED):
        message = 'Configuration required - no valid prefixes configured. Add prefixes in Label Settings.'
        super().__init__(message, {'reason': reason})
        self.reason = reason
