"""
ScanPrint Service Configuration
"""

import os

# =============================================================================
# Server Configuration
# =============================================================================

PORT = int(os.environ.get('SCANPRINT_PORT', 5100))
HOST = os.environ.get('SCANPRINT_HOST', '0.0.0.0')
DEBUG = os.environ.get('SCANPRINT_DEBUG', 'false').lower() == 'true'

# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = os.environ.get('SCANPRINT_LOG_LEVEL', 'INFO').upper()
LOG_FILE_ENABLED = os.environ.get('SCANPRINT_LOG_FILE', 'false').lower() == 'true'

# =============================================================================
# Printer Defaults
# =============================================================================

DEFAULT_TIMEOUT = 30  # seconds

# CPCL/Network printer default port
CPCL_PORT = 9100

# Protocol selected for the scan station at startup (CPCL, ZPL, ESC/POS)
DEFAULT_PROTOCOL = os.environ.get('SCANPRINT_PROTOCOL', 'CPCL')

# =============================================================================
# Scan Workflow
# =============================================================================

# Name of the label configuration record read at session start
CONFIG_NAME = os.environ.get('SCANPRINT_CONFIG_NAME', 'default')

# Optional remote prefix check (None = local prefix registry only)
REMOTE_VALIDATOR_URL = os.environ.get('SCANPRINT_REMOTE_VALIDATOR_URL') or None

# Title printed when no prefix mapping matches
FALLBACK_TITLE = 'Dual Band'

# Labels per print job
PRINT_QUANTITY = 1

# =============================================================================
# Supported Printer Types
# =============================================================================

PRINTER_TYPES = {
    'zebra_mobile': {
        'name': 'Zebra Mobile Label Printer (CPCL)',
        'handler': 'cpcl',
        'protocol': 'CPCL',
        'connection': ['network', 'usb', 'bluetooth'],
        'default_port': 9100,
        'models': ['ZQ320', 'ZQ520', 'QLn220', 'iMZ220'],
    },
    'cpcl': {
        'name': 'Generic CPCL Label Printer',
        'handler': 'cpcl',
        'protocol': 'CPCL',
        'connection': ['network', 'usb'],
        'default_port': 9100,
    },
    # Listed so they can be registered, but no serializer targets them
    'zebra': {
        'name': 'Zebra Label Printer (ZPL)',
        'handler': None,
        'protocol': 'ZPL',
        'connection': ['network', 'usb'],
        'default_port': 9100,
    },
    'epson': {
        'name': 'Epson Thermal Printer (ESC/POS)',
        'handler': None,
        'protocol': 'ESC/POS',
        'connection': ['network', 'usb'],
        'default_port': 9100,
    },
}

# =============================================================================
# Storage Configuration
# =============================================================================

# Where to store configuration, registries and history (local file-based)
DATA_DIR = os.environ.get('SCANPRINT_DATA_DIR', os.path.expanduser('~/.scanprint_service'))

# Print history entries kept in storage
HISTORY_LIMIT = 1000
