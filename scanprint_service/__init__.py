"""
ScanPrint Service
=================

Scan station service for dual-serial Code 128 labels on CPCL printers.

The operator scans two serial numbers; each is validated against the
configured prefixes, and once both are valid a single label carrying the
product title and both serials as Code 128 barcodes is printed.

Usage:
    python -m scanprint_service

API Endpoints:
    GET  /api/session             - Scan state
    POST /api/session/scan        - Submit a scanned serial
    POST /api/session/print       - Retry print of the validated pair
    POST /api/session/clear       - Clear both fields
    GET  /api/printers            - List printers
    POST /api/printers/{id}/connect - Select printer
    PUT  /api/label-configs/{name}  - Label settings
    PUT  /api/prefixes            - Valid serial prefixes
    GET  /api/preview             - Label preview (PNG)
"""

__version__ = '1.0.0'
__author__ = 'EGS Software AG'
