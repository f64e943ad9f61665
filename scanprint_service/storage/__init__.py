"""
ScanPrint Service Storage
=========================

File-backed collaborators of the scan workflow.
"""

from .configs import LabelConfigStore
from .history import CounterStore, PrintHistory, AuditLog
from .printers import PrinterStore
from .registries import PrefixRegistry, TitleRegistry, DEFAULT_TITLES

__all__ = [
    'LabelConfigStore', 'CounterStore', 'PrintHistory', 'AuditLog',
    'PrinterStore', 'PrefixRegistry', 'TitleRegistry', 'DEFAULT_TITLES',
]
