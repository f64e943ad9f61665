"""
ScanPrint Service Models
"""

from .printer import Printer
from .job import PrintJob
from .label_config import LabelConfiguration
from .layout import Layout
from .records import PrefixTitleEntry, PrintRecord, AuditEntry

__all__ = [
    'Printer', 'PrintJob', 'LabelConfiguration', 'Layout',
    'PrefixTitleEntry', 'PrintRecord', 'AuditEntry',
]
