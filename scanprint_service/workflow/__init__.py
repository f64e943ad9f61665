"""
Scan Workflow
=============

Two-slot scan state machine driving validation and auto-print.
"""

from .notices import Notice
from .scan_workflow import ScanWorkflow, ScanOutcome, PrintOutcome, normalize_scanned_value
from .states import (
    ScanState, ScanSlot, SlotKind, Idle, FirstPending, FirstValid, SecondPending, BothValid, Printing,
)

__all__ = [
    'Notice', 'ScanWorkflow', 'ScanOutcome', 'PrintOutcome', 'normalize_scanned_value',
    'ScanState', 'ScanSlot', 'SlotKind', 'Idle', 'FirstPending', 'FirstValid',
    'SecondPending', 'BothValid', 'Printing',
]
