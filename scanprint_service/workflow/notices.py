"""
Operator Notices
================

Feedback shown to the operator at the scan station (toasts, beeps).
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional


@dataclass(frozen=True)
class Notice:
    """One piece of operator feedback."""

    level: str  # success, info, warning, error
    title: str
    message: str = ''
    code: Optional[str] = None
    blocking: bool = False  # must be acknowledged before the operator carries on

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def success(cls, title: str, message: str = '') -> 'Notice':
        return cls('success', title, message)

    @classmethod
    def info(cls, title: str, message: str = '', code: Optional[str] = None) -> 'Notice':
        return cls('info', title, message, code)

    @classmethod
    def warning(cls, title: str, message: str = '', code: Optional[str] = None) -> 'Notice':
        return cls('warning', title, message, code)

    @classmethod
    def error(cls, title: str, message: str = '', code: Optional[str] = None) -> 'Notice':
        return cls('error', title, message, code, blocking=True)
