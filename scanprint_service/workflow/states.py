"""
Scan Workflow States
====================

    Idle -> FirstPending -> FirstValid -> SecondPending -> BothValid -> Printing -> Idle
              |  invalid       ^              |  invalid      ^            |  transport
              v                |              v               |            v  failure
             Idle              +------- FirstValid            +------ BothValid

Each state is an immutable value. Pending and Printing states double as
in-flight markers: while one is current, new scans and print requests are
ignored.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional


class SlotKind:
    EMPTY = 'empty'
    PENDING = 'pending'
    VALID = 'valid'


@dataclass(frozen=True)
class ScanSlot:
    """Content of one of the two serial fields."""

    kind: str = SlotKind.EMPTY
    value: Optional[str] = None

    @classmethod
    def pending(cls, raw: str) -> 'ScanSlot':
        return cls(SlotKind.PENDING, raw)

    @classmethod
    def valid(cls, serial: str) -> 'ScanSlot':
        return cls(SlotKind.VALID, serial)

    def to_dict(self) -> Dict[str, Any]:
        return {'state': self.kind, 'value': self.value}


EMPTY_SLOT = ScanSlot()


class ScanState:
    """Base class of the workflow states."""

    stage = ''

    @property
    def first_slot(self) -> ScanSlot:
        return EMPTY_SLOT

    @property
    def second_slot(self) -> ScanSlot:
        return EMPTY_SLOT

    def to_dict(self) -> Dict[str, Any]:
        return {
            'stage': self.stage,
            'first': self.first_slot.to_dict(),
            'second': self.second_slot.to_dict(),
        }


@dataclass(frozen=True)
class Idle(ScanState):
    stage = 'idle'


@dataclass(frozen=True)
class FirstPending(ScanState):
    raw: str
    stage = 'first_pending'

    @property
    def first_slot(self) -> ScanSlot:
        return ScanSlot.pending(self.raw)


@dataclass(frozen=True)
class FirstValid(ScanState):
    serial: str
    stage = 'first_valid'

    @property
    def first_slot(self) -> ScanSlot:
        return ScanSlot.valid(self.serial)


@dataclass(frozen=True)
class SecondPending(ScanState):
    first: str
    raw: str
    stage = 'second_pending'

    @property
    def first_slot(self) -> ScanSlot:
        return ScanSlot.valid(self.first)

    @property
    def second_slot(self) -> ScanSlot:
        return ScanSlot.pending(self.raw)


@dataclass(frozen=True)
class BothValid(ScanState):
    first: str
    second: str
    stage = 'both_valid'

    @property
    def first_slot(self) -> ScanSlot:
        return ScanSlot.valid(self.first)

    @property
    def second_slot(self) -> ScanSlot:
        return ScanSlot.valid(self.second)


@dataclass(frozen=True)
class Printing(ScanState):
    first: str
    second: str
    stage = 'printing'

    @property
    def first_slot(self) -> ScanSlot:
        return ScanSlot.valid(self.first)

    @property
    def second_slot(self) -> ScanSlot:
        return ScanSlot.valid(self.second)
