"""
Printer Protocols
=================

The scan station targets one printer language at a time. Only CPCL, the
text-command protocol, has a label serializer; any other language is
carried as ``OtherProtocol`` so the workflow can refuse it explicitly.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class TextCommandProtocol:
    """CPCL line-oriented text commands."""

    name: str = 'CPCL'


@dataclass(frozen=True)
class OtherProtocol:
    """A printer language without a serializer (ZPL, ESC/POS, ...)."""

    name: str


PrintProtocol = Union[TextCommandProtocol, OtherProtocol]

TEXT_COMMAND = TextCommandProtocol()


def parse_protocol(value: str) -> PrintProtocol:
    """
    Parse a protocol name as shown in the UI or a printer type table.

    Unknown names select CPCL.
    """
    upper = (value or '').upper()
    if 'CPCL' in upper:
        return TEXT_COMMAND
    if 'ZPL' in upper:
        return OtherProtocol('ZPL')
    if 'ESC' in upper or 'POS' in upper:
        return OtherProtocol('ESC/POS')
    return TEXT_COMMAND
